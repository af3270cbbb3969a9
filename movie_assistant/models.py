"""
Data models for the movie assistant.
Defines the filter context carried across conversational turns and the
request-scoped analysis/response records. Candidate titles stay plain dicts
because every provider returns a differently shaped record.
"""

import math  # reject NaN/infinite numbers in untrusted input

# Import dataclass helpers to define immutable "record-like" classes without boilerplate
from dataclasses import dataclass, field, fields, asdict, replace  # auto-generated __init__/__repr__
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Mapping, Optional  # containers and optional values

from rapidfuzz import process, fuzz  # fuzzy snapping of free-form genre names

# Loosely-typed title record as returned by a provider (or enriched/ranked copies of it)
Candidate = Dict[str, Any]

# Canonical genre enumeration the analyzers and filters agree on
GENRE_CANON: List[str] = [
	'Action', 'Adventure', 'Animation', 'Comedy', 'Crime', 'Documentary', 'Drama', 'Family', 'Fantasy',
	'History', 'Horror', 'Music', 'Mystery', 'Romance', 'Sci-Fi', 'Thriller', 'War', 'Western',
]

# Natural-language language names (and common misspellings) -> ISO-639-1 codes
LANG_MAP: Dict[str, str] = {
	'korean': 'ko', 'korian': 'ko', 'korea': 'ko', 'koreanlang': 'ko',
	'english': 'en', 'eng': 'en', 'american': 'en', 'us': 'en',
	'arabic': 'ar',
	'german': 'de',
	'french': 'fr',
	'japanese': 'ja',
	'chinese': 'zh',
	'hindi': 'hi',
	'spanish': 'es',
}

# Genre variants a model or user may produce that fuzzy matching would miss
GENRE_ALIASES: Dict[str, str] = {
	'sci fi': 'Sci-Fi',
	'scifi': 'Sci-Fi',
	'science fiction': 'Sci-Fi',
	'science-fiction': 'Sci-Fi',
	'musical': 'Music',
	'historical': 'History',
	'romantic': 'Romance',
	'animated': 'Animation',
}

_NULL_STRINGS = {'', 'null', 'none', 'n/a', 'any'}
_TV_TYPES = {'tv', 'series', 'tv series', 'tvseries', 'show', 'tv show'}


def _clean_str(value: Any) -> Optional[str]:
	"""Return a stripped string, or None for non-strings and null-ish placeholders."""
	if not isinstance(value, str):
		return None
	value = value.strip()
	if value.lower() in _NULL_STRINGS:
		return None
	return value


def _to_float(value: Any) -> Optional[float]:
	"""Finite float from a number or numeric string; NaN, infinities and junk give None."""
	if isinstance(value, bool):
		return None
	if isinstance(value, (int, float)):
		try:
			number = float(value)
		except OverflowError:  # int too large for a float
			return None
	else:
		text = _clean_str(value)
		if text is None:
			return None
		try:
			number = float(text.rstrip('+'))  # tolerate "7+"
		except ValueError:
			return None
	return number if math.isfinite(number) else None


def _to_int(value: Any) -> Optional[int]:
	if isinstance(value, bool):  # bool is an int subclass; never a year
		return None
	if isinstance(value, int):
		return value
	number = _to_float(value)
	if number is None:
		return None
	try:
		return int(number)
	except (ValueError, OverflowError):
		return None


def normalize_language(value: Any) -> Optional[str]:
	"""
	Map a language name ("Korean", "korian") to its ISO code; pass short codes through lowercased.
	Unknown long names are kept as-is (lowercased) so prefix matching can still apply.
	"""
	text = _clean_str(value)
	if text is None:
		return None
	low = text.lower()
	if low in LANG_MAP:
		return LANG_MAP[low]
	return low


def normalize_genre(value: Any) -> Optional[str]:
	"""Snap a free-form genre to GENRE_CANON; None when nothing is close enough."""
	text = _clean_str(value)
	if text is None:
		return None
	low = text.lower()
	if low in GENRE_ALIASES:
		return GENRE_ALIASES[low]
	for g in GENRE_CANON:
		if g.lower() == low:
			return g
	match = process.extractOne(low, [g.lower() for g in GENRE_CANON], scorer=fuzz.ratio, score_cutoff=85)
	if match:
		return GENRE_CANON[match[2]]
	return None


def normalize_type(value: Any) -> Optional[str]:
	text = _clean_str(value)
	if text is None:
		return None
	low = text.lower()
	if low in ('movie', 'movies', 'film', 'films'):
		return 'movie'
	if low in _TV_TYPES:
		return 'tv'
	return None


@dataclass(frozen=True)
class FilterContext:
	"""
	Structured search constraints derived from user text.
	Immutable once built; merge() and from_mapping() return new instances.
	"""
	type: Optional[str] = None  # "movie" | "tv" | None
	genre: Optional[str] = None  # one of GENRE_CANON
	language: Optional[str] = None  # ISO-639-1 code, e.g. "ko"
	year: Optional[int] = None  # exact release year
	year_after: Optional[int] = None  # strictly after
	year_before: Optional[int] = None  # strictly before
	min_rating: Optional[float] = None  # 0-10 floor, applied after enrichment
	actor: Optional[str] = None  # actor name as typed
	director: Optional[str] = None  # director name as typed
	theme: Optional[str] = None  # synopsis keyword (keyword analyzer only)

	@classmethod
	def from_mapping(cls, data: Any) -> 'FilterContext':
		"""
		Decode an untrusted mapping (model output or caller context) with defaults.
		Anything missing, mistyped or unrecognized becomes None.
		"""
		if not isinstance(data, Mapping):
			return cls()
		return cls(
			type=normalize_type(data.get('type')),
			genre=normalize_genre(data.get('genre')),
			language=normalize_language(data.get('language')),
			year=_to_int(data.get('year')),
			year_after=_to_int(data.get('year_after')),
			year_before=_to_int(data.get('year_before')),
			min_rating=_to_float(data.get('min_rating')),
			actor=_clean_str(data.get('actor')),
			director=_clean_str(data.get('director')),
			theme=_clean_str(data.get('theme')),
		)

	def merge(self, prior: Optional['FilterContext']) -> 'FilterContext':
		"""Per field: this context's value wins, else the prior value, else None."""
		if prior is None:
			return self
		updates = {}
		for f in fields(self):
			if getattr(self, f.name) is None:
				updates[f.name] = getattr(prior, f.name)
		return replace(self, **updates)

	def has_year_constraint(self) -> bool:
		return bool(self.year or self.year_after or self.year_before)

	def has_any_constraint(self) -> bool:
		"""True when any distinguishing filter was extracted (type and rating do not count)."""
		return bool(
			self.actor or self.director or self.genre or self.language or self.has_year_constraint()
		)

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


@dataclass
class Analysis:
	"""What the analyzer understood from one user turn."""
	context: FilterContext  # merged filters for this turn
	summary: Optional[str] = None  # one-line intent, when the analyzer provides one
	is_broad: bool = False  # "best ever"-style query without specific constraints


@dataclass
class ChatResponse:
	"""Final payload returned to the caller for one turn."""
	summary: str
	context: FilterContext
	results: List[Candidate] = field(default_factory=list)
	followup: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			'summary': self.summary,
			'context': self.context.to_dict(),
			'results': self.results,
			'followup': self.followup,
		}

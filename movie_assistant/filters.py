"""
Local filter module.
Deterministic predicate filters over candidate dicts. All functions are pure:
the input list is never modified.
"""

from typing import List, Optional

from loguru import logger

from .models import LANG_MAP, Candidate, FilterContext


def resolve_year(candidate: Candidate) -> Optional[int]:
	"""Release year from startYear, else the first four characters of releaseDate."""
	start = candidate.get('startYear')
	if start is not None and start != '':
		try:
			return int(start)
		except (TypeError, ValueError):
			return None
	release = candidate.get('releaseDate')
	if release:
		try:
			return int(str(release)[:4])
		except ValueError:
			return None
	return None


def _lower_list(value) -> List[str]:
	if not isinstance(value, (list, tuple, set)):
		return []
	return [str(v).lower() for v in value if v]


def _matches_language(candidate: Candidate, language: str) -> bool:
	code = language.lower()
	langs = _lower_list(candidate.get('spokenLanguages'))
	if code in langs:
		return True
	# a language name starting with the code ("ko" -> "korean") or naming it ("de" -> "german")
	prefixes = [code] + [name for name, iso in LANG_MAP.items() if iso == code]
	return any(s.startswith(p) for s in langs for p in prefixes)


def apply_filters(candidates: List[Candidate], ctx: FilterContext) -> List[Candidate]:
	"""
	Apply the context's filters in fixed order: type, language, genre, exact year,
	year after, year before, theme.
	Missing year data passes the range filters but fails the exact-year filter.
	"""
	out = list(candidates)
	before = len(out)

	if ctx.type in ('movie', 'tv'):
		out = [c for c in out if ctx.type in str(c.get('type') or '').lower()]

	if ctx.language:
		out = [c for c in out if _matches_language(c, ctx.language)]

	if ctx.genre:
		wanted = ctx.genre.lower()
		out = [c for c in out if wanted in _lower_list(c.get('genres'))]

	if ctx.year:
		out = [c for c in out if resolve_year(c) == ctx.year]

	if ctx.year_after:
		out = [c for c in out if resolve_year(c) is None or resolve_year(c) > ctx.year_after]

	if ctx.year_before:
		out = [c for c in out if resolve_year(c) is None or resolve_year(c) < ctx.year_before]

	if ctx.theme:
		theme = ctx.theme.lower()
		out = [
			c for c in out
			if theme in str(c.get('description') or c.get('overview') or '').lower()
		]

	logger.debug(f"[Filter] {before} -> {len(out)} candidates")
	return out


def best_rating(candidate: Candidate) -> float:
	"""Best available rating: enriched imdbRating, else the provider's averageRating, else 0."""
	for key in ('imdbRating', 'averageRating'):
		value = candidate.get(key)
		if value is None:
			continue
		try:
			return float(value)
		except (TypeError, ValueError):
			continue
	return 0.0


def apply_min_rating(candidates: List[Candidate], min_rating: Optional[float]) -> List[Candidate]:
	"""Rating floor; only meaningful after enrichment has filled imdbRating."""
	if not min_rating:
		return list(candidates)
	out = [c for c in candidates if best_rating(c) >= min_rating]
	logger.debug(f"[Filter] min_rating {min_rating}: {len(candidates)} -> {len(out)} candidates")
	return out

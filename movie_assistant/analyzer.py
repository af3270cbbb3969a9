"""
Query analysis module.
Turns free text into a FilterContext plus a one-line intent summary.
Two variants share the Analyzer interface: a model-backed extractor and a
keyword/regex scanner that needs no outbound calls.
"""

import re  # regex for year/rating extraction
from datetime import date  # resolve "this year" in the prompt
from typing import Dict, List, Optional  # type annotations

from loguru import logger  # console logging

from .llm import ChatClient, parse_model_json  # model client + defensive JSON decode
from .models import Analysis, FilterContext, GENRE_CANON, LANG_MAP  # structured filters


class Analyzer:
	"""Interface: analyze(text, prior) -> Analysis. Must not raise on bad model output."""

	def analyze(self, text: str, prior: Optional[FilterContext] = None) -> Analysis:
		raise NotImplementedError


ANALYSIS_SYSTEM = 'You extract clean, minimal JSON for movie searching.'

ANALYSIS_PROMPT = """
You are "Dobby", a movie-search assistant. Extract filters from user text.
Return ONLY JSON:

{{
  "type": "movie" | "tv" | null,
  "genre": "<One of {genres} or null>",
  "language": "<ISO-639-1 like en, ko, de or null>",
  "year": "<exact year or null>",
  "year_after": "<min year or null>",
  "year_before": "<max year or null>",
  "min_rating": "<0-10 or null>",
  "actor": "<actor name or null>",
  "director": "<director name or null>",
  "is_broad_best": true|false,
  "summary": "<short one-line intent>"
}}

Notes:
- Map natural words like "Korean/korian" to ISO code (ko).
- If user says "after 2015" -> year_after=2016 (strictly after). If "since 2015" -> year_after=2015.
- If user says "before 2000" -> year_before=1999 (strict).
- If user says "this year" -> year = {current_year}.
- If the query is broad like "best movies ever", set is_broad_best=true.
User text: "{text}"
"""


class LLMAnalyzer(Analyzer):
	"""
	Delegates filter extraction to a chat model.
	The reply is decoded with defaults (bad JSON -> empty filters) and merged with the prior context.
	"""

	def __init__(self, client: ChatClient, today: Optional[date] = None):
		self.client = client
		self._today = today  # fixed date for tests; None means "now"

	def build_prompt(self, text: str) -> str:
		current_year = (self._today or date.today()).year
		return ANALYSIS_PROMPT.format(genres=', '.join(GENRE_CANON), current_year=current_year, text=text)

	def analyze(self, text: str, prior: Optional[FilterContext] = None) -> Analysis:
		logger.debug(f"[Analyzer] LLM analysis of: '{text}'")
		raw = self.client.complete(ANALYSIS_SYSTEM, self.build_prompt(text), max_tokens=400)
		parsed = parse_model_json(raw, {})

		extracted = FilterContext.from_mapping(parsed)
		context = extracted.merge(prior)

		summary = parsed.get('summary')
		is_broad = str(parsed.get('is_broad_best')).lower() == 'true'  # model may send "true"
		logger.info(f"[Analyzer] Filters: {context.to_dict()} | broad={is_broad}")
		return Analysis(
			context=context,
			summary=summary.strip() if isinstance(summary, str) and summary.strip() else None,
			is_broad=is_broad,
		)


class KeywordAnalyzer(Analyzer):
	"""
	Offline analyzer: scans fixed keyword lists and two regexes.
	The prior context is ignored; each turn stands on its own.
	"""

	THEMES: List[str] = ['spy', 'fbi', 'drug', 'drugs', 'cartel', 'heist', 'war', 'revenge', 'assassin', 'gangster']
	GENRES: Dict[str, str] = {
		'action': 'Action',
		'drama': 'Drama',
		'comedy': 'Comedy',
		'thriller': 'Thriller',
		'crime': 'Crime',
		'sci-fi': 'Sci-Fi',
		'horror': 'Horror',
		'romance': 'Romance',
		'adventure': 'Adventure',
		'war': 'War',
		'fantasy': 'Fantasy',
	}
	LANGUAGES: Dict[str, str] = {
		name: LANG_MAP[name]
		for name in ('korean', 'german', 'japanese', 'chinese', 'french', 'spanish', 'hindi', 'arabic')
	}
	DEFAULT_MIN_RATING = 6.8

	RE_YEAR = re.compile(r"(19|20)\d{2}")  # 1990, 2015 -> year_after
	RE_RATING = re.compile(r"(\d\.\d|\d)\+")  # 8+, 7.5+

	def analyze(self, text: str, prior: Optional[FilterContext] = None) -> Analysis:
		q = text.lower()
		logger.debug(f"[Analyzer] Keyword analysis of: '{q}'")

		# Last match in list order wins, for every keyword list
		theme = None
		for t in self.THEMES:
			if t in q:
				theme = t

		genre = None
		for key, canonical in self.GENRES.items():
			if key in q:
				genre = canonical

		language = None
		for name, code in self.LANGUAGES.items():
			if name in q:
				language = code

		m = self.RE_YEAR.search(q)
		year_after = int(m.group(0)) if m else None

		m = self.RE_RATING.search(q)
		min_rating = float(m.group(1)) if m else self.DEFAULT_MIN_RATING

		context = FilterContext(
			genre=genre,
			language=language,
			year_after=year_after,
			min_rating=min_rating,
			theme=theme,
		)
		logger.info(f"[Analyzer] Keyword filters: {context.to_dict()}")
		return Analysis(context=context)

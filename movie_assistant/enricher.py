"""
Enrichment module.
Adds imdbRating, metascore, year, poster and overview to each candidate, from
OMDb when a lookup succeeds and from the candidate's own fields otherwise.
"""

from typing import Any, Dict, List, Optional  # type hints

import requests  # OMDb HTTP calls

from loguru import logger  # console logging

from .errors import ProviderError  # non-success OMDb responses
from .filters import resolve_year  # shared year resolution
from .models import Candidate  # loosely-typed title record

ENRICH_CAP = 120  # lookups per request; the rest pass through unenriched
OMDB_URL = 'https://www.omdbapi.com/'


def _present(value: Any) -> bool:
	"""OMDb marks missing values with the string 'N/A'."""
	return value not in (None, '', 'N/A')


def _number(value: Any) -> Optional[float]:
	if not _present(value):
		return None
	try:
		return float(str(value).replace(',', ''))
	except ValueError:
		return None


def build_enriched(candidate: Candidate, extra: Optional[Dict[str, Any]] = None) -> Candidate:
	"""Merge supplementary OMDb fields into a copy of the candidate, falling back to primary fields."""
	extra = extra or {}
	imdb_rating = _number(extra.get('imdbRating'))
	if imdb_rating is None:
		imdb_rating = _number(candidate.get('averageRating'))
	enriched = dict(candidate)
	enriched.update({
		'imdbRating': imdb_rating,
		'metascore': _number(extra.get('Metascore')),
		'year': resolve_year(candidate),
		'poster': extra.get('Poster') if _present(extra.get('Poster')) else candidate.get('primaryImage'),
		'overview': extra.get('Plot') if _present(extra.get('Plot')) else (candidate.get('description') or ''),
	})
	return enriched


class Enricher:
	"""Interface: enrich(candidates) -> enriched candidate dicts, same order."""

	def enrich(self, candidates: List[Candidate]) -> List[Candidate]:
		raise NotImplementedError


class PassthroughEnricher(Enricher):
	"""Fills the enriched fields from the candidates themselves; no lookups."""

	def enrich(self, candidates: List[Candidate]) -> List[Candidate]:
		return [build_enriched(c) for c in candidates]


class OmdbEnricher(Enricher):
	"""
	Looks up each of the first `cap` candidates on OMDb by IMDb id, one call at a time.
	Failed lookups and missing ids leave the supplementary fields to the fallbacks.
	"""

	def __init__(
		self,
		api_key: Optional[str],
		cap: int = ENRICH_CAP,
		session: Optional[requests.Session] = None,
		timeout: Optional[float] = None,
	):
		self.api_key = api_key
		self.cap = cap
		self.timeout = timeout
		self.session = session or requests.Session()
		if not api_key:
			logger.warning("[Enricher] No OMDb key configured; candidates will not be enriched")

	def lookup(self, imdb_id: str) -> Dict[str, Any]:
		"""Fetch OMDb details for one id; raises ProviderError on any unusable answer."""
		resp = self.session.get(OMDB_URL, params={'i': imdb_id, 'apikey': self.api_key}, timeout=self.timeout)
		if not resp.ok:
			raise ProviderError('OMDb', f"{imdb_id} returned {resp.status_code}", status=resp.status_code)
		try:
			data = resp.json()
		except ValueError as e:
			raise ProviderError('OMDb', f"{imdb_id} returned invalid JSON: {e}") from e
		if not isinstance(data, dict) or data.get('Response') == 'False':
			raise ProviderError('OMDb', f"{imdb_id} not found")
		return data

	def _details(self, candidate: Candidate) -> Optional[Dict[str, Any]]:
		imdb_id = candidate.get('id') or candidate.get('imdbID')
		if not self.api_key or not imdb_id:
			return None
		try:
			return self.lookup(str(imdb_id))
		except ProviderError as e:
			logger.debug(f"[Enricher] {e}")
			return None

	def enrich(self, candidates: List[Candidate]) -> List[Candidate]:
		head = candidates[:self.cap]
		tail = candidates[self.cap:]
		out = []
		hits = 0
		for c in head:
			extra = self._details(c)
			hits += extra is not None
			out.append(build_enriched(c, extra))
		out.extend(build_enriched(c) for c in tail)
		logger.info(f"[Enricher] Enriched {len(head)} candidates ({hits} with details), {len(tail)} passed through")
		return out

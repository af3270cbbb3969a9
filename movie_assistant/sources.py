"""
Candidate source module.
Fetches candidate titles for a FilterContext, either from the IMDb catalog API
(RapidAPI host) or from a static catalog snapshot loaded once at startup.
"""

# Import standard libraries for JSON decoding and filesystem paths
import json  # read the static catalog
from pathlib import Path  # filesystem-safe paths
from typing import Any, Dict, List, Optional, Tuple  # type hints

# HTTP client for provider calls
import requests  # plain request/response calls, one per endpoint

# Console logging
from loguru import logger  # console logger

from .errors import ProviderError  # non-success provider responses
from .models import Analysis, Candidate  # analyzer output + loosely-typed title record

MIN_CANDIDATES = 40  # below this, top up with the most-popular list


class CandidateSource:
	"""Interface: fetch(analysis) -> list of candidate dicts (duplicates tolerated)."""

	def fetch(self, analysis: Analysis) -> List[Candidate]:
		raise NotImplementedError


class ImdbCandidateSource(CandidateSource):
	"""
	Builds the candidate list from the IMDb catalog API. Strategies are applied in
	order and their results concatenated:
	- actor -> autocomplete name id -> cast filmography
	- director -> autocomplete name id -> director filmography
	- broad intent or no distinguishing filter -> top-250 + most-popular lists
	- still fewer than MIN_CANDIDATES -> most-popular list as filler
	A failing call contributes nothing and never aborts the request.
	"""

	def __init__(
		self,
		api_key: Optional[str],
		host: str = 'imdb236.p.rapidapi.com',
		session: Optional[requests.Session] = None,
		timeout: Optional[float] = None,
	):
		self.host = host
		self.timeout = timeout
		self.session = session or requests.Session()  # reuse connections across calls
		self.session.headers.update({
			'X-Rapidapi-Key': api_key or '',
			'X-Rapidapi-Host': host,
		})

	def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Candidate]:
		"""GET a provider path; a single-object payload is wrapped in a list."""
		url = f"https://{self.host}{path}"
		params = {k: v for k, v in (params or {}).items() if v is not None and v != ''}  # drop empty params
		resp = self.session.get(url, params=params, timeout=self.timeout)
		if not resp.ok:
			raise ProviderError('RapidAPI', f"{path} {params or ''} returned {resp.status_code}", status=resp.status_code)
		try:
			payload = resp.json()
		except ValueError as e:
			raise ProviderError('RapidAPI', f"{path} returned invalid JSON: {e}") from e
		return payload if isinstance(payload, list) else [payload]

	def _safe_get(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Candidate]:
		try:
			items = self._get(path, params)
		except ProviderError as e:
			logger.warning(f"[Source] {e}")
			return []
		logger.debug(f"[Source] {path} -> {len(items)} items")
		return items

	def find_name_id(self, name: str) -> Optional[str]:
		"""Resolve a person's name to a provider id: first 'Name' hit, else the first hit."""
		if not name:
			return None
		items = self._safe_get('/api/imdb/autocomplete', {'query': name})
		hit = next((x for x in items if isinstance(x, dict) and x.get('type') == 'Name'), None)
		if hit is None and items and isinstance(items[0], dict):
			hit = items[0]
		name_id = hit.get('id') if hit else None
		logger.debug(f"[Source] Name '{name}' resolved to {name_id}")
		return name_id

	def fetch(self, analysis: Analysis) -> List[Candidate]:
		ctx = analysis.context
		candidates: List[Candidate] = []

		if ctx.actor:
			name_id = self.find_name_id(ctx.actor)
			if name_id:
				candidates.extend(self._safe_get(f"/api/imdb/cast/{name_id}/titles"))

		if ctx.director:
			name_id = self.find_name_id(ctx.director)
			if name_id:
				candidates.extend(self._safe_get(f"/api/imdb/director/{name_id}/titles"))

		if analysis.is_broad or not ctx.has_any_constraint():
			candidates.extend(self._safe_get('/api/imdb/top250-movies'))
			candidates.extend(self._safe_get('/api/imdb/most-popular-movies'))

		if len(candidates) < MIN_CANDIDATES:
			candidates.extend(self._safe_get('/api/imdb/most-popular-movies'))

		candidates = [c for c in candidates if isinstance(c, dict)]  # drop non-record payload entries
		logger.info(f"[Source] Collected {len(candidates)} candidates")
		return candidates


class Catalog:
	"""
	Read-only snapshot of a static catalog file (a JSON array of title records).
	Loaded once at startup and shared by every request.
	"""

	def __init__(self, records: List[Candidate]):
		self._records: Tuple[Candidate, ...] = tuple(records)

	@classmethod
	def load(cls, filepath: str) -> 'Catalog':
		filepath = Path(filepath)  # normalize path
		if not filepath.exists():
			raise FileNotFoundError(f"Catalog file not found: {filepath}")

		logger.info(f"[Catalog] Loading catalog from {filepath}...")
		with open(filepath, 'r', encoding='utf-8') as f:
			data = json.load(f)
		if not isinstance(data, list):
			raise ValueError(f"Catalog file must contain a JSON array: {filepath}")

		records = [r for r in data if isinstance(r, dict)]
		skipped = len(data) - len(records)
		if skipped:
			logger.warning(f"[Catalog] Skipped {skipped} non-object entries")
		logger.info(f"[Catalog] Catalog ready ({len(records)} titles)")
		return cls(records)

	def __len__(self) -> int:
		return len(self._records)

	def records(self) -> List[Candidate]:
		"""Shallow copies of the snapshot records."""
		return [dict(r) for r in self._records]


class CatalogCandidateSource(CandidateSource):
	"""Serves every request from the injected catalog snapshot; no network fan-out."""

	def __init__(self, catalog: Catalog):
		self.catalog = catalog

	def fetch(self, analysis: Analysis) -> List[Candidate]:
		candidates = self.catalog.records()
		logger.debug(f"[Source] Catalog provided {len(candidates)} candidates")
		return candidates

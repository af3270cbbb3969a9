"""
Ranking module.
Orders enriched candidates by relevance to the user's query. The model-backed
ranker asks a chat model for 0..100 scores; the offline ranker uses the
provider's rating as the score.
"""

import json
from typing import Dict, List

from loguru import logger

from .filters import resolve_year
from .llm import ChatClient, parse_model_json
from .models import Candidate

OVERVIEW_CHARS = 400  # synopsis length sent to the model per title

RANK_SYSTEM = 'You rank movies by how well they match the user intent. Output ONLY JSON array of {id, score}.'

RANK_PROMPT = """User query: "{query}"
Rate each from 0..100 by relevance. Prefer correct language/genre/year/rating/actor/director if implied.

Movies:
{movies}
Return ONLY JSON like: [{{"id":"tt0137523","score":95}}, ...]"""


def candidate_id(candidate: Candidate) -> str:
	return str(candidate.get('id') or candidate.get('imdbID') or '')


def _score_value(value) -> float:
	try:
		score = float(value)
	except (TypeError, ValueError):
		return 0.0
	if score != score:  # NaN
		return 0.0
	return max(0.0, min(100.0, score))


class Ranker:
	"""Interface: rank(candidates, query) -> copies with a 'score', sorted descending."""

	def rank(self, candidates: List[Candidate], query: str) -> List[Candidate]:
		raise NotImplementedError


class LLMRanker(Ranker):
	"""
	Scores candidates with a chat model and joins the scores back by id.
	Titles the model leaves out score 0; an unparseable reply scores everything 0,
	which keeps source order because the sort is stable.
	"""

	def __init__(self, client: ChatClient):
		self.client = client

	def project(self, candidate: Candidate) -> Dict:
		"""Compact view of a candidate for the ranking prompt."""
		return {
			'id': candidate_id(candidate),
			'title': candidate.get('primaryTitle') or candidate.get('title') or candidate.get('originalTitle'),
			'year': candidate.get('year') or resolve_year(candidate),
			'rating': candidate.get('imdbRating') or candidate.get('averageRating') or 0,
			'genres': candidate.get('genres') or [],
			'overview': (candidate.get('overview') or '')[:OVERVIEW_CHARS],
		}

	def score_map(self, raw: str) -> Dict[str, float]:
		scores: Dict[str, float] = {}
		for entry in parse_model_json(raw, []):
			if isinstance(entry, dict) and entry.get('id') is not None:
				scores[str(entry['id'])] = _score_value(entry.get('score'))
		return scores

	def rank(self, candidates: List[Candidate], query: str) -> List[Candidate]:
		if not candidates:
			return []
		movies = json.dumps([self.project(c) for c in candidates], ensure_ascii=False)
		raw = self.client.complete(RANK_SYSTEM, RANK_PROMPT.format(query=query, movies=movies), max_tokens=600)
		scores = self.score_map(raw)
		logger.info(f"[Ranker] Model scored {len(scores)} of {len(candidates)} candidates")

		ranked = [dict(c, score=scores.get(candidate_id(c), 0.0)) for c in candidates]
		ranked.sort(key=lambda c: c['score'], reverse=True)
		return ranked


class RatingRanker(Ranker):
	"""Sorts by the provider-native averageRating, descending; the query is not used."""

	def rank(self, candidates: List[Candidate], query: str) -> List[Candidate]:
		ranked = []
		for c in candidates:
			try:
				score = float(c.get('averageRating') or 0)
			except (TypeError, ValueError):
				score = 0.0
			ranked.append(dict(c, score=score))
		ranked.sort(key=lambda c: c['score'], reverse=True)
		logger.debug(f"[Ranker] Rating-sorted {len(ranked)} candidates")
		return ranked

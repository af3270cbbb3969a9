"""
Assistant module.
Runs one conversational turn through the pipeline: analyze, source, filter,
enrich, rating floor, rank, compose. Each stage waits for the previous one.
"""

from typing import Any, Mapping, Optional, Union  # type annotations for clarity

# Import project modules for data structures and components
from .analyzer import Analyzer, KeywordAnalyzer, LLMAnalyzer  # query understanding
from .composer import compose  # page + follow-up
from .config import Settings  # runtime configuration
from .enricher import Enricher, OmdbEnricher, PassthroughEnricher  # supplementary fields
from .errors import InputError  # invalid request text
from .filters import apply_filters, apply_min_rating  # local predicate filters
from .llm import ChatClient  # chat-completion client
from .models import ChatResponse, FilterContext  # core data classes
from .ranker import LLMRanker, Ranker, RatingRanker  # ordering strategies
from .sources import Catalog, CandidateSource, CatalogCandidateSource, ImdbCandidateSource  # candidate retrieval

# Import loguru for console logging
from loguru import logger  # simple structured logger

PAGE_SIZE_LLM = 12  # results per response with the model-backed pipeline
PAGE_SIZE_KEYWORD = 10  # results per response with the offline pipeline


class SearchAssistant:
	"""
	High-level API combining analysis, retrieval, filtering, enrichment and ranking.
	Components are injected so either variant of each capability can be swapped in.
	"""

	def __init__(
		self,
		analyzer: Analyzer,  # text -> filters
		source: CandidateSource,  # filters -> candidates
		enricher: Enricher,  # candidates -> enriched candidates
		ranker: Ranker,  # enriched candidates -> ordered candidates
		page_size: int = PAGE_SIZE_LLM,  # results returned per turn
	):
		self.analyzer = analyzer
		self.source = source
		self.enricher = enricher
		self.ranker = ranker
		self.page_size = page_size
		logger.info(
			f"[Assistant] Ready | analyzer={type(analyzer).__name__} source={type(source).__name__} "
			f"enricher={type(enricher).__name__} ranker={type(ranker).__name__} page_size={page_size}"
		)

	def ask(self, text: Any, context: Optional[Union[FilterContext, Mapping]] = None) -> ChatResponse:
		"""Answer one user turn; `context` is the previous turn's returned context, if any."""
		if not isinstance(text, str) or not text.strip():  # validated before any outbound call
			raise InputError("Missing text")
		text = text.strip()

		prior = context if isinstance(context, FilterContext) else (
			FilterContext.from_mapping(context) if context is not None else None
		)

		# 1) Understand the query
		analysis = self.analyzer.analyze(text, prior)
		ctx = analysis.context

		# 2) Retrieve candidates
		candidates = self.source.fetch(analysis)

		# 3) Deterministic filters
		candidates = apply_filters(candidates, ctx)

		# 4) Enrich, then apply the rating floor against the best available rating
		enriched = self.enricher.enrich(candidates)
		enriched = apply_min_rating(enriched, ctx.min_rating)

		# 5) Rank by relevance
		ranked = self.ranker.rank(enriched, text)

		# 6) Package the page and follow-up
		response = compose(analysis, ranked, self.page_size)
		logger.info(f"[Assistant] Returning {len(response.results)} of {len(ranked)} ranked results")
		return response


def build_assistant(settings: Settings, catalog: Optional[Catalog] = None) -> SearchAssistant:
	"""Wire the variant selected by settings.mode."""
	if settings.mode == 'keyword':
		catalog = catalog or Catalog.load(settings.catalog_path)
		return SearchAssistant(
			analyzer=KeywordAnalyzer(),
			source=CatalogCandidateSource(catalog),
			enricher=PassthroughEnricher(),
			ranker=RatingRanker(),
			page_size=PAGE_SIZE_KEYWORD,
		)

	client = ChatClient(
		api_key=settings.fireworks_key,
		model=settings.fireworks_model,
		base_url=settings.fireworks_base_url,
		timeout=settings.http_timeout,
	)
	return SearchAssistant(
		analyzer=LLMAnalyzer(client),
		source=ImdbCandidateSource(settings.rapidapi_key, host=settings.rapidapi_host, timeout=settings.http_timeout),
		enricher=OmdbEnricher(settings.omdb_key, timeout=settings.http_timeout),
		ranker=LLMRanker(client),
		page_size=PAGE_SIZE_LLM,
	)

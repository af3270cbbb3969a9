"""
Configuration and logging setup.
Settings are read from environment variables (optionally from a local .env file).
"""

import os  # environment access
import sys  # stderr sink for loguru
from dataclasses import dataclass  # immutable settings record
from typing import Optional  # optional values

from dotenv import load_dotenv  # populate os.environ from .env when present
from loguru import logger  # console logging

MODES = ('llm', 'keyword')  # supported analyzer/ranker variants


@dataclass(frozen=True)
class Settings:
	"""All runtime knobs of the assistant. Credentials never get logged."""
	mode: str = 'llm'  # which Analyzer/Ranker variant to wire
	fireworks_key: Optional[str] = None  # chat-completion API key
	fireworks_model: str = 'accounts/fireworks/models/llama-v3p1-70b-instruct'
	fireworks_base_url: str = 'https://api.fireworks.ai/inference/v1'
	rapidapi_key: Optional[str] = None  # IMDb catalog provider key
	rapidapi_host: str = 'imdb236.p.rapidapi.com'
	omdb_key: Optional[str] = None  # supplementary title-detail provider key
	catalog_path: str = 'data/catalog.json'  # static catalog for keyword mode
	http_timeout: Optional[float] = None  # seconds; None waits indefinitely
	log_level: str = 'INFO'

	@classmethod
	def from_env(cls, dotenv: bool = True) -> 'Settings':
		"""Build settings from the process environment."""
		if dotenv:
			load_dotenv()  # no-op when there is no .env file

		mode = os.getenv('ASSISTANT_MODE', 'llm').strip().lower()
		if mode not in MODES:
			raise ValueError(f"ASSISTANT_MODE must be one of {MODES}, got '{mode}'")

		timeout_raw = os.getenv('HTTP_TIMEOUT')
		http_timeout = float(timeout_raw) if timeout_raw else None

		return cls(
			mode=mode,
			fireworks_key=os.getenv('FIREWORKS_KEY'),
			fireworks_model=os.getenv('FIREWORKS_MODEL') or cls.fireworks_model,
			fireworks_base_url=os.getenv('FIREWORKS_BASE_URL') or cls.fireworks_base_url,
			rapidapi_key=os.getenv('RAPIDAPI_KEY'),
			rapidapi_host=os.getenv('RAPIDAPI_HOST') or cls.rapidapi_host,
			omdb_key=os.getenv('OMDB_KEY'),
			catalog_path=os.getenv('CATALOG_PATH') or cls.catalog_path,
			http_timeout=http_timeout,
			log_level=(os.getenv('LOG_LEVEL') or cls.log_level).upper(),
		)


def configure_logging(level: str = 'INFO') -> None:
	"""Replace loguru's default sink with a single stderr sink at the given level."""
	logger.remove()
	logger.add(sys.stderr, level=level)
	logger.debug(f"[Config] Logging configured at level {level}")

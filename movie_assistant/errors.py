"""
Error types used across the assistant pipeline.
Only InputError reaches the caller; the others are recovered where they are raised.
"""

from typing import Optional


class AssistantError(Exception):
	"""Base class for all assistant errors."""


class InputError(AssistantError):
	"""The request itself is unusable (missing or invalid text)."""


class ProviderError(AssistantError):
	"""An outbound provider call returned a non-success status or an unusable payload."""

	def __init__(self, provider: str, message: str, status: Optional[int] = None):
		super().__init__(f"{provider}: {message}")
		self.provider = provider
		self.status = status


class ParseError(AssistantError):
	"""Model output did not contain a decodable JSON value."""

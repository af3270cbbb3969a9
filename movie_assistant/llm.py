"""
Chat-completion client and defensive JSON extraction for model output.
The model is asked for JSON but may wrap it in code fences or prose, so every
reply goes through extract_json_text/parse_model_json before use.
"""

import json  # decode model replies
from typing import Any, Optional  # type hints

import openai  # error types of the SDK
from openai import OpenAI  # OpenAI-compatible client (pointed at Fireworks by default)

from loguru import logger  # console logging

from .errors import ParseError  # raised when no JSON span is present

_OPENERS = {'{': '}', '[': ']'}


def _strip_fences(raw: str) -> str:
	text = raw.strip()
	if text.startswith('```'):
		text = text.strip('`').strip()
		if text[:4].lower() == 'json':  # ```json language tag
			text = text[4:]
	return text.replace('```', '').strip()


def extract_json_text(raw: Optional[str]) -> str:
	"""
	Return the first balanced {...} or [...] span in raw model output.
	Braces inside string literals are ignored; raises ParseError when no span closes.
	"""
	if not raw:
		raise ParseError("empty model output")
	text = _strip_fences(str(raw))

	start = -1
	for i, ch in enumerate(text):
		if ch in _OPENERS:
			start = i
			break
	if start == -1:
		raise ParseError("no JSON object or array in model output")

	stack = []
	in_string = False
	escaped = False
	for i in range(start, len(text)):
		ch = text[i]
		if in_string:
			if escaped:
				escaped = False
			elif ch == '\\':
				escaped = True
			elif ch == '"':
				in_string = False
			continue
		if ch == '"':
			in_string = True
		elif ch in _OPENERS:
			stack.append(_OPENERS[ch])
		elif ch in ('}', ']'):
			if not stack or stack.pop() != ch:
				raise ParseError(f"mismatched '{ch}' at offset {i}")
			if not stack:
				return text[start:i + 1]
	raise ParseError("unterminated JSON in model output")


def parse_model_json(raw: Optional[str], default: Any) -> Any:
	"""
	Decode model output into the same container type as `default`.
	Any failure is logged and yields `default`.
	"""
	try:
		value = json.loads(extract_json_text(raw))
	except (ParseError, ValueError) as e:
		logger.warning(f"[LLM] Could not parse model output, using default: {e}")
		return default
	if not isinstance(value, type(default)):
		logger.warning(f"[LLM] Expected {type(default).__name__}, got {type(value).__name__}; using default")
		return default
	return value


class ChatClient:
	"""
	Thin wrapper over an OpenAI-compatible chat-completion endpoint.
	One plain request/response call per completion; no streaming and no retries.
	"""

	def __init__(
		self,
		api_key: Optional[str],
		model: str,
		base_url: str,
		temperature: float = 0.2,
		timeout: Optional[float] = None,
	):
		self.model = model
		self.temperature = temperature
		self._client = OpenAI(api_key=api_key or 'missing-key', base_url=base_url, timeout=timeout, max_retries=0)
		logger.info(f"[LLM] Client ready | model={model} | base_url={base_url}")

	def complete(self, system: str, user: str, max_tokens: int = 400) -> str:
		"""Return the first choice's text; a non-success API status degrades to ''."""
		try:
			response = self._client.chat.completions.create(
				model=self.model,
				temperature=self.temperature,
				max_tokens=max_tokens,
				messages=[
					{'role': 'system', 'content': system},
					{'role': 'user', 'content': user},
				],
			)
		except openai.APIStatusError as e:
			logger.warning(f"[LLM] Completion failed with status {e.status_code}: {e.message}")
			return ''
		if not response.choices:
			return ''
		content = response.choices[0].message.content or ''
		logger.debug(f"[LLM] Completion returned {len(content)} chars")
		return content

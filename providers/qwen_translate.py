"""DashScope Qwen-MT translator."""


import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from config import DEFAULT_TRANSLATION_MODEL, DashScopeCredentials
from pipeline.interfaces import Translator

try:
	from dashscope import Generation
except ImportError:
	Generation = None  # type: ignore[assignment]


@dataclass
class QwenTranslator(Translator):
	"""Chinese to English translation through the Qwen-MT models."""

	credentials: DashScopeCredentials
	model: str = DEFAULT_TRANSLATION_MODEL
	source_lang: str = "Chinese"
	target_lang: str = "English"
	retries: int = 2
	backoff: float = 1.5

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	async def translate(self, text: str) -> str:
		return await asyncio.to_thread(self.translate_sync, text)

	def translate_sync(self, text: str) -> str:
		if Generation is None:
			raise ImportError("DashScope SDK is not installed. Please install dashscope.")
		if not text.strip():
			raise ValueError("Nothing to translate")
		response = self._execute(lambda: self._call_service(text))
		translation = extract_translation(response)
		if not translation:
			raise RuntimeError("Qwen-MT returned an empty translation")
		self._logger.debug("Translated %r -> %r", text, translation)
		return translation

	def _call_service(self, text: str):
		return Generation.call(
			model=self.model,
			api_key=self.credentials.api_key,
			messages=[{"role": "user", "content": text}],
			result_format="message",
			translation_options={"source_lang": self.source_lang, "target_lang": self.target_lang},
		)

	def _execute(self, call: Callable[[], Any]):
		for attempt in range(1, self.retries + 1):
			try:
				response = call()
				if getattr(response, "status_code", 500) != 200:
					raise RuntimeError(getattr(response, "message", "Qwen-MT request failed."))
				return response
			except Exception as exc:  # noqa: BLE001
				self._logger.warning("Qwen-MT call failed (attempt %s/%s): %s", attempt, self.retries, exc)
				if attempt == self.retries:
					raise
				time.sleep(self.backoff ** attempt)


def extract_translation(response: Any) -> str:
	"""Pull the assistant message text out of a Generation response."""
	output = getattr(response, "output", None)
	if output is None and isinstance(response, dict):
		output = response.get("output")
	if not isinstance(output, dict):
		return ""
	choices = output.get("choices") or []
	if choices:
		message = choices[0].get("message") or {}
		content = message.get("content")
		if isinstance(content, str):
			return content.strip()
		if isinstance(content, list):
			return "".join(part.get("text", "") for part in content if isinstance(part, dict)).strip()
	text = output.get("text")
	return text.strip() if isinstance(text, str) else ""

"""DashScope Qwen OCR recognizer."""


import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from config import DashScopeCredentials
from pipeline.interfaces import TextRecognizer
from schemas import OcrResult, OcrTextSpan
from utils.image_io import ensure_image_path

try:
	from dashscope import MultiModalConversation
except ImportError:
	MultiModalConversation = None  # type: ignore[assignment]

TASK_MODEL_MAP: dict[str, str] = {
	"document": "qwen-vl-ocr",
	"general": "qwen-vl-ocr-latest",
}
SIGN_PROMPT = (
	"Read all text in this image, such as shop signs and street signs. "
	"Output each line of text on its own line, exactly as written, without commentary."
)


@dataclass
class QwenOcrClient(TextRecognizer):
	"""Recognizer backed by DashScope Qwen-VL OCR models."""

	credentials: DashScopeCredentials
	task: str = "document"
	min_conf: float = 0.5
	retries: int = 3
	backoff: float = 1.5

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	async def recognize_text(self, image_path: Path) -> str:
		result = await asyncio.to_thread(self.recognize, image_path)
		return result.full_text

	def recognize(self, image_path: Path) -> OcrResult:
		if MultiModalConversation is None:
			raise ImportError("DashScope SDK is not installed. Please install dashscope.")
		image_path = ensure_image_path(image_path)
		model = TASK_MODEL_MAP.get(self.task, TASK_MODEL_MAP["document"])
		messages = self._build_messages(image_path)
		response = self._execute(lambda: self._call_service(model, messages))
		raw = self._serialize_response(response)
		blocks = [
			block
			for block in parse_blocks(raw)
			if block.confidence is None or block.confidence >= self.min_conf
		]
		return OcrResult(
			backend="qwen",
			task=self.task,
			image_path=str(image_path),
			blocks=blocks,
			full_text="\n".join(block.text for block in blocks),
			raw=raw,
		)

	def _call_service(self, model: str, messages: list[dict[str, Any]]):
		return MultiModalConversation.call(
			model=model,
			messages=messages,
			api_key=self.credentials.api_key,
		)

	def _build_messages(self, path: Path) -> list[dict[str, Any]]:
		return [
			{
				"role": "user",
				"content": [
					{"image": path.as_uri()},
					{"text": SIGN_PROMPT},
				],
			}
		]

	def _execute(self, call: Callable[[], Any]):
		for attempt in range(1, self.retries + 1):
			try:
				response = call()
				if getattr(response, "status_code", 500) != 200:
					raise RuntimeError(getattr(response, "message", "Qwen OCR request failed."))
				return response
			except Exception as exc:  # noqa: BLE001
				self._logger.warning("Qwen OCR call failed (attempt %s/%s): %s", attempt, self.retries, exc)
				if attempt == self.retries:
					raise
				time.sleep(self.backoff ** attempt)

	def _serialize_response(self, response: Any) -> dict[str, Any]:
		raw = {
			"status_code": getattr(response, "status_code", None),
			"request_id": getattr(response, "request_id", None),
			"code": getattr(response, "code", None),
			"message": getattr(response, "message", None),
			"output": getattr(response, "output", None),
			"usage": getattr(response, "usage", None),
		}
		if hasattr(response, "to_dict"):
			raw.update(response.to_dict())  # type: ignore[arg-type]
		return raw


def parse_blocks(raw: dict[str, Any]) -> list[OcrTextSpan]:
	"""Split every text node of the model output into one span per line."""
	blocks: list[OcrTextSpan] = []
	for node in _collect_text_nodes(raw.get("output")):
		confidence = next(
			(float(node[key]) for key in ("confidence", "score", "prob") if isinstance(node.get(key), (int, float))),
			None,
		)
		text = next((node[key] for key in ("text", "content") if isinstance(node.get(key), str)), "")
		for line in text.splitlines():
			if line.strip():
				blocks.append(OcrTextSpan(text=line.strip(), confidence=confidence, line_index=len(blocks)))
	return blocks


def _collect_text_nodes(data: Any) -> list[dict[str, Any]]:
	collected: list[dict[str, Any]] = []
	_walk_nodes(data, collected)
	return collected


def _walk_nodes(data: Any, collected: list[dict[str, Any]]) -> None:
	if isinstance(data, dict):
		if any(isinstance(data.get(key), str) for key in ("text", "content")):
			collected.append(data)
		for value in data.values():
			_walk_nodes(value, collected)
	elif isinstance(data, list):
		for item in data:
			_walk_nodes(item, collected)

"""Aliyun OCR recognizer."""


import asyncio
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from config import AliyunCredentials
from pipeline.interfaces import TextRecognizer
from providers.layout import reading_order
from schemas import OcrResult, OcrTextSpan
from utils.image_io import ensure_image_path, read_image_base64

try:
	from alibabacloud_ocr_api20210707.client import Client as OcrClient
	from alibabacloud_ocr_api20210707 import models as ocr_models
	from alibabacloud_tea_openapi import models as open_api_models
	from alibabacloud_tea_util import models as util_models
except ImportError:
	OcrClient = None  # type: ignore[assignment]
	ocr_models = None  # type: ignore[assignment]
	open_api_models = None  # type: ignore[assignment]
	util_models = None  # type: ignore[assignment]

JsonDict = dict[str, Any]
TEXT_KEYS = ("word", "Text", "Word", "Content", "text")
SCORE_KEYS = ("prob", "Score", "Confidence", "Prob")


@dataclass
class AliyunOcrClient(TextRecognizer):
	"""Recognizer backed by Aliyun RecognizeAdvanced, or RecognizeAllText when ``alltext_type`` is set."""

	credentials: AliyunCredentials
	alltext_type: str | None = None
	min_conf: float = 0.5
	retries: int = 3
	backoff: float = 1.5

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		self._client = self._create_client()

	async def recognize_text(self, image_path: Path) -> str:
		result = await asyncio.to_thread(self.recognize, image_path)
		return result.full_text

	def recognize(self, image_path: Path) -> OcrResult:
		image_path = ensure_image_path(image_path)
		payload = read_image_base64(image_path)
		if self.alltext_type:
			request = ocr_models.RecognizeAllTextRequest(body=payload, type=self.alltext_type)
			response = self._execute(lambda: self._invoke_client("recognize_all_text", request))
			label = self.alltext_type
		else:
			request = ocr_models.RecognizeAdvancedRequest(body=payload)
			response = self._execute(lambda: self._invoke_client("recognize_advanced", request))
			label = "advanced"

		raw = self._to_dict(response)
		blocks = [
			block
			for block in reading_order(parse_blocks(raw))
			if block.confidence is None or block.confidence >= self.min_conf
		]
		self._logger.debug("Aliyun returned %d blocks above %.2f confidence", len(blocks), self.min_conf)
		return OcrResult(
			backend="aliyun",
			task=label,
			image_path=str(image_path),
			blocks=blocks,
			full_text="\n".join(block.text for block in blocks),
			raw=raw,
		)

	def _create_client(self) -> Any:
		if not all([OcrClient, ocr_models, open_api_models]):
			raise ImportError("Aliyun OCR SDK is not installed. Please install alibabacloud-ocr-api20210707.")
		config = open_api_models.Config(
			access_key_id=self.credentials.access_key_id,
			access_key_secret=self.credentials.access_key_secret,
			region_id=self.credentials.region_id,
			endpoint=f"ocr-api.{self.credentials.region_id}.aliyuncs.com",
		)
		return OcrClient(config)

	def _invoke_client(self, method_base: str, request: Any):
		method = getattr(self._client, method_base, None)
		if callable(method):
			return method(request)
		with_options = getattr(self._client, f"{method_base}_with_options", None)
		if callable(with_options):
			runtime = util_models.RuntimeOptions() if util_models else None
			return with_options(request, runtime)
		raise AttributeError(f"Aliyun client missing method for {method_base}")

	def _execute(self, call: Callable[[], Any]):
		for attempt in range(1, self.retries + 1):
			try:
				return call()
			except Exception as exc:  # noqa: BLE001
				self._logger.warning("Aliyun OCR call failed (attempt %s/%s): %s", attempt, self.retries, exc)
				if attempt == self.retries:
					raise
				time.sleep(self.backoff ** attempt)

	def _to_dict(self, response: Any) -> JsonDict:
		if hasattr(response, "to_map"):
			return response.to_map()
		if isinstance(response, dict):
			return response
		return {"body": response} if response is not None else {}


def parse_blocks(payload: JsonDict) -> list[OcrTextSpan]:
	"""Normalize an Aliyun response map into text spans."""
	body = payload.get("body")
	data = body.get("Data", body) if isinstance(body, dict) else payload
	# Data arrives as a JSON document encoded in a string.
	if isinstance(data, str):
		try:
			data = json.loads(data)
		except json.JSONDecodeError:
			return [OcrTextSpan(text=line.strip(), line_index=i) for i, line in enumerate(data.splitlines()) if line.strip()]
	blocks: list[OcrTextSpan] = []
	for index, item in enumerate(_collect_candidates(data)):
		text = next(
			(item[key].strip() for key in TEXT_KEYS if isinstance(item.get(key), str) and item[key].strip()),
			"",
		)
		if not text:
			continue
		score = next((item[key] for key in SCORE_KEYS if isinstance(item.get(key), (int, float))), None)
		blocks.append(
			OcrTextSpan(
				text=text,
				confidence=_normalize_confidence(score),
				polygon=_extract_polygon(item),
				line_index=index,
			)
		)
	return blocks

def _collect_candidates(data: Any) -> list[JsonDict]:
	if not isinstance(data, dict):
		return []
	candidates: list[JsonDict] = []
	for key in ("prism_wordsInfo", "Results", "PrismWordsInfo", "Lines", "Blocks", "SubImages"):
		items = data.get(key)
		if isinstance(items, list):
			for item in items:
				if not isinstance(item, dict):
					continue
				if isinstance(item.get("BlockInfo"), dict):
					candidates.extend(_collect_candidates(item["BlockInfo"]))
				else:
					candidates.append(item)
	return candidates

def _extract_polygon(item: JsonDict) -> list[tuple[float, float]] | None:
	points = item.get("pos") or item.get("Polygon") or item.get("Points") or item.get("BlockPoints")
	if isinstance(points, list) and points and isinstance(points[0], dict):
		return [
			(float(point.get("x", point.get("X", 0))), float(point.get("y", point.get("Y", 0))))
			for point in points
		]
	if isinstance(points, list) and points and isinstance(points[0], (list, tuple)):
		return [tuple(float(coord) for coord in point[:2]) for point in points]
	if isinstance(points, list) and all(isinstance(val, (int, float)) for val in points):
		iterator = iter(points)
		return [tuple(float(a) for a in pair) for pair in zip(iterator, iterator)]
	return None


def _normalize_confidence(score: Any) -> float | None:
	"""Aliyun reports 0-100 for some endpoints and 0-1 for others."""
	if score is None:
		return None
	score = float(score)
	return score / 100.0 if score > 1.0 else score

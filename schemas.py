"""Pydantic schemas for recognition output, pipeline decisions and stored snaps."""


import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_LOCATION = "Unknown location"
TRANSLATION_UNAVAILABLE = "Translation unavailable"
MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={lat},{lng}"


class OcrTextSpan(BaseModel):
	"""Represents a single OCR text segment from any provider."""
	text: str
	confidence: float | None = None
	polygon: list[tuple[float, float]] | None = None
	line_index: int | None = None


class OcrResult(BaseModel):
	"""Normalized OCR output; ``full_text`` is the newline-delimited blob the pipeline consumes."""
	backend: Literal["aliyun", "qwen"]
	task: str | None
	image_path: str
	blocks: list[OcrTextSpan]
	full_text: str
	raw: dict


class ClassifiedLine(BaseModel):
	"""A cleaned recognition line tagged with its script."""
	model_config = ConfigDict(frozen=True)

	text: str = Field(min_length=1)
	is_chinese: bool


class RankedCandidate(BaseModel):
	"""A Chinese line with its name-likelihood score."""
	model_config = ConfigDict(frozen=True)

	text: str
	score: float = Field(ge=0)


class RejectReason(str, Enum):
	NO_TEXT_DETECTED = "no_text_detected"
	POOR_QUALITY = "poor_quality"


class AutoAccept(BaseModel):
	model_config = ConfigDict(frozen=True)

	kind: Literal["auto_accept"] = "auto_accept"
	text: str


class PromptSelection(BaseModel):
	model_config = ConfigDict(frozen=True)

	kind: Literal["prompt_selection"] = "prompt_selection"
	candidates: list[str]


class Reject(BaseModel):
	"""Nothing usable was found. ``text`` carries the rejected line for a user override."""
	model_config = ConfigDict(frozen=True)

	kind: Literal["reject"] = "reject"
	reason: RejectReason
	text: str | None = None


GateDecision = Annotated[Union[AutoAccept, PromptSelection, Reject], Field(discriminator="kind")]


class Coordinates(BaseModel):
	model_config = ConfigDict(frozen=True)

	latitude: float = Field(ge=-90.0, le=90.0)
	longitude: float = Field(ge=-180.0, le=180.0)


def _new_snap_id() -> str:
	return uuid.uuid4().hex


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


class CapturedSnap(BaseModel):
	"""A persisted capture. Immutable once created."""
	model_config = ConfigDict(frozen=True)

	id: str = Field(default_factory=_new_snap_id)
	image_reference: str
	recognized_text: str
	pinyin: str
	latitude: float | None = None
	longitude: float | None = None
	address: str | None = None
	translation: str
	maps_link: str | None = None
	created_at: datetime = Field(default_factory=_utcnow)


class CaptureSummary(BaseModel):
	"""What the caller sees after a snap is stored."""
	snap_id: str
	text: str
	pinyin: str
	address: str
	translation: str
	maps_link: str | None = None
	total_count: int


def maps_link_for(coordinates: Coordinates | None) -> str | None:
	"""Build a map search link for the coordinates, if any."""
	if coordinates is None:
		return None
	return MAPS_SEARCH_URL.format(lat=coordinates.latitude, lng=coordinates.longitude)

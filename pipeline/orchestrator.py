"""Capture orchestration: recognition, gating, enrichment and persistence."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from errors import ConfigurationError, EmptySelection, GeocodingFailed, PersistenceFailed, RecognitionFailed, TranslationFailed
from pipeline import location as location_resolver
from pipeline.classifier import chinese_texts, classify, clean_line
from pipeline.gate import QualityGate
from pipeline.interfaces import LiveLocationProvider, ReverseGeocoder, SnapStore, TextRecognizer, Translator
from pipeline.phrasebook import fallback_translation
from pipeline.ranker import rank
from pipeline.romanize import to_pinyin
from schemas import (
	AutoAccept,
	CapturedSnap,
	CaptureSummary,
	Coordinates,
	PromptSelection,
	Reject,
	UNKNOWN_LOCATION,
	maps_link_for,
)

CaptureOutcome = CaptureSummary | PromptSelection | Reject

# Oldest abandoned retries are dropped beyond this many.
MAX_PENDING_SNAPS = 32


@dataclass
class CaptureOrchestrator:
	"""Runs one capture from image to stored snap.

	Recognition, geocoding and translation are the only awaited calls. The
	store is called synchronously, so a cancelled capture either stored its
	snap in full or not at all.

	A snap whose insert failed is kept per ``(image, text)`` and reused when
	``confirm`` is retried with the same inputs, so the collaborators are not
	called again and the retry stores exactly one record.
	"""

	store: SnapStore
	geocoder: ReverseGeocoder
	recognizer: TextRecognizer | None = None
	translator: Translator | None = None
	gate: QualityGate = field(default_factory=QualityGate)
	live_location: LiveLocationProvider | None = None
	use_live_location: bool = False

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		self._pending: dict[tuple[str, str], CapturedSnap] = {}

	async def process(self, image_path: Path | str) -> CaptureOutcome:
		"""Recognize, gate and, when the gate auto-accepts, store the capture.

		Raises:
			ConfigurationError: no recognizer was supplied.
			RecognitionFailed: the recognizer raised; nothing was stored.
			PersistenceFailed: the snap could not be stored.
		"""
		image = Path(image_path)
		if self.recognizer is None:
			raise ConfigurationError("No text recognizer configured", component="recognizer")
		try:
			raw_text = await self.recognizer.recognize_text(image)
		except Exception as exc:  # noqa: BLE001
			self._logger.warning("Recognition failed for %s: %s", image, exc)
			raise RecognitionFailed(f"Text recognition failed for {image}", component="recognizer", original_error=exc) from exc

		lines = classify(raw_text or "")
		ranked = rank(chinese_texts(lines))
		decision = self.gate.decide(lines, ranked)
		if not isinstance(decision, AutoAccept):
			return decision
		return await self._complete(decision.text, image)

	async def confirm(self, selected_text: str, image_path: Path | str) -> CaptureSummary:
		"""Store a capture for text the user picked or chose to keep.

		Raises:
			EmptySelection: nothing is left of the text after cleaning.
			PersistenceFailed: the snap could not be stored; retrying is safe.
		"""
		text = clean_line(selected_text)
		if not text:
			raise EmptySelection("Selected text is empty", component="confirm")
		return await self._complete(text, Path(image_path))

	def list_snaps(self) -> list[CapturedSnap]:
		return self.store.list_all()

	def delete(self, snap_id: str) -> bool:
		deleted = self.store.delete(snap_id)
		if deleted:
			self._logger.info("Deleted snap %s", snap_id)
		return deleted

	def discard_pending(self, image_path: Path | str, selected_text: str) -> bool:
		"""Forget a snap kept for retry after a failed insert."""
		return self._pending.pop((str(Path(image_path)), clean_line(selected_text)), None) is not None

	async def _complete(self, text: str, image: Path) -> CaptureSummary:
		key = (str(image), text)
		snap = self._pending.get(key)
		if snap is None:
			snap = await self._build_snap(text, image)
			self._remember(key, snap)
		else:
			self._logger.info("Reusing resolved snap %s for retry", snap.id)

		summary = self._persist(snap)
		self._pending.pop(key, None)
		return summary

	def _remember(self, key: tuple[str, str], snap: CapturedSnap) -> None:
		self._pending[key] = snap
		while len(self._pending) > MAX_PENDING_SNAPS:
			stale = next(iter(self._pending))
			self._logger.info("Dropping pending snap %s", self._pending.pop(stale).id)

	async def _build_snap(self, text: str, image: Path) -> CapturedSnap:
		coordinates = await self._locate(image)
		address = await self._address_for(coordinates) if coordinates else None
		translation = await self._translate(text)
		return CapturedSnap(
			image_reference=str(image),
			recognized_text=text,
			pinyin=to_pinyin(text),
			latitude=coordinates.latitude if coordinates else None,
			longitude=coordinates.longitude if coordinates else None,
			address=address,
			translation=translation,
			maps_link=maps_link_for(coordinates),
		)

	async def _locate(self, image: Path) -> Coordinates | None:
		coordinates = location_resolver.resolve(image)
		if coordinates is not None or not self.use_live_location or self.live_location is None:
			return coordinates
		try:
			coordinates = await self.live_location.current_location()
		except Exception as exc:  # noqa: BLE001
			self._logger.warning("Live location unavailable: %s", exc)
			return None
		if coordinates is not None:
			self._logger.info("Using live location for %s", image)
		return coordinates

	async def _address_for(self, coordinates: Coordinates) -> str:
		try:
			address = await self.geocoder.reverse_geocode(coordinates.latitude, coordinates.longitude)
		except Exception as exc:  # noqa: BLE001
			self._logger.warning(
				"%s",
				GeocodingFailed("Reverse geocoding failed", component="geocoder", original_error=exc),
			)
			return UNKNOWN_LOCATION
		if not address or not address.strip():
			return UNKNOWN_LOCATION
		return address.strip()

	async def _translate(self, text: str) -> str:
		if self.translator is None:
			return fallback_translation(text)
		try:
			translation = await self.translator.translate(text)
		except Exception as exc:  # noqa: BLE001
			self._logger.warning(
				"%s",
				TranslationFailed("Translation failed; using phrasebook", component="translator", original_error=exc),
			)
			return fallback_translation(text)
		if not translation or not translation.strip():
			return fallback_translation(text)
		return translation.strip()

	def _persist(self, snap: CapturedSnap) -> CaptureSummary:
		try:
			if self.store.get(snap.id) is None:
				self.store.insert(snap)
			total = self.store.count()
		except Exception as exc:  # noqa: BLE001
			self._logger.error("Persisting snap %s failed: %s", snap.id, exc)
			raise PersistenceFailed(f"Could not store snap {snap.id}", snap=snap, original_error=exc) from exc

		self._logger.info("Stored snap %s (%d total)", snap.id, total)
		return CaptureSummary(
			snap_id=snap.id,
			text=snap.recognized_text,
			pinyin=snap.pinyin,
			address=snap.address or UNKNOWN_LOCATION,
			translation=snap.translation,
			maps_link=snap.maps_link,
			total_count=total,
		)

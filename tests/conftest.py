"""Shared fakes for pipeline tests."""
from __future__ import annotations

import struct
import zlib
from pathlib import Path

import pytest
from PIL import Image

from pipeline.interfaces import LiveLocationProvider, ReverseGeocoder, SnapStore, TextRecognizer, Translator
from schemas import CapturedSnap, Coordinates


class FakeRecognizer(TextRecognizer):
	def __init__(self, text: str = "", error: Exception | None = None) -> None:
		self.text = text
		self.error = error
		self.calls: list[Path] = []

	async def recognize_text(self, image_path: Path) -> str:
		self.calls.append(image_path)
		if self.error:
			raise self.error
		return self.text


class FakeGeocoder(ReverseGeocoder):
	def __init__(self, address: str | None = "1 Nanjing Road, Shanghai", error: Exception | None = None) -> None:
		self.address = address
		self.error = error
		self.calls: list[tuple[float, float]] = []

	async def reverse_geocode(self, latitude: float, longitude: float) -> str | None:
		self.calls.append((latitude, longitude))
		if self.error:
			raise self.error
		return self.address


class FakeTranslator(Translator):
	def __init__(self, translation: str = "Old Wang Hot Pot", error: Exception | None = None) -> None:
		self.translation = translation
		self.error = error
		self.calls: list[str] = []

	async def translate(self, text: str) -> str:
		self.calls.append(text)
		if self.error:
			raise self.error
		return self.translation


class FakeLiveLocation(LiveLocationProvider):
	def __init__(self, coordinates: Coordinates | None = None, error: Exception | None = None) -> None:
		self.coordinates = coordinates
		self.error = error
		self.calls = 0

	async def current_location(self) -> Coordinates | None:
		self.calls += 1
		if self.error:
			raise self.error
		return self.coordinates


class MemorySnapStore(SnapStore):
	"""Dictionary-backed store with switches for injecting failures."""

	def __init__(self) -> None:
		self.snaps: dict[str, CapturedSnap] = {}
		self.fail_inserts = 0
		self.fail_counts = 0
		self.insert_calls = 0

	def insert(self, snap: CapturedSnap) -> None:
		self.insert_calls += 1
		if self.fail_inserts:
			self.fail_inserts -= 1
			raise OSError("disk full")
		if snap.id in self.snaps:
			raise ValueError(f"duplicate id {snap.id}")
		self.snaps[snap.id] = snap

	def get(self, snap_id: str) -> CapturedSnap | None:
		return self.snaps.get(snap_id)

	def count(self) -> int:
		if self.fail_counts:
			self.fail_counts -= 1
			raise OSError("database locked")
		return len(self.snaps)

	def delete(self, snap_id: str) -> bool:
		return self.snaps.pop(snap_id, None) is not None

	def list_all(self) -> list[CapturedSnap]:
		return sorted(self.snaps.values(), key=lambda snap: snap.created_at, reverse=True)

	def clear(self) -> int:
		removed = len(self.snaps)
		self.snaps.clear()
		return removed


@pytest.fixture
def plain_image(tmp_path: Path) -> Path:
	"""A small JPEG without any EXIF metadata."""
	path = tmp_path / "sign.jpg"
	Image.new("RGB", (8, 8), color=(200, 30, 30)).save(path, format="JPEG")
	return path


@pytest.fixture
def memory_store() -> MemorySnapStore:
	return MemorySnapStore()


def _png_chunk(kind: bytes, data: bytes) -> bytes:
	return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


@pytest.fixture
def oversized_image(tmp_path: Path) -> Path:
	"""A PNG declaring 16320x12240 pixels with no real pixel data."""
	path = tmp_path / "huge.png"
	header = struct.pack(">IIBBBBB", 16320, 12240, 8, 2, 0, 0, 0)
	path.write_bytes(
		b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", header) + _png_chunk(b"IDAT", b"") + _png_chunk(b"IEND", b"")
	)
	return path

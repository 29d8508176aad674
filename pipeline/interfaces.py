"""Collaborator interfaces consumed by the capture orchestrator."""


from abc import ABC, abstractmethod
from pathlib import Path

from schemas import CapturedSnap, Coordinates


class TextRecognizer(ABC):
	"""Turns an image into a newline-delimited text blob."""

	@abstractmethod
	async def recognize_text(self, image_path: Path) -> str:
		"""Return the recognized text. Raises on any failure, including timeouts."""


class ReverseGeocoder(ABC):
	"""Turns coordinates into a human-readable address."""

	@abstractmethod
	async def reverse_geocode(self, latitude: float, longitude: float) -> str | None:
		"""Return an address, ``None`` if the service knows none. May raise."""


class Translator(ABC):
	"""Translates Chinese text to English."""

	@abstractmethod
	async def translate(self, text: str) -> str:
		"""Return the translation. Raises on failure."""


class LiveLocationProvider(ABC):
	"""Current device position, consulted only when explicitly enabled."""

	@abstractmethod
	async def current_location(self) -> Coordinates | None:
		pass


class SnapStore(ABC):
	"""Persistent store of captured snaps. Inserts are atomic and serialized by the store."""

	@abstractmethod
	def insert(self, snap: CapturedSnap) -> None:
		pass

	@abstractmethod
	def get(self, snap_id: str) -> CapturedSnap | None:
		pass

	@abstractmethod
	def count(self) -> int:
		pass

	@abstractmethod
	def delete(self, snap_id: str) -> bool:
		"""Delete a snap, returning whether it existed."""

	@abstractmethod
	def list_all(self) -> list[CapturedSnap]:
		"""All snaps, newest first."""

	@abstractmethod
	def clear(self) -> int:
		"""Delete every snap, returning how many were removed."""

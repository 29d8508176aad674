"""Reverse geocoding through an OpenStreetMap Nominatim endpoint."""


import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from config import GeocoderSettings
from pipeline.interfaces import ReverseGeocoder


@dataclass
class NominatimGeocoder(ReverseGeocoder):
	"""Blocking HTTP lookups run on a worker thread; the timeout comes from settings."""

	settings: GeocoderSettings = field(default_factory=GeocoderSettings)
	session: requests.Session | None = None

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		if self.session is None:
			self.session = requests.Session()
		self.session.headers.update({"User-Agent": self.settings.user_agent})

	async def reverse_geocode(self, latitude: float, longitude: float) -> str | None:
		return await asyncio.to_thread(self.lookup, latitude, longitude)

	def lookup(self, latitude: float, longitude: float) -> str | None:
		response = self.session.get(
			self.settings.url,
			params={
				"format": "jsonv2",
				"lat": f"{latitude:.7f}",
				"lon": f"{longitude:.7f}",
				"accept-language": self.settings.language,
			},
			timeout=self.settings.timeout,
		)
		response.raise_for_status()
		address = address_from_payload(response.json())
		self._logger.debug("Reverse geocoded %.5f,%.5f -> %r", latitude, longitude, address)
		return address


def address_from_payload(payload: Any) -> str | None:
	"""``display_name`` of a Nominatim reply, or ``None`` when the point has no address."""
	if not isinstance(payload, dict) or "error" in payload:
		return None
	name = payload.get("display_name")
	if isinstance(name, str) and name.strip():
		return name.strip()
	return None

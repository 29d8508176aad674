"""Approximate live location from the public IP address."""


import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import requests
from pydantic import ValidationError

from pipeline.interfaces import LiveLocationProvider
from schemas import Coordinates

DEFAULT_IPINFO_URL = "https://ipinfo.io/json"


@dataclass
class IpLocationProvider(LiveLocationProvider):
	url: str = DEFAULT_IPINFO_URL
	timeout: float = 5.0
	session: requests.Session = field(default_factory=requests.Session)

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	async def current_location(self) -> Coordinates | None:
		return await asyncio.to_thread(self.lookup)

	def lookup(self) -> Coordinates | None:
		response = self.session.get(self.url, timeout=self.timeout)
		response.raise_for_status()
		return coordinates_from_ipinfo(response.json())


def coordinates_from_ipinfo(payload: Any) -> Coordinates | None:
	"""Parse the ``"lat,lng"`` string ipinfo returns under ``loc``."""
	loc = payload.get("loc") if isinstance(payload, dict) else None
	if not isinstance(loc, str) or "," not in loc:
		return None
	lat, _, lng = loc.partition(",")
	try:
		return Coordinates(latitude=float(lat), longitude=float(lng))
	except (ValueError, ValidationError):
		return None

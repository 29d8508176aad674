"""Coordinates from image EXIF metadata."""


import logging
import math
from pathlib import Path
from typing import Any, Mapping

from PIL import Image, UnidentifiedImageError
from pydantic import ValidationError

from schemas import Coordinates

_logger = logging.getLogger(__name__)

GPS_IFD_TAG = 0x8825
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4


def _to_float(value: Any) -> float:
	# Older Pillow releases hand back (numerator, denominator) pairs.
	if isinstance(value, tuple) and len(value) == 2:
		return float(value[0]) / float(value[1])
	return float(value)


def dms_to_degrees(dms: Any, ref: Any) -> float:
	"""Convert an EXIF degrees/minutes/seconds triple to signed decimal degrees."""
	if isinstance(dms, (int, float)):
		parts = [float(dms)]
	else:
		parts = [_to_float(part) for part in dms]
	if not 1 <= len(parts) <= 3:
		raise ValueError(f"Unexpected GPS component length: {len(parts)}")
	degrees = sum(part / 60 ** index for index, part in enumerate(parts))
	if not math.isfinite(degrees):
		raise ValueError("GPS component is not finite")
	if isinstance(ref, bytes):
		ref = ref.decode("ascii", errors="ignore")
	if str(ref).strip().upper() in ("S", "W"):
		degrees = -degrees
	return degrees


def coordinates_from_gps(gps: Mapping[int, Any]) -> Coordinates | None:
	"""Build coordinates from a GPS IFD mapping, or ``None`` if it is incomplete or malformed."""
	if GPS_LATITUDE not in gps or GPS_LONGITUDE not in gps:
		return None
	try:
		latitude = dms_to_degrees(gps[GPS_LATITUDE], gps.get(GPS_LATITUDE_REF, "N"))
		longitude = dms_to_degrees(gps[GPS_LONGITUDE], gps.get(GPS_LONGITUDE_REF, "E"))
		return Coordinates(latitude=latitude, longitude=longitude)
	except (TypeError, ValueError, ZeroDivisionError, ValidationError) as exc:
		_logger.debug("Malformed GPS metadata %r: %s", gps, exc)
		return None


def resolve(image_path: Path | str) -> Coordinates | None:
	"""Read GPS coordinates embedded in the image, if any. Never touches the network."""
	try:
		with Image.open(image_path) as image:
			gps = image.getexif().get_ifd(GPS_IFD_TAG)
	except (OSError, UnidentifiedImageError, Image.DecompressionBombError, ValueError, SyntaxError) as exc:
		_logger.debug("Unable to read EXIF from %s: %s", image_path, exc)
		return None
	if not gps:
		_logger.debug("No GPS metadata in %s", image_path)
		return None
	return coordinates_from_gps(gps)

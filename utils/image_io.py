"""Utility helpers for working with input images."""

import base64
from pathlib import Path

SUPPORTED_IMAGE_FORMATS = (".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff", ".heic")

def ensure_image_path(image: str | Path) -> Path:
	"""Validate that the provided path exists and points to a supported image file."""
	path = Path(image).expanduser().resolve()
	if not path.exists():
		raise FileNotFoundError(f"Image path not found: {path}")
	if not path.is_file():
		raise ValueError(f"Image path is not a file: {path}")
	if path.suffix.lower() not in SUPPORTED_IMAGE_FORMATS:
		raise ValueError(f"Unsupported image format {path.suffix!r}: {path}")
	return path

def read_image_base64(path: Path) -> str:
	"""Read image bytes and encode them as base64 for HTTP payloads."""
	return base64.b64encode(path.read_bytes()).decode("utf-8")

"""JSON persistence utilities for capture outputs."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

DATE_PATTERN = "%Y%m%d_%H%M%S"

def build_output_path(output_dir: Path, name_hint: str) -> Path:
	"""Compose a timestamped output path within the output directory."""
	timestamp = datetime.now(timezone.utc).strftime(DATE_PATTERN)
	filename = f"{name_hint}_{timestamp}.json"
	return output_dir.joinpath(filename)

def to_json(data: Any) -> str:
	"""Serialize with CJK characters kept readable; datetimes become ISO strings."""
	return json.dumps(data, ensure_ascii=False, indent=2, default=_default)

def dump_json(data: dict[str, Any] | list[Any], output_dir: Path, name_hint: str) -> Path:
	"""Persist JSON-compatible data in the output directory."""
	output_dir.mkdir(parents=True, exist_ok=True)
	path = build_output_path(output_dir, name_hint)
	path.write_text(to_json(data), encoding="utf-8")
	return path

def _default(value: Any) -> Any:
	if isinstance(value, datetime):
		return value.isoformat()
	if isinstance(value, Path):
		return str(value)
	raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

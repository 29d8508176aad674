"""Application configuration management for the place snap pipeline."""


import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

ENV_FILE: Final[str] = ".env"
DEFAULT_REGION: Final[str] = "cn-hangzhou"
DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
DEFAULT_DB_PATH: Final[str] = "data/place_snaps.db"
DEFAULT_GEOCODER_URL: Final[str] = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT: Final[str] = "place-snap/0.1"
DEFAULT_GEOCODER_TIMEOUT: Final[float] = 10.0
DEFAULT_TRANSLATION_MODEL: Final[str] = "qwen-mt-turbo"

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class AliyunCredentials:
	"""Container for Aliyun credential details."""
	access_key_id: str
	access_key_secret: str
	region_id: str = DEFAULT_REGION


@dataclass(frozen=True)
class DashScopeCredentials:
	"""Container for DashScope credential details."""
	api_key: str


@dataclass(frozen=True)
class GeocoderSettings:
	"""Reverse geocoding endpoint settings."""
	url: str = DEFAULT_GEOCODER_URL
	user_agent: str = DEFAULT_USER_AGENT
	timeout: float = DEFAULT_GEOCODER_TIMEOUT
	language: str = "en"


@dataclass(frozen=True)
class AppConfig:
	"""Aggregate configuration for the pipeline runtime."""
	aliyun: AliyunCredentials | None
	dashscope: DashScopeCredentials | None
	db_path: Path
	output_dir: Path
	geocoder: GeocoderSettings = GeocoderSettings()
	translation_model: str = DEFAULT_TRANSLATION_MODEL
	live_location: bool = False
	log_level: int = DEFAULT_LOG_LEVEL


def load_config() -> AppConfig:
	"""Load environment-based configuration values.

	Returns:
		AppConfig: Parsed configuration with credentials when available.
	"""
	load_dotenv(ENV_FILE)
	output_dir = Path(os.getenv("PLACE_SNAP_OUTPUT_DIR", "outputs")).expanduser().resolve()
	db_path = Path(os.getenv("PLACE_SNAP_DB", DEFAULT_DB_PATH)).expanduser().resolve()

	return AppConfig(
		aliyun=_load_aliyun_credentials(),
		dashscope=_load_dashscope_credentials(),
		db_path=db_path,
		output_dir=output_dir,
		geocoder=_load_geocoder_settings(),
		translation_model=os.getenv("PLACE_SNAP_TRANSLATION_MODEL", DEFAULT_TRANSLATION_MODEL),
		live_location=_parse_bool(os.getenv("PLACE_SNAP_LIVE_LOCATION")),
		log_level=_parse_log_level(os.getenv("PLACE_SNAP_LOG_LEVEL")),
	)


def configure_logging(level: int = DEFAULT_LOG_LEVEL) -> None:
	"""Configure the root logger for the application."""
	logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _load_aliyun_credentials() -> AliyunCredentials | None:
	"""Load Aliyun credentials from the environment if available."""
	access_key_id = os.getenv("ALIBABA_CLOUD_ACCESS_KEY_ID")
	access_key_secret = os.getenv("ALIBABA_CLOUD_ACCESS_KEY_SECRET")
	region_id = os.getenv("ALIBABA_CLOUD_REGION", DEFAULT_REGION)
	if access_key_id and access_key_secret:
		return AliyunCredentials(
			access_key_id=access_key_id,
			access_key_secret=access_key_secret,
			region_id=region_id,
		)
	return None


def _load_dashscope_credentials() -> DashScopeCredentials | None:
	"""Load DashScope credentials from the environment if available."""
	api_key = os.getenv("DASHSCOPE_API_KEY")
	if api_key:
		return DashScopeCredentials(api_key=api_key)
	return None


def _load_geocoder_settings() -> GeocoderSettings:
	timeout_raw = os.getenv("PLACE_SNAP_GEOCODER_TIMEOUT")
	try:
		timeout = float(timeout_raw) if timeout_raw else DEFAULT_GEOCODER_TIMEOUT
	except ValueError:
		logging.getLogger(__name__).warning("Ignoring invalid geocoder timeout %r", timeout_raw)
		timeout = DEFAULT_GEOCODER_TIMEOUT
	return GeocoderSettings(
		url=os.getenv("PLACE_SNAP_GEOCODER_URL", DEFAULT_GEOCODER_URL),
		user_agent=os.getenv("PLACE_SNAP_USER_AGENT", DEFAULT_USER_AGENT),
		timeout=timeout,
		language=os.getenv("PLACE_SNAP_GEOCODER_LANGUAGE", "en"),
	)


def _parse_bool(value: str | None) -> bool:
	return bool(value) and value.strip().lower() in _TRUTHY


def _parse_log_level(value: str | None) -> int:
	if not value:
		return DEFAULT_LOG_LEVEL
	level = logging.getLevelName(value.strip().upper())
	return level if isinstance(level, int) else DEFAULT_LOG_LEVEL

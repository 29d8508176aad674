"""Command-line interface for capturing Chinese place names from photos."""
from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Any

from config import AppConfig, configure_logging, load_config
from errors import ConfigurationError, PipelineError
from pipeline.interfaces import TextRecognizer, Translator
from pipeline.orchestrator import CaptureOrchestrator
from providers.aliyun_ocr import AliyunOcrClient
from providers.ip_location import IpLocationProvider
from providers.nominatim_geocoder import NominatimGeocoder
from providers.qwen_ocr import QwenOcrClient
from providers.qwen_translate import QwenTranslator
from schemas import CaptureSummary, PromptSelection, Reject
from storage.snap_store import SqliteSnapStore
from utils.image_io import ensure_image_path
from utils.io_json import dump_json, to_json


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
	"""Parse command-line arguments."""
	parser = argparse.ArgumentParser(description="Turn photos of Chinese signs into translated, geotagged snaps")
	parser.add_argument("--outdir", default=None, help="Directory to store JSON outputs (default from config)")
	parser.add_argument("--db", default=None, help="SQLite database path (default from config)")
	subparsers = parser.add_subparsers(dest="command", required=True)

	capture = subparsers.add_parser("capture", help="Recognize text in an image and store it when unambiguous")
	capture.add_argument("--image", required=True, help="Path to the image file")
	capture.add_argument("--backend", choices=["aliyun", "qwen"], default="qwen", help="OCR backend to use")
	capture.add_argument("--task", choices=["document", "general"], default="document", help="Qwen OCR task type")
	capture.add_argument("--min_conf", type=float, default=0.5, help="Minimum confidence threshold for text spans")
	capture.add_argument(
		"--alltext_type",
		default="",
		help="Aliyun RecognizeAllText type (use to switch from RecognizeAdvanced)",
	)

	confirm = subparsers.add_parser("confirm", help="Store a snap for text chosen from a previous prompt")
	confirm.add_argument("--image", required=True, help="Path to the image file")
	confirm.add_argument("--text", required=True, help="The chosen line of text")

	subparsers.add_parser("list", help="List stored snaps, newest first")

	delete = subparsers.add_parser("delete", help="Delete a stored snap")
	delete.add_argument("--id", required=True, dest="snap_id", help="Snap id")

	subparsers.add_parser("clear", help="Delete every stored snap")
	return parser.parse_args(argv)


def build_recognizer(args: argparse.Namespace, config: AppConfig) -> TextRecognizer:
	"""Create the OCR client selected on the command line."""
	if args.backend == "aliyun":
		if not config.aliyun:
			raise ConfigurationError("Aliyun credentials are not configured.", component="recognizer")
		return AliyunOcrClient(config.aliyun, alltext_type=args.alltext_type or None, min_conf=args.min_conf)
	if not config.dashscope:
		raise ConfigurationError("DashScope API key is not configured.", component="recognizer")
	return QwenOcrClient(config.dashscope, task=args.task, min_conf=args.min_conf)


def build_translator(config: AppConfig) -> Translator | None:
	if not config.dashscope:
		logging.info("DashScope API key not configured; translations fall back to the phrasebook")
		return None
	return QwenTranslator(config.dashscope, model=config.translation_model)


def build_orchestrator(args: argparse.Namespace, config: AppConfig, store: SqliteSnapStore) -> CaptureOrchestrator:
	recognizer = build_recognizer(args, config) if args.command == "capture" else None
	return CaptureOrchestrator(
		store=store,
		geocoder=NominatimGeocoder(config.geocoder),
		recognizer=recognizer,
		translator=build_translator(config) if args.command in ("capture", "confirm") else None,
		live_location=IpLocationProvider() if config.live_location else None,
		use_live_location=config.live_location,
	)


def outcome_payload(outcome: CaptureSummary | PromptSelection | Reject) -> dict[str, Any]:
	"""JSON-ready view of a pipeline outcome, tagged with its status."""
	if isinstance(outcome, CaptureSummary):
		return {"status": "saved", **outcome.model_dump(mode="json")}
	if isinstance(outcome, PromptSelection):
		return {"status": "select", "candidates": outcome.candidates}
	return {"status": "rejected", "reason": outcome.reason.value, "text": outcome.text}


def run(args: argparse.Namespace, config: AppConfig) -> dict[str, Any] | list[Any]:
	"""Execute the requested command."""
	db_path = Path(args.db).expanduser().resolve() if args.db else config.db_path
	store = SqliteSnapStore(db_path)
	orchestrator = build_orchestrator(args, config, store)

	if args.command == "capture":
		image_path = ensure_image_path(args.image)
		payload: dict[str, Any] | list[Any] = outcome_payload(asyncio.run(orchestrator.process(image_path)))
	elif args.command == "confirm":
		image_path = ensure_image_path(args.image)
		payload = outcome_payload(asyncio.run(orchestrator.confirm(args.text, image_path)))
	elif args.command == "list":
		payload = [snap.model_dump(mode="json") for snap in orchestrator.list_snaps()]
	elif args.command == "delete":
		payload = {"status": "deleted" if orchestrator.delete(args.snap_id) else "not_found", "id": args.snap_id}
	else:
		payload = {"status": "cleared", "deleted": store.clear()}

	if args.command in ("capture", "confirm"):
		output_dir = Path(args.outdir).expanduser().resolve() if args.outdir else config.output_dir
		output_path = dump_json(payload, output_dir, args.command)
		logging.info("Saved capture output to %s", output_path)
	print(to_json(payload))
	return payload


def main(argv: list[str] | None = None) -> int:
	"""Entry point for the CLI application."""
	config = load_config()
	configure_logging(config.log_level)
	try:
		args = parse_arguments(argv)
		run(args, config)
	except PipelineError as exc:
		logging.error("%s", exc)
		return 1
	except Exception as exc:  # noqa: BLE001
		logging.exception("Capture processing failed: %s", exc)
		return 1
	return 0


if __name__ == "__main__":
	raise SystemExit(main())

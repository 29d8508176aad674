"""Smoke tests for the CLI scaffolding."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from config import AppConfig
from main import main, outcome_payload, parse_arguments, run
from schemas import CapturedSnap, OcrResult, OcrTextSpan, PromptSelection, Reject, RejectReason


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
	return AppConfig(
		aliyun=None,
		dashscope=None,
		db_path=tmp_path / "snaps.db",
		output_dir=tmp_path / "outputs",
	)


def test_schema_construction() -> None:
	"""Ensure schemas can be instantiated with expected fields."""
	span = OcrTextSpan(text="老王火锅店", confidence=0.9, polygon=[(0.0, 1.0)], line_index=0)
	result = OcrResult(
		backend="aliyun",
		task="advanced",
		image_path="/tmp/image.png",
		blocks=[span],
		full_text="老王火锅店",
		raw={"sample": True},
	)
	assert result.full_text == "老王火锅店"
	assert result.blocks[0].text == "老王火锅店"


def test_snaps_are_immutable() -> None:
	snap = CapturedSnap(image_reference="a.jpg", recognized_text="老王", pinyin="lǎo wáng", translation="Old Wang")
	assert len(snap.id) == 32
	with pytest.raises(Exception):
		snap.recognized_text = "店"  # type: ignore[misc]


def test_cli_parser_capture() -> None:
	"""Validate argument parser accepts expected switches."""
	args = parse_arguments(
		[
			"--outdir",
			"outputs",
			"capture",
			"--backend",
			"aliyun",
			"--image",
			"samples/sample.jpg",
			"--min_conf",
			"0.7",
			"--alltext_type",
			"General",
		]
	)
	assert args.command == "capture"
	assert args.backend == "aliyun"
	assert args.min_conf == 0.7
	assert args.alltext_type == "General"
	assert args.outdir == "outputs"


def test_cli_parser_confirm_and_delete() -> None:
	args = parse_arguments(["confirm", "--image", "a.jpg", "--text", "欢迎光临"])
	assert (args.command, args.text) == ("confirm", "欢迎光临")
	assert parse_arguments(["delete", "--id", "abc"]).snap_id == "abc"


def test_outcome_payloads() -> None:
	assert outcome_payload(PromptSelection(candidates=["一", "二"])) == {"status": "select", "candidates": ["一", "二"]}
	assert outcome_payload(Reject(reason=RejectReason.POOR_QUALITY, text="店")) == {
		"status": "rejected",
		"reason": "poor_quality",
		"text": "店",
	}


def test_confirm_list_delete_round_trip(app_config: AppConfig, plain_image: Path) -> None:
	"""Offline run: no GPS, no DashScope key, translation from the phrasebook."""
	saved = run(parse_arguments(["confirm", "--image", str(plain_image), "--text", "老王火锅店"]), app_config)
	assert saved["status"] == "saved"
	assert saved["translation"] == "Hot Pot Restaurant"
	assert saved["total_count"] == 1
	assert len(list((app_config.output_dir).glob("confirm_*.json"))) == 1

	listed = run(parse_arguments(["list"]), app_config)
	assert [item["recognized_text"] for item in listed] == ["老王火锅店"]

	deleted = run(parse_arguments(["delete", "--id", saved["snap_id"]]), app_config)
	assert deleted == {"status": "deleted", "id": saved["snap_id"]}
	assert run(parse_arguments(["list"]), app_config) == []


def test_capture_without_credentials_fails(monkeypatch: pytest.MonkeyPatch, app_config: AppConfig, plain_image: Path) -> None:
	"""A missing OCR key is reported through the exit code."""
	monkeypatch.setattr("main.load_config", lambda: app_config)
	assert main(["capture", "--image", str(plain_image)]) == 1


def test_json_output_keeps_chinese(app_config: AppConfig, plain_image: Path, capsys: pytest.CaptureFixture[str]) -> None:
	run(parse_arguments(["confirm", "--image", str(plain_image), "--text", "欢迎光临"]), app_config)
	printed = json.loads(capsys.readouterr().out)
	assert printed["text"] == "欢迎光临"
	assert printed["translation"] == "Welcome"

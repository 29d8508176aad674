"""Tests for line cleaning and script classification."""
from __future__ import annotations

import pytest

from pipeline.classifier import classify, clean_line, han_density, has_artifacts, is_chinese

ZWSP = chr(0x200B)
ZWJ = chr(0x200D)
BOM = chr(0xFEFF)
NBSP = chr(0xA0)

SAMPLES = [
	"欢迎光临\n营业时间\n123",
	f"  老王{ZWSP}火锅店  \r\n{NBSP}{NBSP}\n\n电话：{BOM}138 0000 0000",
	f"{ZWSP}{ZWJ}\n   \nOPEN\t24  HOURS",
	"KFC 肯德基\n\n\n   麦当劳  ",
	f"上海{NBSP}{NBSP}火车站 南广场",
	"",
]


def test_scenario_lines_are_split_and_tagged() -> None:
	"""Chinese lines are tagged, the numeric line is kept as non-Chinese."""
	lines = classify("欢迎光临\n营业时间\n123")
	assert [(line.text, line.is_chinese) for line in lines] == [
		("欢迎光临", True),
		("营业时间", True),
		("123", False),
	]


def test_cleaning_strips_artifacts_and_collapses_whitespace() -> None:
	"""Zero-width characters vanish and non-breaking spaces become single spaces."""
	assert clean_line(f"  老王{ZWSP}火锅{BOM}店 ") == "老王火锅店"
	assert clean_line(f"OPEN{NBSP}{NBSP} 24\tHOURS") == "OPEN 24 HOURS"


def test_artifact_only_lines_are_dropped() -> None:
	"""A line made only of zero-width characters is not a line."""
	lines = classify(f"{ZWSP}{ZWJ}{BOM}\n老王火锅店")
	assert [line.text for line in lines] == ["老王火锅店"]


def test_cjk_punctuation_counts_as_chinese_script() -> None:
	"""Lines with only CJK punctuation are still tagged as Chinese."""
	assert is_chinese("「」")
	assert not is_chinese("Cafe 24")


@pytest.mark.parametrize("raw", SAMPLES)
def test_lines_never_empty_and_artifact_free(raw: str) -> None:
	"""Every classified line has text and no leftover artifacts."""
	for line in classify(raw):
		assert line.text
		assert not has_artifacts(line.text)
		assert line.text == line.text.strip()


@pytest.mark.parametrize("raw", SAMPLES)
def test_classification_is_idempotent(raw: str) -> None:
	"""Classifying the joined output again gives the same lines."""
	first = classify(raw)
	assert classify("\n".join(line.text for line in first)) == first


def test_han_density_ignores_latin_and_punctuation() -> None:
	"""Density counts ideographs over all characters."""
	assert han_density("老王火锅店") == 1.0
	assert han_density("KFC肯德基") == pytest.approx(0.5)
	assert han_density("") == 0.0


def test_supplementary_plane_ideographs_are_chinese() -> None:
	"""Extension B and later ideographs outside the BMP count as Han."""
	rare = chr(0x20BB7) + chr(0x2A6A5) + chr(0x30EDD)
	assert is_chinese(rare)
	assert han_density(rare) == 1.0
	assert classify(rare)[0].is_chinese

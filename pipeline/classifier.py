"""Split a recognition blob into cleaned lines and tag each one's script."""


import logging
import re

from schemas import ClassifiedLine

_logger = logging.getLogger(__name__)

ZERO_WIDTH_PATTERN = re.compile("[\u200b-\u200d\ufeff]")
NBSP = "\u00a0"
WHITESPACE_RUN = re.compile(r"\s+")
MULTI_SPACE = re.compile(r"\s{2,}")

# BMP ideographs, then Extensions B to F, the compatibility supplement and G to H.
HAN_IDEOGRAPHS = (
	"\u4e00-\u9fff\u3400-\u4dbf\uf900-\ufaff"
	"\U00020000-\U0002ebef\U0002f800-\U0002fa1f\U00030000-\U000323af"
)
# Ideographs plus the CJK punctuation and bopomofo blocks.
HAN_SCRIPT_PATTERN = re.compile(f"[{HAN_IDEOGRAPHS}\u3000-\u303f\u3100-\u312f]")
# Ideographs only; punctuation does not count towards density.
HAN_IDEOGRAPH_PATTERN = re.compile(f"[{HAN_IDEOGRAPHS}]")


def clean_line(line: str) -> str:
	"""Strip OCR artifacts, collapse whitespace and trim a single line."""
	text = ZERO_WIDTH_PATTERN.sub("", line)
	text = text.replace(NBSP, " ")
	return WHITESPACE_RUN.sub(" ", text).strip()


def is_chinese(text: str) -> bool:
	return HAN_SCRIPT_PATTERN.search(text) is not None


def han_density(text: str) -> float:
	"""Share of characters in ``text`` that are Han ideographs."""
	if not text:
		return 0.0
	return len(HAN_IDEOGRAPH_PATTERN.findall(text)) / len(text)


def has_artifacts(text: str) -> bool:
	"""True if zero-width characters, non-breaking spaces or whitespace runs remain."""
	return bool(ZERO_WIDTH_PATTERN.search(text)) or NBSP in text or bool(MULTI_SPACE.search(text))


def classify(raw_text: str) -> list[ClassifiedLine]:
	"""Turn a raw recognition blob into classified lines.

	Lines that are blank before or after cleaning are dropped. Cleaning is a
	fixed point, so classifying the joined output again yields the same lines.
	"""
	lines: list[ClassifiedLine] = []
	for raw_line in raw_text.splitlines():
		if not raw_line.strip():
			continue
		text = clean_line(raw_line)
		if not text:
			_logger.debug("Dropped artifact-only line %r", raw_line)
			continue
		lines.append(ClassifiedLine(text=text, is_chinese=is_chinese(text)))
	_logger.debug(
		"Classified %d lines (%d Chinese)",
		len(lines),
		sum(1 for line in lines if line.is_chinese),
	)
	return lines


def chinese_texts(lines: list[ClassifiedLine]) -> list[str]:
	return [line.text for line in lines if line.is_chinese]


def other_texts(lines: list[ClassifiedLine]) -> list[str]:
	return [line.text for line in lines if not line.is_chinese]

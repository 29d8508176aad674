"""Pinyin transliteration of chosen text."""


import re
import unicodedata

from pypinyin import Style, pinyin

_WHITESPACE = re.compile(r"\s+")


def to_pinyin(text: str, lowercase: bool = True, tone_marks: bool = True) -> str:
	"""Transliterate Han characters to pinyin syllables separated by spaces.

	Non-Han runs pass through unchanged. Deterministic and offline.
	"""
	if not text.strip():
		return ""
	syllables = [item[0] for item in pinyin(text, style=Style.TONE, errors="default")]
	out = _WHITESPACE.sub(" ", " ".join(syllables)).strip()
	if not tone_marks:
		decomposed = unicodedata.normalize("NFD", out)
		out = "".join(char for char in decomposed if not unicodedata.combining(char))
	return out.lower() if lowercase else out

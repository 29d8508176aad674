"""Heuristic scoring of Chinese lines by how much they look like a venue name."""


from typing import Final, Iterable

from schemas import RankedCandidate

# Scores shift whenever these lists change; bump the version alongside the tests.
VOCABULARY_VERSION: Final[str] = "1"

VENUE_KEYWORDS: Final[tuple[str, ...]] = (
	"店", "餐厅", "饭馆", "酒楼", "茶楼", "咖啡", "面馆", "火锅",
	"烧烤", "小吃", "快餐", "酒店", "宾馆", "会所", "酒吧",
)
FOOD_CHARACTERS: Final[tuple[str, ...]] = ("菜", "肉", "鱼", "鸡", "鸭", "牛", "羊", "虾", "蟹")
NON_NAME_PATTERNS: Final[tuple[str, ...]] = ("电话", "地址", "营业", "时间", "价格", "菜单")
SYMBOLS: Final[frozenset[str]] = frozenset(".,;:!?()[]{}，。；：！？（）【】")

KEYWORD_BONUS: Final[float] = 40.0
FOOD_BONUS: Final[float] = 20.0
NON_NAME_PENALTY: Final[float] = 30.0
SYMBOL_PENALTY: Final[float] = 5.0


def length_bonus(length: int) -> float:
	if 2 <= length <= 4:
		return 30.0
	if 5 <= length <= 8:
		return 25.0
	if 9 <= length <= 12:
		return 15.0
	return 5.0


def _matches(text: str, vocabulary: Iterable[str]) -> int:
	return sum(1 for term in vocabulary if term in text)


def score_line(text: str) -> float:
	"""Score a single line. Never negative."""
	score = length_bonus(len(text))
	score += KEYWORD_BONUS * _matches(text, VENUE_KEYWORDS)
	score += FOOD_BONUS * _matches(text, FOOD_CHARACTERS)
	score -= NON_NAME_PENALTY * _matches(text, NON_NAME_PATTERNS)
	noise = sum(1 for char in text if char.isdecimal() or char in SYMBOLS)
	score -= SYMBOL_PENALTY * noise
	return max(score, 0.0)


def rank(lines: list[str]) -> list[RankedCandidate]:
	"""Rank Chinese lines, best name first.

	``sorted`` is stable, so lines with equal scores keep their input order.
	"""
	candidates = [RankedCandidate(text=line, score=score_line(line)) for line in lines]
	return sorted(candidates, key=lambda candidate: candidate.score, reverse=True)

"""Static English glosses used when the translation service is unavailable."""


from typing import Final

from schemas import TRANSLATION_UNAVAILABLE

# Matched longest first, so 酒店 wins over 店.
VENUE_PHRASES: Final[tuple[tuple[str, str], ...]] = (
	("火锅店", "Hot Pot Restaurant"),
	("咖啡馆", "Café"),
	("咖啡厅", "Café"),
	("餐厅", "Restaurant"),
	("饭馆", "Restaurant"),
	("饭店", "Restaurant"),
	("酒楼", "Restaurant"),
	("茶楼", "Teahouse"),
	("茶馆", "Teahouse"),
	("面馆", "Noodle Shop"),
	("火锅", "Hot Pot"),
	("烧烤", "Barbecue"),
	("小吃", "Snacks"),
	("快餐", "Fast Food"),
	("酒店", "Hotel"),
	("宾馆", "Hotel"),
	("会所", "Club"),
	("酒吧", "Bar"),
	("咖啡", "Coffee"),
	("超市", "Supermarket"),
	("药店", "Pharmacy"),
	("银行", "Bank"),
	("医院", "Hospital"),
	("地铁站", "Metro Station"),
	("火车站", "Railway Station"),
	("公园", "Park"),
	("欢迎光临", "Welcome"),
	("店", "Shop"),
)


def lookup(text: str) -> str | None:
	"""Gloss the venue terms found in ``text``, longest match first, or ``None``."""
	glosses: list[str] = []
	remaining = text
	for term, gloss in sorted(VENUE_PHRASES, key=lambda pair: len(pair[0]), reverse=True):
		if term in remaining:
			glosses.append(gloss)
			remaining = remaining.replace(term, " ")
	if not glosses:
		return None
	return " / ".join(dict.fromkeys(glosses))


def fallback_translation(text: str) -> str:
	return lookup(text) or TRANSLATION_UNAVAILABLE

"""Tests for the auto-accept / prompt / reject decision."""
from __future__ import annotations

from pipeline.classifier import chinese_texts, classify
from pipeline.gate import QualityGate, QualityThresholds, decide
from pipeline.ranker import rank
from schemas import AutoAccept, ClassifiedLine, PromptSelection, RankedCandidate, Reject, RejectReason


def _run(raw: str):
	lines = classify(raw)
	return decide(lines, rank(chinese_texts(lines)))


def test_no_text_is_rejected() -> None:
	assert decide([], []) == Reject(reason=RejectReason.NO_TEXT_DETECTED)
	assert _run("\n  \n") == Reject(reason=RejectReason.NO_TEXT_DETECTED)


def test_only_non_chinese_lines_are_offered() -> None:
	"""Without Chinese text the user picks from whatever was read."""
	assert _run("OPEN\n24 HOURS") == PromptSelection(candidates=["OPEN", "24 HOURS"])


def test_two_chinese_lines_prompt_in_ranked_order() -> None:
	"""The welcome-sign scenario prompts with both lines, best first."""
	assert _run("营业时间\n欢迎光临\n123") == PromptSelection(candidates=["欢迎光临", "营业时间"])
	assert _run("欢迎光临\n营业时间\n123") == PromptSelection(candidates=["欢迎光临", "营业时间"])


def test_large_score_gap_still_prompts() -> None:
	"""A dominant candidate is never auto-accepted when another exists."""
	decision = _run("老王火锅店\n电话")
	assert isinstance(decision, PromptSelection)
	assert decision.candidates == ["老王火锅店", "电话"]


def test_single_good_line_is_accepted() -> None:
	assert _run("老王火锅店") == AutoAccept(text="老王火锅店")


def test_single_line_with_non_chinese_noise_is_still_accepted() -> None:
	"""Non-Chinese lines do not block a lone strong Chinese candidate."""
	assert _run("老王火锅店\nTEL 123") == AutoAccept(text="老王火锅店")


def test_single_character_fails_quality() -> None:
	"""Length below two is poor quality; the text is surfaced for an override."""
	assert _run("店") == Reject(reason=RejectReason.POOR_QUALITY, text="店")


def test_low_han_density_fails_quality() -> None:
	"""Half ideographs is not enough."""
	assert _run("KFC肯德基") == Reject(reason=RejectReason.POOR_QUALITY, text="KFC肯德基")
	assert _run("A店") == Reject(reason=RejectReason.POOR_QUALITY, text="A店")


def test_residual_artifacts_fail_quality() -> None:
	"""Text that skipped cleaning is not accepted."""
	gate = QualityGate()
	assert gate.passes_quality("老王火锅店")
	assert not gate.passes_quality("老王  火锅店")
	assert not gate.passes_quality(f"老王{chr(0x200B)}火锅店")
	assert not gate.passes_quality(f"老王{chr(0xA0)}火锅店")

	line = "老王  火锅店"
	decision = gate.decide([ClassifiedLine(text=line, is_chinese=True)], [RankedCandidate(text=line, score=50.0)])
	assert decision == Reject(reason=RejectReason.POOR_QUALITY, text=line)


def test_custom_thresholds() -> None:
	gate = QualityGate(QualityThresholds(min_length=6))
	lines = classify("老王火锅店")
	assert gate.decide(lines, rank(chinese_texts(lines))).reason == RejectReason.POOR_QUALITY

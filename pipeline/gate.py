"""Decide what happens to a set of classified and ranked lines."""


import logging
from dataclasses import dataclass

from pipeline.classifier import han_density, has_artifacts
from schemas import AutoAccept, ClassifiedLine, GateDecision, PromptSelection, RankedCandidate, Reject, RejectReason


@dataclass(frozen=True)
class QualityThresholds:
	"""Acceptance limits for a lone Chinese candidate."""
	min_length: int = 2
	min_han_density: float = 0.5


@dataclass
class QualityGate:
	"""Maps recognition output to auto-accept, prompt or reject.

	The checks run in a fixed order. A lone low-quality Chinese line is rejected
	with its text attached so the user can still accept it, and two or more
	Chinese lines always go to the user no matter how far apart their scores are.
	"""

	thresholds: QualityThresholds = QualityThresholds()

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	def decide(self, all_lines: list[ClassifiedLine], ranked: list[RankedCandidate]) -> GateDecision:
		others = [line.text for line in all_lines if not line.is_chinese]

		if not ranked and not others:
			self._logger.info("No text detected")
			return Reject(reason=RejectReason.NO_TEXT_DETECTED)

		if not ranked:
			self._logger.info("No Chinese lines; offering %d other lines", len(others))
			return PromptSelection(candidates=others)

		if len(ranked) > 1:
			self._logger.info("%d Chinese candidates; prompting for selection", len(ranked))
			return PromptSelection(candidates=[candidate.text for candidate in ranked])

		text = ranked[0].text
		if self.passes_quality(text):
			self._logger.info("Auto-accepting %r", text)
			return AutoAccept(text=text)
		self._logger.info("Rejecting %r as poor quality", text)
		return Reject(reason=RejectReason.POOR_QUALITY, text=text)

	def passes_quality(self, text: str) -> bool:
		if len(text) < self.thresholds.min_length:
			return False
		if han_density(text) <= self.thresholds.min_han_density:
			return False
		return not has_artifacts(text)


def decide(all_lines: list[ClassifiedLine], ranked: list[RankedCandidate]) -> GateDecision:
	"""Run the gate with default thresholds."""
	return QualityGate().decide(all_lines, ranked)

"""Exception hierarchy for the capture pipeline."""


from typing import Any


class PipelineError(Exception):
	"""Base exception for capture pipeline failures."""

	def __init__(
		self,
		message: str,
		component: str | None = None,
		original_error: Exception | None = None,
	):
		self.message = message
		self.component = component
		self.original_error = original_error
		super().__init__(self._format_message())

	def _format_message(self) -> str:
		msg = f"Pipeline Error: {self.message}"
		if self.component:
			msg += f" (Component: {self.component})"
		if self.original_error:
			msg += f" [Original: {type(self.original_error).__name__}: {self.original_error}]"
		return msg


class ConfigurationError(PipelineError):
	"""Missing credentials or SDKs for a collaborator."""


class RecognitionFailed(PipelineError):
	"""Text recognition failed; the caller may retry with the same image."""


class GeocodingFailed(PipelineError):
	"""Reverse geocoding failed. Substituted, never raised out of the orchestrator."""


class TranslationFailed(PipelineError):
	"""Translation failed. Substituted, never raised out of the orchestrator."""


class EmptySelection(PipelineError):
	"""A confirmed selection contained no usable text."""


class PersistenceFailed(PipelineError):
	"""Writing the snap to the store failed.

	The fully resolved snap is attached so a retried ``confirm`` can reuse it
	without calling the collaborators again.
	"""

	def __init__(
		self,
		message: str,
		snap: Any = None,
		component: str | None = "store",
		original_error: Exception | None = None,
	):
		self.snap = snap
		super().__init__(message, component=component, original_error=original_error)

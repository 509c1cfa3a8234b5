from __future__ import annotations
from typing import Any, Dict


class RoadmapError(Exception):
	"""Terminal failure of a roadmap request, rendered as ``{"error": ...}``."""

	status_code: int = 500

	def __init__(self, message: str, *, status_code: int | None = None) -> None:
		super().__init__(message)
		self.message = message
		if status_code is not None:
			self.status_code = status_code

	def to_dict(self) -> Dict[str, Any]:
		return {"error": self.message}


class InvalidTopicError(RoadmapError):
	status_code = 400

	def __init__(self) -> None:
		super().__init__("topic required")


class MissingCredentialError(RoadmapError):
	status_code = 500

	def __init__(self) -> None:
		super().__init__("GEMINI_API_KEY is not set")


class UpstreamError(RoadmapError):
	# Transport failures never produced an HTTP status; report them as a bad gateway
	TRANSPORT_STATUS = 502

	def __init__(self, body: str, *, status_code: int | None = None) -> None:
		super().__init__(f"Gemini API error: {body}", status_code=status_code or self.TRANSPORT_STATUS)
		self.body = body


class InvalidModelOutputError(RoadmapError):
	status_code = 500

	def __init__(self, raw: str, *, message: str = "Invalid JSON from AI", reason: str | None = None) -> None:
		super().__init__(message)
		self.raw = raw
		self.reason = reason

	def to_dict(self) -> Dict[str, Any]:
		return {"error": self.message, "raw": self.raw}

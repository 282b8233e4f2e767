"""Error taxonomy shared by the orchestrators and the HTTP layer."""
from __future__ import annotations

from typing import List, Optional


class GatewayError(Exception):
	"""Base error carrying the HTTP status and a short user-facing message."""

	status_code: int = 500
	message: str = "Request failed"

	def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None) -> None:
		self.message = message or self.message
		self.detail = detail
		super().__init__(detail or self.message)


class ValidationError(GatewayError):
	status_code = 400
	message = "Invalid request"

	def __init__(self, errors: List[str]) -> None:
		self.errors = list(errors)
		super().__init__(detail="; ".join(self.errors))


class ThrottlingError(GatewayError):
	status_code = 429
	message = "Too many requests. Please try again in a few seconds."


class UpstreamFormatError(GatewayError):
	status_code = 502
	message = "Unexpected response from the generation service"


class UpstreamError(GatewayError):
	status_code = 502
	message = "The generation service failed"

"""Translation of collaborator HTTP failures into gateway errors."""
from __future__ import annotations
import logging
from typing import Any, List, NoReturn

import httpx

from .errors import ThrottlingError, UpstreamError, UpstreamFormatError

logger = logging.getLogger(__name__)


def raise_for_upstream(exc: Exception, family: str) -> NoReturn:
	if isinstance(exc, httpx.HTTPStatusError):
		if exc.response.status_code == 429:
			raise ThrottlingError(detail=f"{family} rate limit: {exc}") from exc
		raise UpstreamError(detail=f"{family} returned HTTP {exc.response.status_code}") from exc
	raise UpstreamError(detail=f"{family} request failed: {exc}") from exc


def json_body(r: httpx.Response, family: str) -> Any:
	try:
		return r.json()
	except ValueError:
		logger.error("%s returned a non-JSON body (%d bytes)", family, len(r.content))
		raise UpstreamFormatError(detail=f"{family} returned a non-JSON body") from None


def field_names(data: Any) -> List[str]:
	"""Top-level field names of a response, logged instead of the payload."""
	return sorted(data.keys()) if isinstance(data, dict) else [type(data).__name__]

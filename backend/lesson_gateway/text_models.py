from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, Optional
from .errors import UpstreamFormatError
from .upstream import field_names, json_body, raise_for_upstream
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 2048
DEFAULT_TEMPERATURE = 0.7


class TextModel:
	"""A text-generation family; chosen once at startup, called per request."""

	family = "text"
	model = ""

	@property
	def label(self) -> str:
		return f"{self.family}/{self.model}" if self.model else self.family

	async def generate(self, prompt: str, *, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
		raise NotImplementedError

	async def aclose(self) -> None:
		return None


class GeminiTextModel(TextModel):
	family = "gemini"

	def __init__(self, cfg: Settings, *, client: Optional[httpx.AsyncClient] = None) -> None:
		self.api_key = cfg.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = cfg.gemini_model
		if cfg.gemini_provider == "vertex":
			region = cfg.vertex_region
			project = cfg.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = client or httpx.AsyncClient(timeout=cfg.upstream_timeout_seconds)

	async def generate(self, prompt: str, *, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
		payload: Dict[str, Any] = {
			"contents": [{"parts": [{"text": prompt}]}],
			"generationConfig": {"temperature": DEFAULT_TEMPERATURE, "maxOutputTokens": max_tokens},
		}
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except (httpx.HTTPStatusError, httpx.RequestError) as err:
			raise_for_upstream(err, self.family)
		data = json_body(r, self.family)
		try:
			parts = data["candidates"][0]["content"].get("parts") or []
			# An empty candidate (e.g. safety stop) is returned as empty text so callers can retry
			text = "".join(str(p.get("text", "")) for p in parts)
		except (KeyError, IndexError, TypeError, AttributeError):
			logger.error("Unexpected Gemini response fields: %s", field_names(data))
			raise UpstreamFormatError(detail="Gemini response has no readable candidate text") from None
		return text.strip()

	async def aclose(self) -> None:
		await self._client.aclose()


class OpenRouterTextModel(TextModel):
	family = "openrouter"

	def __init__(self, cfg: Settings, *, client: Optional[httpx.AsyncClient] = None) -> None:
		if not cfg.openrouter_api_key:
			raise ValueError("OPENROUTER_API_KEY is not configured")
		self.model = cfg.openrouter_model
		self.base_url = cfg.openrouter_base_url
		self._headers = {
			"Authorization": f"Bearer {cfg.openrouter_api_key}",
			"Content-Type": "application/json",
			"HTTP-Referer": cfg.openrouter_referer,
			"X-Title": cfg.openrouter_title,
		}
		self._client = client or httpx.AsyncClient(timeout=cfg.upstream_timeout_seconds)

	async def generate(self, prompt: str, *, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
		payload: Dict[str, Any] = {
			"model": self.model,
			"messages": [{"role": "user", "content": prompt}],
			"max_tokens": max_tokens,
			"temperature": DEFAULT_TEMPERATURE,
		}
		try:
			r = await self._client.post(self.base_url, headers=self._headers, json=payload)
			r.raise_for_status()
		except (httpx.HTTPStatusError, httpx.RequestError) as err:
			raise_for_upstream(err, self.family)
		data = json_body(r, self.family)
		try:
			content = data["choices"][0]["message"]["content"]
		except (KeyError, IndexError, TypeError):
			logger.error("Unexpected OpenRouter response fields: %s", field_names(data))
			raise UpstreamFormatError(detail="OpenRouter response has no choices") from None
		return (content or "").strip()

	async def aclose(self) -> None:
		await self._client.aclose()


TEXT_MODEL_FAMILIES = {
	GeminiTextModel.family: GeminiTextModel,
	OpenRouterTextModel.family: OpenRouterTextModel,
}


def build_text_model(cfg: Optional[Settings] = None) -> TextModel:
	cfg = cfg or default_settings
	try:
		family = TEXT_MODEL_FAMILIES[cfg.text_model_family.lower()]
	except KeyError:
		raise ValueError(f"Unknown TEXT_MODEL_FAMILY '{cfg.text_model_family}'") from None
	return family(cfg)

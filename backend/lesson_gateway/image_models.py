"""Image-generation families (Imagen, Stability AI) behind one interface."""
from __future__ import annotations

import logging
import random
from typing import Any, Dict, Optional

import httpx

from .errors import UpstreamFormatError
from .settings import Settings, settings as default_settings
from .upstream import field_names, json_body, raise_for_upstream

logger = logging.getLogger(__name__)

IMAGE_SIZE = 1024


def _first_item(data: Dict[str, Any], field: str) -> Any:
	value = data.get(field)
	return value[0] if isinstance(value, list) and value else None


def extract_image_base64(data: Any, family: str) -> str:
	"""Pull the first base64 image out of any of the known response shapes."""
	if isinstance(data, dict):
		first = _first_item(data, "predictions")
		if isinstance(first, dict) and isinstance(first.get("bytesBase64Encoded"), str) and first["bytesBase64Encoded"]:
			return first["bytesBase64Encoded"]
		first = _first_item(data, "images")
		if isinstance(first, str) and first:
			return first
		first = _first_item(data, "artifacts")
		if isinstance(first, dict) and isinstance(first.get("base64"), str) and first["base64"]:
			return first["base64"]
	logger.error("Unexpected %s image response fields: %s", family, field_names(data))
	raise UpstreamFormatError("No image generated", detail=f"{family} response contained no image")


class ImageModel:
	family = "image"
	model = ""

	@property
	def label(self) -> str:
		return f"{self.family}/{self.model}" if self.model else self.family

	async def generate(self, prompt: str, negative_prompt: str = "") -> str:
		raise NotImplementedError

	async def aclose(self) -> None:
		return None


class ImagenImageModel(ImageModel):
	family = "imagen"

	def __init__(self, cfg: Settings, *, client: Optional[httpx.AsyncClient] = None) -> None:
		if not cfg.gemini_api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.api_key = cfg.gemini_api_key
		self.model = cfg.imagen_model
		self.base_url = f"https://generativelanguage.googleapis.com/v1beta/models/{cfg.imagen_model}:predict"
		self._client = client or httpx.AsyncClient(timeout=cfg.upstream_timeout_seconds)

	async def generate(self, prompt: str, negative_prompt: str = "") -> str:
		# Imagen on the Gemini API has no negative prompt field; fold it into the prompt
		text = f"{prompt}. Avoid: {negative_prompt}" if negative_prompt else prompt
		payload: Dict[str, Any] = {
			"instances": [{"prompt": text}],
			"parameters": {"sampleCount": 1, "aspectRatio": "1:1"},
		}
		try:
			r = await self._client.post(self.base_url, headers={"x-goog-api-key": self.api_key}, json=payload)
			r.raise_for_status()
		except (httpx.HTTPStatusError, httpx.RequestError) as err:
			raise_for_upstream(err, self.family)
		return extract_image_base64(json_body(r, self.family), self.family)

	async def aclose(self) -> None:
		await self._client.aclose()


class StabilityImageModel(ImageModel):
	family = "stability"

	def __init__(self, cfg: Settings, *, client: Optional[httpx.AsyncClient] = None) -> None:
		if not cfg.stability_api_key:
			raise ValueError("STABILITY_API_KEY is not configured")
		self.base_url = cfg.stability_base_url
		self._headers = {
			"Authorization": f"Bearer {cfg.stability_api_key}",
			"Content-Type": "application/json",
			"Accept": "application/json",
		}
		self._client = client or httpx.AsyncClient(timeout=cfg.upstream_timeout_seconds)

	async def generate(self, prompt: str, negative_prompt: str = "") -> str:
		text_prompts = [{"text": prompt, "weight": 1}]
		if negative_prompt:
			text_prompts.append({"text": negative_prompt, "weight": -1})
		payload: Dict[str, Any] = {
			"text_prompts": text_prompts,
			"cfg_scale": 10,
			"height": IMAGE_SIZE,
			"width": IMAGE_SIZE,
			"samples": 1,
			"steps": 30,
			"seed": random.randint(0, 999_999),
		}
		try:
			r = await self._client.post(self.base_url, headers=self._headers, json=payload)
			r.raise_for_status()
		except (httpx.HTTPStatusError, httpx.RequestError) as err:
			raise_for_upstream(err, self.family)
		return extract_image_base64(json_body(r, self.family), self.family)

	async def aclose(self) -> None:
		await self._client.aclose()


IMAGE_MODEL_FAMILIES = {
	ImagenImageModel.family: ImagenImageModel,
	StabilityImageModel.family: StabilityImageModel,
}


def build_image_model(cfg: Optional[Settings] = None) -> ImageModel:
	cfg = cfg or default_settings
	try:
		family = IMAGE_MODEL_FAMILIES[cfg.image_model_family.lower()]
	except KeyError:
		raise ValueError(f"Unknown IMAGE_MODEL_FAMILY '{cfg.image_model_family}'") from None
	return family(cfg)

"""Process-wide gateway state, built once at startup and injected everywhere.

Holds one cache store and one set of counters per resource class, the key
builder and the collaborator clients. Tests build a fresh context with fake
collaborators and a fake clock instead of touching module globals.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

from .cache.keys import KeyBuilder
from .cache.stats import RequestCounters
from .cache.store import CacheStore, Clock
from .errors import UpstreamError
from .image_models import ImageModel, build_image_model
from .settings import Settings, settings as default_settings
from .speech import GoogleSpeechRecognizer, GoogleSpeechSynthesizer, SpeechRecognizer, SpeechSynthesizer
from .text_models import TextModel, build_text_model

logger = logging.getLogger(__name__)


@dataclass
class ResourceCache:
	"""A cache store paired with the counters reported for it."""

	store: CacheStore
	counters: RequestCounters

	def lookup(self, key: str) -> Optional[Any]:
		value = self.store.get(key)
		if value is not None:
			self.counters.record_hit()
			logger.info("%s cache HIT: %s", self.store.name, key)
		else:
			logger.info("%s cache MISS: %s", self.store.name, key)
		return value

	def remember(self, key: str, value: Any) -> None:
		"""Store a freshly fetched value and count the upstream call behind it."""
		self.store.set(key, value)
		self.counters.record_call()
		logger.info("Cached %s: %s", self.store.name, key)


class UnconfiguredTextModel(TextModel):
	family = "unconfigured"

	def __init__(self, reason: str) -> None:
		self.reason = reason

	async def generate(self, prompt: str, *, max_tokens: int = 0) -> str:
		raise UpstreamError("Text generation is not configured", detail=self.reason)


class UnconfiguredImageModel(ImageModel):
	family = "unconfigured"

	def __init__(self, reason: str) -> None:
		self.reason = reason

	async def generate(self, prompt: str, negative_prompt: str = "") -> str:
		raise UpstreamError("Image generation is not configured", detail=self.reason)


@dataclass
class GatewayContext:
	settings: Settings
	keys: KeyBuilder
	text_model: TextModel
	image_model: ImageModel
	synthesizer: SpeechSynthesizer
	recognizer: SpeechRecognizer
	lessons: ResourceCache
	lesson_audio: ResourceCache
	doubts: ResourceCache
	doubt_audio: ResourceCache
	standalone_audio: ResourceCache
	diagrams: ResourceCache

	def caches(self) -> Iterator[ResourceCache]:
		yield from (
			self.lessons,
			self.lesson_audio,
			self.doubts,
			self.doubt_audio,
			self.standalone_audio,
			self.diagrams,
		)

	async def aclose(self) -> None:
		await self.text_model.aclose()
		await self.image_model.aclose()


def _resource(name: str, ttl_seconds: int, clock: Clock) -> ResourceCache:
	return ResourceCache(store=CacheStore(name, ttl_seconds, clock=clock), counters=RequestCounters(name))


def _or_unconfigured(builder: Callable[[Settings], Any], cfg: Settings, placeholder: Callable[[str], Any], label: str) -> Any:
	try:
		return builder(cfg)
	except ValueError as exc:
		logger.warning("%s disabled: %s", label, exc)
		return placeholder(str(exc))


def build_context(
	cfg: Optional[Settings] = None,
	*,
	text_model: Optional[TextModel] = None,
	image_model: Optional[ImageModel] = None,
	synthesizer: Optional[SpeechSynthesizer] = None,
	recognizer: Optional[SpeechRecognizer] = None,
	clock: Clock = time.monotonic,
) -> GatewayContext:
	cfg = cfg or default_settings
	return GatewayContext(
		settings=cfg,
		keys=KeyBuilder(cfg.cache_key_hash),
		text_model=text_model or _or_unconfigured(build_text_model, cfg, UnconfiguredTextModel, "Text generation"),
		image_model=image_model or _or_unconfigured(build_image_model, cfg, UnconfiguredImageModel, "Image generation"),
		synthesizer=synthesizer or GoogleSpeechSynthesizer(cfg),
		recognizer=recognizer or GoogleSpeechRecognizer(cfg),
		lessons=_resource("lesson", cfg.lesson_ttl_seconds, clock),
		lesson_audio=_resource("lesson audio", cfg.narration_audio_ttl_seconds, clock),
		doubts=_resource("doubt", cfg.doubt_ttl_seconds, clock),
		doubt_audio=_resource("doubt audio", cfg.doubt_audio_ttl_seconds, clock),
		standalone_audio=_resource("audio", cfg.standalone_audio_ttl_seconds, clock),
		diagrams=_resource("diagram", cfg.diagram_ttl_seconds, clock),
	)

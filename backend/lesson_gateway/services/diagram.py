from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..context import GatewayContext
from ..models import DiagramRecord
from ..relevance import build_diagram_prompt, get_suggested_style, list_styles, needs_visual_diagram
from ..validation import validate_diagram_request

logger = logging.getLogger(__name__)


class DiagramService:
	"""Generates educational diagrams for topics that benefit from one."""

	def __init__(self, ctx: GatewayContext) -> None:
		self.ctx = ctx

	async def get_diagram(
		self,
		topic: Optional[str],
		grade: Any,
		language: Optional[str],
		style: Optional[str] = None,
	) -> Dict[str, Any]:
		topic, grade, language = validate_diagram_request(topic, grade, language, style)
		if not needs_visual_diagram(topic):
			logger.info("Skipping diagram for non-visual topic '%s'", topic)
			return {
				"needsDiagram": False,
				"reason": f"'{topic}' is not a topic that benefits from a visual diagram.",
			}

		style = style or get_suggested_style(topic)
		key = self.ctx.keys.diagram(topic, grade, language, style)
		record = self.ctx.diagrams.lookup(key)
		cached = record is not None
		if not cached:
			prompt, negative = build_diagram_prompt(topic, grade, style)
			logger.info("Generating %s diagram for '%s'", style, topic)
			image = await self.ctx.image_model.generate(prompt, negative)
			record = DiagramRecord(image_base64=image, style=style)
			self.ctx.diagrams.remember(key, record)

		return {
			"needsDiagram": True,
			**record.model_dump(by_alias=True, mode="json"),
			"key": key,
			"cached": cached,
			"stats": self.ctx.diagrams.counters.snapshot(),
		}

	def styles(self) -> Dict[str, Any]:
		return {"styles": list_styles()}

	def stats(self) -> Dict[str, Any]:
		return {
			"diagrams": self.ctx.diagrams.counters.snapshot(),
			"cachedEntries": self.ctx.diagrams.store.keys(),
			"modelUsed": self.ctx.image_model.label,
		}

	def clear_cache(self, key: Optional[str] = None) -> Dict[str, Any]:
		"""Drop one diagram by key, or every diagram when no key is given."""
		if key:
			removed = 1 if self.ctx.diagrams.store.delete(key) else 0
			logger.info("Diagram cache entry %s removed: %s", key, bool(removed))
			return {"message": "Diagram cache entry cleared" if removed else "No diagram cached under that key",
				"cleared": {"diagrams": removed}}
		cleared = self.ctx.diagrams.store.flush()
		logger.info("Diagram cache cleared: %d entries", cleared)
		return {"message": "Diagram cache cleared", "cleared": {"diagrams": cleared}}

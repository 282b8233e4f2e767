from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass
class RequestCounters:
	"""Per-resource call/hit counters for reporting only.

	Two concurrent misses on the same key both count as API calls; the
	numbers are never used to make caching decisions.
	"""

	name: str
	api_calls: int = 0
	cache_hits: int = 0
	fallbacks: int = 0

	def record_hit(self) -> None:
		self.cache_hits += 1

	def record_call(self) -> None:
		self.api_calls += 1

	def record_fallback(self) -> None:
		self.fallbacks += 1

	@property
	def total_requests(self) -> int:
		return self.api_calls + self.cache_hits

	@property
	def hit_rate(self) -> str:
		total = self.total_requests
		rate = (self.cache_hits / total) * 100 if total else 0.0
		return f"{rate:.2f}%"

	def snapshot(self) -> Dict[str, object]:
		return {
			"totalRequests": self.total_requests,
			"apiCalls": self.api_calls,
			"cacheHits": self.cache_hits,
			"cacheHitRate": self.hit_rate,
		}

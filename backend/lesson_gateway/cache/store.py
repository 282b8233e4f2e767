"""In-process TTL cache used for every generated resource.

Each resource class owns one `CacheStore` with its own default TTL. Entries
are plain `(expires_at, value)` pairs; `get` drops an expired entry on read so
correctness never depends on the background sweep, which only bounds memory.

Example:
    >>> store = CacheStore("lesson", ttl_seconds=60)
    >>> store.set("lesson_gravity_6_english", {"title": "Gravity - Grade 6"})
    >>> store.get("lesson_gravity_6_english")["title"]
    'Gravity - Grade 6'
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class CacheStore:
	"""Key/value store with a per-store TTL and manual eviction.

	Args:
		name: Resource class this store holds, used in logs and stats
		ttl_seconds: Default lifetime applied by `set`
		check_period: Seconds between background sweeps (defaults to a sixth of the TTL)
		clock: Monotonic time source, injectable for tests
	"""

	def __init__(
		self,
		name: str,
		ttl_seconds: float,
		*,
		check_period: Optional[float] = None,
		clock: Clock = time.monotonic,
	) -> None:
		if ttl_seconds <= 0:
			raise ValueError("ttl_seconds must be positive")
		self.name = name
		self.ttl_seconds = ttl_seconds
		self.check_period = check_period if check_period is not None else max(1.0, ttl_seconds / 6)
		self._clock = clock
		self._entries: Dict[str, Tuple[float, Any]] = {}

	def get(self, key: str) -> Optional[Any]:
		entry = self._entries.get(key)
		if entry is None:
			return None
		expires_at, value = entry
		if self._clock() >= expires_at:
			self._entries.pop(key, None)
			return None
		return value

	def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
		ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
		self._entries[key] = (self._clock() + ttl, value)

	def delete(self, key: str) -> bool:
		return self._entries.pop(key, None) is not None

	def flush(self) -> int:
		"""Remove every entry and return how many were held (expired ones included)."""
		count = len(self._entries)
		self._entries.clear()
		return count

	def keys(self) -> int:
		"""Number of entries currently held, before any pending sweep."""
		return len(self._entries)

	def sweep(self) -> int:
		now = self._clock()
		expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
		for key in expired:
			del self._entries[key]
		if expired:
			logger.debug("Swept %d expired entries from %s cache", len(expired), self.name)
		return len(expired)

	async def sweep_forever(self) -> None:
		while True:
			await asyncio.sleep(self.check_period)
			self.sweep()

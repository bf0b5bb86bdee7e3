"""
Identity allocation for new catalog entries.
"""

import threading  # serialize concurrent allocations

from loguru import logger  # console logger


class IdAllocator:
	"""
	Issues strictly increasing integer ids starting at `start` (1 by default).
	Ids are never reused, even after the entity they named is deleted.
	"""

	def __init__(self, start: int = 1, name: str = "ids"):
		self._next = start  # next value to hand out
		self._lock = threading.Lock()  # one allocation at a time
		self.name = name  # label used in log lines

	def next(self) -> int:
		"""Return a fresh identifier."""
		with self._lock:
			value = self._next
			self._next += 1
		logger.debug(f"[IdAllocator:{self.name}] Issued id={value}")
		return value

	def peek(self) -> int:
		"""Return the id the next call to `next()` would issue, without consuming it."""
		with self._lock:
			return self._next

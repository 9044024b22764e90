"""One-shot countdowns keyed by session code."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Union

logger = logging.getLogger(__name__)

ExpiryCallback = Callable[[str], Union[Awaitable[Any], Any]]


class ExpirationScheduler:
	"""Run ``on_fire(code)`` once after a delay, with safe cancellation.

	A countdown removes itself from the pending table right before it
	fires, so ``disarm`` either cancels it outright or finds nothing to do.
	"""

	def __init__(self) -> None:
		self._pending: Dict[str, asyncio.Task] = {}

	def arm(self, code: str, delay_s: float, on_fire: ExpiryCallback) -> None:
		"""Schedule ``on_fire(code)`` after ``delay_s`` seconds, replacing any prior countdown."""
		self.disarm(code)
		task = asyncio.get_running_loop().create_task(self._run(code, delay_s, on_fire), name=f"expire:{code}")
		self._pending[code] = task
		logger.debug("Armed expiry for %s in %.1fs", code, delay_s)

	def disarm(self, code: str) -> bool:
		"""Cancel the pending countdown for ``code``. Returns whether one was cancelled."""
		task = self._pending.pop(code, None)
		if task is None:
			return False
		task.cancel()
		logger.debug("Disarmed expiry for %s", code)
		return True

	def __len__(self) -> int:
		return len(self._pending)

	async def shutdown(self) -> None:
		"""Cancel every pending countdown and wait for the tasks to finish."""
		tasks = list(self._pending.values())
		self._pending.clear()
		for task in tasks:
			task.cancel()
		if tasks:
			await asyncio.gather(*tasks, return_exceptions=True)

	async def _run(self, code: str, delay_s: float, on_fire: ExpiryCallback) -> None:
		try:
			await asyncio.sleep(delay_s)
		except asyncio.CancelledError:
			return
		if self._pending.get(code) is asyncio.current_task():
			del self._pending[code]
		try:
			result = on_fire(code)
			if inspect.isawaitable(result):
				await result
		except Exception:
			logger.exception("Expiry callback for session %s failed", code)

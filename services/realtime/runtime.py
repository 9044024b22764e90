"""Shared state of the chat server: registry, countdowns and live connections."""

from __future__ import annotations

import logging
from typing import Optional

from models.session_models import TimerEffect
from services.realtime.code_generator import PinGenerator
from services.realtime.connection_hub import ConnectionHub
from services.realtime.expiration import ExpirationScheduler
from services.realtime.session_store import SessionStore
from utils.app_settings import AppSettings

logger = logging.getLogger(__name__)


class PairingRuntime:
	"""Bundle the collaborators every connection handler works with.

	The registry decides when a countdown is needed; this class is the only
	place that turns those decisions into scheduler calls.
	"""

	def __init__(
		self,
		settings: AppSettings,
		store: Optional[SessionStore] = None,
		scheduler: Optional[ExpirationScheduler] = None,
		hub: Optional[ConnectionHub] = None,
	) -> None:
		self.settings = settings
		self.store = store if store is not None else SessionStore(PinGenerator(settings.pin_length))
		self.scheduler = scheduler if scheduler is not None else ExpirationScheduler()
		self.hub = hub if hub is not None else ConnectionHub()

	def apply_timer(self, code: str, effect: TimerEffect) -> None:
		if effect is TimerEffect.ARM:
			self.scheduler.arm(code, self.settings.session_duration_s, self.expire_session)
		elif effect is TimerEffect.DISARM:
			self.scheduler.disarm(code)

	async def expire_session(self, code: str) -> None:
		"""Tear a session down when its window closes and tell whoever is left."""
		outcome = self.store.expire(code)
		if not outcome.expired:
			logger.debug("Expiry for %s found no session; already torn down", code)
			return
		self.apply_timer(code, outcome.timer)
		await self.hub.broadcast(outcome.participants, "sessionExpired")

	async def shutdown(self) -> None:
		await self.scheduler.shutdown()

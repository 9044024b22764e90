"""Dispatch chat socket events for one connection."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from models.event_models import (
	InboundEvent,
	SendImagePayload,
	SendMessagePayload,
	SessionJoinedEvent,
	SessionStartedEvent,
)
from models.message_models import MessageKind
from models.session_models import JoinStatus
from services.realtime.connection_hub import Connection
from services.realtime.runtime import PairingRuntime
from utils.media_validation import validate_image_data_uri

logger = logging.getLogger(__name__)


class PairingSessionHandler:
	"""Translate one connection's events into registry calls and broadcasts.

	The handler is Unbound until a successful join and returns to Unbound on
	leave or disconnect. Reconnecting clients get a new handler and a new
	participant id; the previous identity is not recovered, so a rejoin can
	be refused as full while the other seat is taken.
	"""

	def __init__(self, runtime: PairingRuntime, connection: Connection) -> None:
		self.runtime = runtime
		self.connection = connection
		self.code: Optional[str] = None

	@property
	def participant_id(self) -> str:
		return self.connection.connection_id

	@property
	def is_bound(self) -> bool:
		return self.code is not None

	async def handle(self, payload: Dict[str, Any]) -> None:
		"""Process a single inbound frame."""
		try:
			event = InboundEvent.model_validate(payload)
			if event.type == "join":
				await self.join(event.data)
			elif event.type == "leave":
				await self.leave()
			elif event.type == "sendMessage":
				message = SendMessagePayload.model_validate(event.data)
				await self.send(MessageKind.TEXT, message.content)
			elif event.type == "sendImage":
				image = SendImagePayload.model_validate(event.data)
				await self.send(MessageKind.IMAGE, image.image_data)
			else:
				raise ValueError(f"Unsupported event type: {event.type}")
		except ValidationError as exc:
			await self._send_error(f"Invalid payload: {exc.error_count()} error(s)")
		except ValueError as exc:
			await self._send_error(str(exc))
		except Exception:
			logger.exception("Failed to handle frame from %s", self.participant_id)
			await self._send_error("Internal error")

	async def join(self, code: Any) -> None:
		store = self.runtime.store
		if not isinstance(code, str) or not store.generator.is_valid(code):
			raise ValueError("Session code must be a %d-digit number." % store.generator.length)
		store.ensure(code)
		result = store.join(code, self.participant_id)
		if result.status is JoinStatus.FULL:
			await self._send_error("Session is full")
			return
		self.runtime.apply_timer(code, result.timer)

		if self.code is not None and self.code != code:
			await self.leave()
		self.code = code
		snapshot = result.snapshot
		await self._send(
			"sessionJoined",
			SessionJoinedEvent(
				code=code,
				participant_count=snapshot.participant_count,
				active=snapshot.active,
				activation_time=snapshot.activation_time,
			).model_dump(by_alias=True),
		)
		if result.messages:
			await self._send("loadMessages", [message.to_dict() for message in result.messages])
		if result.started:
			await self.runtime.hub.broadcast(
				result.participants,
				"sessionStarted",
				SessionStartedEvent(
					activation_time=snapshot.activation_time,
					duration_ms=self.runtime.settings.session_duration_ms,
				).model_dump(by_alias=True),
			)

	async def send(self, kind: MessageKind, content: str) -> None:
		if self.code is None:
			logger.debug("Dropped %s from unbound connection %s", kind.value, self.participant_id)
			return
		if kind is MessageKind.IMAGE:
			validate_image_data_uri(content, self.runtime.settings.max_image_bytes)
		result = self.runtime.store.append(self.code, self.participant_id, kind, content)
		if result is None:
			return
		await self.runtime.hub.broadcast(result.recipients, "newMessage", result.message.to_dict())

	async def leave(self) -> None:
		"""Leave the bound session; does nothing when already unbound."""
		code = self.code
		if code is None:
			return
		self.code = None
		outcome = self.runtime.store.leave(code, self.participant_id)
		self.runtime.apply_timer(code, outcome.timer)
		if outcome.removed and outcome.remaining:
			await self.runtime.hub.broadcast(outcome.remaining, "participantLeft")

	async def disconnect(self) -> None:
		"""Transport closed: same teardown as an explicit leave."""
		try:
			await self.leave()
		finally:
			self.runtime.hub.unregister(self.participant_id)

	async def _send_error(self, detail: str) -> None:
		await self._send("error", detail)

	async def _send(self, event: str, data: Any = None) -> None:
		await self.runtime.hub.send(self.participant_id, event, data)

"""Track live connections and fan events out to a session's participants."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Optional, Protocol
from uuid import uuid4

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class Connection(Protocol):
	"""Anything that can deliver an outbound event to one client."""

	connection_id: str

	async def send_event(self, event: str, data: Any = None) -> None: ...


class WebSocketConnection:
	"""Wrap a Starlette websocket with a stable participant id."""

	def __init__(self, websocket: WebSocket, connection_id: Optional[str] = None) -> None:
		self.websocket = websocket
		self.connection_id = connection_id or uuid4().hex

	async def send_event(self, event: str, data: Any = None) -> None:
		await self.websocket.send_text(json.dumps({"type": event, "data": data}))

	def __repr__(self) -> str:
		return f"WebSocketConnection({self.connection_id})"


class ConnectionHub:
	"""Registry of connected clients, addressed by participant id."""

	def __init__(self) -> None:
		self._connections: Dict[str, Connection] = {}

	def register(self, connection: Connection) -> None:
		self._connections[connection.connection_id] = connection

	def unregister(self, connection_id: str) -> None:
		self._connections.pop(connection_id, None)

	def get(self, connection_id: str) -> Optional[Connection]:
		return self._connections.get(connection_id)

	def __len__(self) -> int:
		return len(self._connections)

	async def send(self, connection_id: str, event: str, data: Any = None) -> bool:
		"""Deliver one event to one connection. Returns False if it is gone."""
		connection = self._connections.get(connection_id)
		if connection is None:
			return False
		try:
			await connection.send_event(event, data)
		except Exception:
			logger.warning("Dropping connection %s after failed %s send", connection_id, event, exc_info=True)
			self.unregister(connection_id)
			return False
		return True

	async def broadcast(self, participants: Iterable[str], event: str, data: Any = None) -> int:
		"""Send an event to every listed participant still connected."""
		delivered = 0
		for participant_id in tuple(participants):
			if await self.send(participant_id, event, data):
				delivered += 1
		return delivered

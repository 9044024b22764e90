"""WebSocket endpoint for pairing and message relay."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, HTTPException, WebSocket
from starlette.websockets import WebSocketDisconnect

from services.realtime.connection_hub import WebSocketConnection
from services.realtime.runtime import PairingRuntime
from services.realtime.ws_session import PairingSessionHandler

router = APIRouter()


def _require_runtime(websocket: WebSocket) -> PairingRuntime:
	runtime = getattr(websocket.app.state, "runtime", None)
	if runtime is None:
		raise HTTPException(status_code=500, detail="Chat runtime unavailable")
	return runtime


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket, runtime: PairingRuntime = Depends(_require_runtime)):
	"""Serve one client for its whole connection lifetime."""
	await websocket.accept()
	connection = WebSocketConnection(websocket)
	runtime.hub.register(connection)
	handler = PairingSessionHandler(runtime, connection)
	await connection.send_event("connected", {"id": connection.connection_id})
	try:
		while True:
			try:
				raw = await websocket.receive_text()
			except WebSocketDisconnect:
				break
			except KeyError:
				# binary frame
				await connection.send_event("error", "Frames must be JSON text")
				continue
			try:
				payload = json.loads(raw)
			except ValueError:
				await connection.send_event("error", "Payload must be JSON")
				continue
			if not isinstance(payload, dict):
				await connection.send_event("error", "Payload must be a JSON object")
				continue
			await handler.handle(payload)
	finally:
		await handler.disconnect()

"""Side-channel helpers for allocating and checking pairing codes."""

from __future__ import annotations

from fastapi import HTTPException, Request

from models.event_models import AllocateCodeResponse, CheckCodeResponse
from services.realtime.runtime import PairingRuntime


def _runtime(request: Request) -> PairingRuntime:
	runtime = getattr(request.app.state, "runtime", None)
	if runtime is None:
		raise HTTPException(status_code=500, detail="Chat runtime unavailable")
	return runtime


async def allocate_code(request: Request) -> AllocateCodeResponse:
	"""Reserve a fresh code and create its empty session."""
	session = _runtime(request).store.allocate()
	return AllocateCodeResponse(code=session.code)


async def check_code(request: Request, code: str) -> CheckCodeResponse:
	"""Report whether a session exists for ``code`` without touching it."""
	snapshot = _runtime(request).store.lookup(code)
	if snapshot is None:
		return CheckCodeResponse(exists=False)
	return CheckCodeResponse(
		exists=True,
		participant_count=snapshot.participant_count,
		active=snapshot.active,
	)

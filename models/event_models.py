"""Pydantic payloads for socket events and side-channel responses."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class InboundEvent(BaseModel):
	"""Envelope of every frame a client sends: ``{"type": ..., "data": ...}``."""

	type: str
	data: Any = None


class SendMessagePayload(BaseModel):
	content: str = Field(min_length=1)


class SendImagePayload(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	image_data: str = Field(alias="imageData", min_length=1)


class SessionJoinedEvent(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	code: str
	participant_count: int = Field(alias="participantCount")
	active: bool
	activation_time: Optional[int] = Field(default=None, alias="activationTime")


class SessionStartedEvent(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	activation_time: int = Field(alias="activationTime")
	duration_ms: int = Field(alias="durationMs")


class AllocateCodeResponse(BaseModel):
	code: str


class CheckCodeResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	exists: bool
	participant_count: int = Field(default=0, alias="participantCount")
	active: bool = False


class HealthResponse(BaseModel):
	ok: bool = True
	sessions: int = 0
	connections: int = 0
	countdowns: int = 0

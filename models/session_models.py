"""Session domain models for paired, time-boxed chats."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from models.message_models import Message
from services.realtime.message_log import MessageLog

MAX_PARTICIPANTS = 2


class JoinStatus(str, Enum):
	JOINED = "joined"
	FULL = "full"


class LeaveStatus(str, Enum):
	REMAINING = "remaining"
	EMPTIED = "emptied"


class TimerEffect(str, Enum):
	"""Side effect a registry transition asks the scheduler to perform."""

	NONE = "none"
	ARM = "arm"
	DISARM = "disarm"


@dataclass
class Session:
	"""In-memory state of one pairing."""

	code: str
	participants: List[str] = field(default_factory=list)
	messages: MessageLog = field(default_factory=MessageLog)
	activation_time: Optional[int] = None
	active: bool = False
	timer_armed: bool = False

	@property
	def participant_count(self) -> int:
		return len(self.participants)

	@property
	def is_full(self) -> bool:
		return len(self.participants) >= MAX_PARTICIPANTS

	def snapshot(self) -> SessionSnapshot:
		return SessionSnapshot(
			code=self.code,
			participant_count=len(self.participants),
			active=self.active,
			activation_time=self.activation_time,
		)


@dataclass(frozen=True)
class SessionSnapshot:
	"""Read-only view of a session handed to callers outside the registry."""

	code: str
	participant_count: int
	active: bool
	activation_time: Optional[int]


@dataclass(frozen=True)
class JoinResult:
	status: JoinStatus
	snapshot: Optional[SessionSnapshot] = None
	messages: Tuple[Message, ...] = ()
	participants: Tuple[str, ...] = ()
	started: bool = False
	timer: TimerEffect = TimerEffect.NONE


@dataclass(frozen=True)
class LeaveOutcome:
	"""Result of removing a participant.

	``removed`` is False when the participant (or the whole session) was
	already gone, in which case nothing was mutated.
	"""

	status: LeaveStatus
	remaining: Tuple[str, ...] = ()
	removed: bool = False
	timer: TimerEffect = TimerEffect.NONE


@dataclass(frozen=True)
class AppendResult:
	message: Message
	recipients: Tuple[str, ...]


@dataclass(frozen=True)
class ExpireOutcome:
	expired: bool
	participants: Tuple[str, ...] = ()
	timer: TimerEffect = TimerEffect.NONE

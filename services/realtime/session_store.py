"""In-memory registry of pairing sessions keyed by their numeric code.

Every public method is synchronous and never awaits, so on the asyncio
event loop each call completes before any other event for the same code is
processed. Timer work is not done here: transitions report a
``TimerEffect`` which the caller hands to the scheduler.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Callable, Dict, Optional

from models.message_models import Message, MessageKind
from models.session_models import (
	AppendResult,
	ExpireOutcome,
	JoinResult,
	JoinStatus,
	LeaveOutcome,
	LeaveStatus,
	Session,
	SessionSnapshot,
	TimerEffect,
)
from services.realtime.code_generator import PinGenerator

logger = logging.getLogger(__name__)


def _now_ms() -> int:
	return int(time.time() * 1000)


class SessionStore:
	"""Own every session and enforce the two-participant lifecycle."""

	def __init__(
		self,
		generator: Optional[PinGenerator] = None,
		clock: Callable[[], int] = _now_ms,
	) -> None:
		self._sessions: Dict[str, Session] = {}
		self._generator = generator or PinGenerator()
		self._clock = clock
		self._message_ids = itertools.count(1)

	def __contains__(self, code: object) -> bool:
		return code in self._sessions

	def __len__(self) -> int:
		return len(self._sessions)

	@property
	def generator(self) -> PinGenerator:
		return self._generator

	def allocate(self) -> Session:
		"""Create an empty session under a fresh, unused code."""
		code = self._generator.generate(self._sessions.__contains__)
		return self._create(code)

	def ensure(self, code: str) -> Session:
		"""Return the session for ``code``, creating an empty one if needed."""
		session = self._sessions.get(code)
		if session is None:
			session = self._create(code)
		return session

	def lookup(self, code: str) -> Optional[SessionSnapshot]:
		"""Return a snapshot of the session or None; never creates one."""
		session = self._sessions.get(code)
		return session.snapshot() if session is not None else None

	def join(self, code: str, participant_id: str) -> JoinResult:
		"""Add a participant, activating the session on the second join."""
		session = self.ensure(code)
		if participant_id in session.participants:
			return self._joined(session)
		if session.is_full:
			logger.info("Session %s is full; rejected %s", code, participant_id)
			return JoinResult(status=JoinStatus.FULL, snapshot=session.snapshot(), participants=tuple(session.participants))

		session.participants.append(participant_id)
		logger.info("Participant %s joined session %s (%d/2)", participant_id, code, session.participant_count)
		if session.is_full and session.activation_time is None:
			session.active = True
			session.activation_time = self._clock()
			session.timer_armed = True
			logger.info("Session %s activated at %d", code, session.activation_time)
			return self._joined(session, started=True, timer=TimerEffect.ARM)
		return self._joined(session)

	def leave(self, code: str, participant_id: str) -> LeaveOutcome:
		"""Remove a participant; deletes the session when it becomes empty.

		Leaving a session that no longer exists, or one the participant is not
		part of, changes nothing.
		"""
		session = self._sessions.get(code)
		if session is None or participant_id not in session.participants:
			remaining = tuple(session.participants) if session is not None else ()
			return LeaveOutcome(status=LeaveStatus.REMAINING, remaining=remaining, removed=False)

		session.participants.remove(participant_id)
		if session.participants:
			logger.info("Participant %s left session %s", participant_id, code)
			return LeaveOutcome(status=LeaveStatus.REMAINING, remaining=tuple(session.participants), removed=True)

		timer = self._discard(session)
		logger.info("Session %s emptied by %s and removed", code, participant_id)
		return LeaveOutcome(status=LeaveStatus.EMPTIED, removed=True, timer=timer)

	def append(self, code: str, sender_id: str, kind: MessageKind, content: str) -> Optional[AppendResult]:
		"""Record a message in an active session.

		Returns None (and mutates nothing) when the session is missing or
		inactive, or the sender is not one of its participants.
		"""
		session = self._sessions.get(code)
		if session is None or not session.active or sender_id not in session.participants:
			logger.debug("Dropped %s message from %s to inactive session %s", kind.value, sender_id, code)
			return None
		message = Message(
			id=next(self._message_ids),
			type=kind.value,
			content=content,
			sender=sender_id,
			timestamp=self._clock(),
		)
		session.messages.append(message)
		return AppendResult(message=message, recipients=tuple(session.participants))

	def expire(self, code: str) -> ExpireOutcome:
		"""End a session whose time window ran out. Absent codes are a no-op."""
		session = self._sessions.get(code)
		if session is None:
			return ExpireOutcome(expired=False)
		participants = tuple(session.participants)
		timer = self._discard(session)
		logger.info("Session %s expired with %d participant(s)", code, len(participants))
		return ExpireOutcome(expired=True, participants=participants, timer=timer)

	def _create(self, code: str) -> Session:
		session = Session(code=code)
		self._sessions[code] = session
		logger.info("Session %s created", code)
		return session

	def _discard(self, session: Session) -> TimerEffect:
		"""Drop a session from the registry and report whether its timer must go."""
		self._sessions.pop(session.code, None)
		session.active = False
		timer = TimerEffect.DISARM if session.timer_armed else TimerEffect.NONE
		session.timer_armed = False
		return timer

	def _joined(self, session: Session, started: bool = False, timer: TimerEffect = TimerEffect.NONE) -> JoinResult:
		return JoinResult(
			status=JoinStatus.JOINED,
			snapshot=session.snapshot(),
			messages=session.messages.replay(),
			participants=tuple(session.participants),
			started=started,
			timer=timer,
		)

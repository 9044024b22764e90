"""Append-only message log kept for the lifetime of one session."""

from __future__ import annotations

from typing import List, Tuple

from models.message_models import Message


class MessageLog:
	"""Ordered messages of a session, replayed to participants who (re)join."""

	def __init__(self) -> None:
		self._messages: List[Message] = []

	def append(self, message: Message) -> Message:
		"""Add a message after the last one; ids must keep increasing."""
		if self._messages and message.id <= self._messages[-1].id:
			raise ValueError(f"Message id {message.id} does not follow {self._messages[-1].id}")
		self._messages.append(message)
		return message

	def replay(self) -> Tuple[Message, ...]:
		"""Return a snapshot of the log in send order."""
		return tuple(self._messages)

	def __len__(self) -> int:
		return len(self._messages)

	def __repr__(self) -> str:
		return f"MessageLog(size={len(self._messages)})"

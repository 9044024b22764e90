"""Chat message model shared by the message log and the session registry."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict


class MessageKind(str, Enum):
	TEXT = "text"
	IMAGE = "image"


@dataclass(frozen=True)
class Message:
	"""Immutable chat message owned by exactly one session."""

	id: int
	type: str
	content: str
	sender: str
	timestamp: int

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

"""Generate short numeric pairing codes."""

from __future__ import annotations

import random
from typing import Callable, Optional

DEFAULT_PIN_LENGTH = 6


class PinGenerator:
	"""Draw fixed-width numeric codes uniformly, skipping codes already in use.

	Args:
		length: Number of digits; the first digit is never zero, so 6 digits
			means 100000-999999.
		rng: Random source, injectable for deterministic tests.
	"""

	def __init__(self, length: int = DEFAULT_PIN_LENGTH, rng: Optional[random.Random] = None) -> None:
		if length < 1:
			raise ValueError("PIN length must be at least 1")
		self.length = length
		self._low = 10 ** (length - 1)
		self._high = 10**length - 1
		self._rng = rng or random.SystemRandom()

	def generate(self, exists: Callable[[str], bool]) -> str:
		"""Return a code for which ``exists`` is False.

		The caller must hold exclusive access to whatever ``exists`` checks
		until the code has been registered.
		"""
		while True:
			code = str(self._rng.randint(self._low, self._high))
			if not exists(code):
				return code

	def is_valid(self, code: str) -> bool:
		"""True for a string of exactly ``length`` ASCII digits."""
		return len(code) == self.length and code.isascii() and code.isdigit()

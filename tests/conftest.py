"""
Pytest fixtures for chat server tests.
"""

from typing import Any, Dict, List, Tuple

import pytest

from services.realtime.code_generator import PinGenerator
from services.realtime.runtime import PairingRuntime
from services.realtime.session_store import SessionStore
from services.realtime.ws_session import PairingSessionHandler
from utils.app_settings import AppSettings


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def advance(self, ms: int) -> None:
        self.now += ms

    def __call__(self) -> int:
        return self.now


class SequenceRandom:
    """Stand-in for random.Random that replays a fixed list of draws."""

    def __init__(self, values: List[int]):
        self._values = list(values)
        self.calls = 0

    def randint(self, low: int, high: int) -> int:
        self.calls += 1
        value = self._values.pop(0)
        assert low <= value <= high
        return value


class FakeScheduler:
    """Records countdowns instead of sleeping; tests fire them by hand."""

    def __init__(self):
        self.armed: Dict[str, Tuple[float, Any]] = {}
        self.history: List[Tuple[str, str]] = []

    def arm(self, code: str, delay_s: float, on_fire) -> None:
        self.armed[code] = (delay_s, on_fire)
        self.history.append(("arm", code))

    def disarm(self, code: str) -> bool:
        self.history.append(("disarm", code))
        return self.armed.pop(code, None) is not None

    def __len__(self) -> int:
        return len(self.armed)

    async def fire(self, code: str) -> None:
        _, on_fire = self.armed.pop(code)
        await on_fire(code)

    async def shutdown(self) -> None:
        self.armed.clear()


class FakeConnection:
    """Connection that keeps every outbound event in memory."""

    def __init__(self, connection_id: str):
        self.connection_id = connection_id
        self.events: List[Tuple[str, Any]] = []

    async def send_event(self, event: str, data: Any = None) -> None:
        self.events.append((event, data))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def last(self, name: str) -> Any:
        for event, data in reversed(self.events):
            if event == name:
                return data
        raise AssertionError(f"no {name} event in {self.names()}")

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> SessionStore:
    return SessionStore(PinGenerator(6), clock=clock)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(session_duration_ms=3_600_000, max_image_bytes=1024)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def runtime(settings: AppSettings, store: SessionStore, scheduler: FakeScheduler) -> PairingRuntime:
    return PairingRuntime(settings, store=store, scheduler=scheduler)


@pytest.fixture
def connect(runtime: PairingRuntime):
    """Return a factory that registers a fake client and its handler."""

    def _connect(connection_id: str) -> Tuple[FakeConnection, PairingSessionHandler]:
        connection = FakeConnection(connection_id)
        runtime.hub.register(connection)
        return connection, PairingSessionHandler(runtime, connection)

    return _connect

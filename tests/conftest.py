import asyncio
import itertools
import json
from typing import Any, Callable, Mapping, Optional

import pytest

from ewelink_session.errors import TransportError


class FakeSequence:
    """Counting sequence source for tests that inspect sequence values."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self._counter = itertools.count(start)

    def next(self) -> int:
        return next(self._counter)


class FakeTransport:
    """In-memory transport recording sent frames.

    When ``responder`` is set, it is called with every decoded frame and any
    reply it returns is delivered to the listeners on the next loop turn.
    """

    def __init__(self, *, fail_send: bool = False) -> None:
        self.fail_send = fail_send
        self.sent: list[dict[str, Any]] = []
        self.listeners: list[Callable[[str], None]] = []
        self.closed = False
        self.responder: Optional[Callable[[dict[str, Any]], Any]] = None

    async def send(self, payload: str) -> None:
        if self.fail_send:
            raise TransportError("Simulated send failure")
        frame = json.loads(payload)
        self.sent.append(frame)
        if self.responder is not None:
            reply = self.responder(frame)
            if reply is not None:
                asyncio.get_running_loop().call_soon(self.deliver, reply)

    async def close(self) -> None:
        self.closed = True

    def add_listener(self, listener: Callable[[str], None]) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: Callable[[str], None]) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def deliver(self, message: Any) -> None:
        raw = message if isinstance(message, str) else json.dumps(message)
        for listener in list(self.listeners):
            listener(raw)

    async def wait_for_frames(self, count: int) -> None:
        for _ in range(100):
            if len(self.sent) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} frames, saw {len(self.sent)}")


class FakeDirectory:
    def __init__(self, devices: Mapping[str, Mapping[str, Any]]) -> None:
        self.devices = dict(devices)
        self.calls: list[str] = []

    async def get_device(self, device_id: str) -> Mapping[str, Any]:
        self.calls.append(device_id)
        return self.devices[device_id]


def _ack(frame: Mapping[str, Any], *, error: int = 0, reason: str = "ok", **extra: Any):
    payload = {
        "error": error,
        "reason": reason,
        "deviceid": frame.get("deviceid"),
        "apikey": frame.get("apikey"),
        "sequence": str(frame["sequence"]),
    }
    payload.update(extra)
    return payload


@pytest.fixture
def ack():
    """Build the acknowledgement the server sends for a frame."""
    return _ack


@pytest.fixture
def transport_factory():
    def _create(*, fail_send: bool = False) -> FakeTransport:
        return FakeTransport(fail_send=fail_send)

    return _create


@pytest.fixture
def transport(transport_factory) -> FakeTransport:
    return transport_factory()


@pytest.fixture
def sequence() -> FakeSequence:
    return FakeSequence()


@pytest.fixture
def directory_factory():
    return FakeDirectory


@pytest.fixture
def directory(directory_factory) -> FakeDirectory:
    return directory_factory(
        {
            "single": {
                "apikey": "owner-single",
                "params": {"switch": "off"},
            },
            "dual": {
                "apikey": "owner-dual",
                "params": {
                    "switches": [
                        {"switch": "on", "outlet": 0},
                        {"switch": "off", "outlet": 1},
                    ]
                },
            },
        }
    )

"""Correlation of asynchronous acknowledgements with the commands that caused them.

Every correlated command is registered under its sequence id and device id
before it is sent. Inbound frames are dispatched here in arrival order; a
frame whose ``sequence`` and ``deviceid`` match a pending entry settles that
entry's future. Entries that see no matching frame before their deadline
settle with a timeout result instead. Either way the entry is torn down
exactly once: the timer is cancelled and the entry leaves the registry before
the future receives its result.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..constants import DEFAULT_RESPONSE_TIMEOUT_SECONDS
from .models import CommandResult

LOGGER = logging.getLogger(__name__)

_Key = Tuple[int, str]


@dataclass(slots=True)
class _PendingRequest:
    sequence: int
    device_id: str
    future: asyncio.Future[CommandResult]
    timer: Optional[asyncio.TimerHandle] = None

    @property
    def key(self) -> _Key:
        return (self.sequence, self.device_id)


class CorrelationRegistry:
    """Maps in-flight (sequence, device) pairs to one-shot completion futures."""

    def __init__(self, timeout: float = DEFAULT_RESPONSE_TIMEOUT_SECONDS) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self._pending: Dict[_Key, _PendingRequest] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_pending(self, sequence: int, device_id: str) -> bool:
        return (sequence, device_id) in self._pending

    def register(
        self,
        sequence: int,
        device_id: str,
        timeout: Optional[float] = None,
    ) -> asyncio.Future[CommandResult]:
        """Register a pending request and arm its timeout.

        Must be called from within the running event loop. The returned
        future settles exactly once with a ``CommandResult``.

        Requests for different devices may share a sequence id.

        Raises:
            ValueError: If ``sequence`` is already pending for ``device_id``.
        """

        if (sequence, device_id) in self._pending:
            raise ValueError(
                f"Sequence {sequence} already registered for device {device_id}"
            )

        loop = asyncio.get_running_loop()
        deadline = self.timeout if timeout is None else timeout

        pending = _PendingRequest(
            sequence=sequence,
            device_id=device_id,
            future=loop.create_future(),
        )
        pending.timer = loop.call_later(deadline, self._expire, pending)
        pending.future.add_done_callback(lambda _: self._teardown(pending))
        self._pending[pending.key] = pending

        LOGGER.debug(
            "Registered correlation seq=%s device=%s timeout=%.1fs",
            sequence,
            device_id,
            deadline,
        )
        return pending.future

    def dispatch(self, raw: str | bytes) -> None:
        """Route one inbound frame to the matching pending request, if any."""

        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            LOGGER.debug("Dropping non-JSON frame")
            return

        if not isinstance(data, dict):
            return

        sequence = _coerce_sequence(data.get("sequence"))
        if sequence is None:
            return

        device_id = data.get("deviceid")
        if not isinstance(device_id, str):
            return

        pending = self._pending.get((sequence, device_id))
        if pending is None:
            return

        result = CommandResult.from_response(data)
        LOGGER.debug(
            "Resolved correlation seq=%s device=%s status=%s",
            sequence,
            pending.device_id,
            result.status,
        )
        self._settle(pending, result)

    def discard(self, sequence: int, device_id: str) -> bool:
        """Drop a pending request without settling it with a result.

        The future is cancelled so any awaiting caller is released.
        """

        pending = self._pending.get((sequence, device_id))
        if pending is None:
            return False
        self._teardown(pending)
        pending.future.cancel()
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _expire(self, pending: _PendingRequest) -> None:
        pending.timer = None
        if self._pending.get(pending.key) is not pending:
            return
        LOGGER.warning(
            "Timed out waiting for response seq=%s device=%s",
            pending.sequence,
            pending.device_id,
        )
        self._settle(pending, CommandResult.timeout())

    def _settle(self, pending: _PendingRequest, result: CommandResult) -> None:
        self._teardown(pending)
        if not pending.future.done():
            pending.future.set_result(result)

    def _teardown(self, pending: _PendingRequest) -> None:
        if pending.timer is not None:
            pending.timer.cancel()
            pending.timer = None
        if self._pending.get(pending.key) is pending:
            del self._pending[pending.key]


def _coerce_sequence(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None

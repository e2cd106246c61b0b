"""Domain models for command results and power-state reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from ..constants import TIMEOUT_MESSAGE


@dataclass(slots=True)
class CommandResult:
    """Outcome of a correlated command.

    ``status`` is ``"ok"`` when the server acknowledged with ``error == 0`` and
    ``"error"`` otherwise. Timeouts are reported as ``"error"`` results with
    ``timed_out`` set rather than raised.
    """

    status: str
    message: Optional[str] = None
    params: Optional[Dict[str, Any]] = None
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "CommandResult":
        params = data.get("params")
        return cls(
            status="ok" if data.get("error") == 0 else "error",
            message=data.get("reason"),
            params=dict(params) if isinstance(params, Mapping) else None,
        )

    @classmethod
    def timeout(cls) -> "CommandResult":
        return cls(status="error", message=TIMEOUT_MESSAGE, timed_out=True)

    def as_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "message": self.message}


@dataclass(slots=True)
class ChannelState:
    channel: int
    state: str


@dataclass(slots=True)
class PowerStateReport:
    """Normalized power state of a device.

    ``state`` is a single ``"on"``/``"off"`` value, or one ``ChannelState``
    per channel for the all-channels variant.
    """

    status: str
    state: Union[str, List[ChannelState], None] = None
    channel: Optional[int] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": self.status}
        if isinstance(self.state, list):
            payload["state"] = [
                {"channel": item.channel, "state": item.state} for item in self.state
            ]
        else:
            payload["state"] = self.state
        if self.channel is not None:
            payload["channel"] = self.channel
        if self.message is not None:
            payload["message"] = self.message
        return payload

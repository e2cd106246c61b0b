"""Envelope builders for the device-control websocket protocol.

Three command shapes are sent over the connection:
    userOnline  authenticates the session (handshake)
    query       asks the server for a device's current params
    update      pushes new params to a device

Building an envelope never touches the network.
"""

from __future__ import annotations

import json
import secrets
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from . import constants
from .core.sequence import SequenceGenerator, unix_timestamp


def generate_nonce() -> str:
    return secrets.token_hex(4)


@dataclass(frozen=True, slots=True)
class CommandEnvelope:
    """An outbound command. ``sequence`` is the correlation key."""

    action: str
    apikey: Optional[str]
    sequence: int
    timestamp: int
    device_id: Optional[str] = None
    params: Any = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"action": self.action}
        payload.update(self.extra)
        if self.device_id is not None:
            payload["deviceid"] = self.device_id
        payload["apikey"] = self.apikey
        payload["userAgent"] = constants.USER_AGENT
        payload["sequence"] = self.sequence
        payload["ts"] = self.timestamp
        if self.params is not None:
            payload["params"] = self.params
        return payload

    def encode(self) -> str:
        return json.dumps(self.to_payload(), separators=(",", ":"))


class CommandEncoder:
    """Builds command envelopes tagged with fresh sequence ids."""

    def __init__(
        self,
        *,
        sequence: Optional[SequenceGenerator] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._sequence = sequence or SequenceGenerator(clock)
        self._clock = clock

    def next_sequence(self) -> int:
        return self._sequence.next()

    def handshake(
        self,
        apikey: Optional[str],
        at: Optional[str],
        app_id: str,
        nonce: Optional[str] = None,
    ) -> CommandEnvelope:
        return CommandEnvelope(
            action=constants.ACTION_HANDSHAKE,
            apikey=apikey,
            sequence=self.next_sequence(),
            timestamp=unix_timestamp(self._clock),
            extra={
                "version": constants.PROTOCOL_VERSION,
                "at": at,
                "appid": app_id,
                "nonce": nonce or generate_nonce(),
            },
        )

    def query(
        self,
        device_id: str,
        apikey: Optional[str],
        fields: Iterable[str] = constants.DEFAULT_STATUS_FIELDS,
    ) -> CommandEnvelope:
        return CommandEnvelope(
            action=constants.ACTION_QUERY,
            apikey=apikey,
            sequence=self.next_sequence(),
            timestamp=unix_timestamp(self._clock),
            device_id=device_id,
            params=list(fields),
        )

    def update(
        self,
        device_id: str,
        apikey: Optional[str],
        params: Mapping[str, Any],
        sequence: Optional[int] = None,
    ) -> CommandEnvelope:
        return CommandEnvelope(
            action=constants.ACTION_UPDATE,
            apikey=apikey,
            sequence=sequence if sequence is not None else self.next_sequence(),
            timestamp=unix_timestamp(self._clock),
            device_id=device_id,
            params=dict(params),
        )

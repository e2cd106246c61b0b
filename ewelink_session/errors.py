"""Exception types raised by ewelink-session."""

from __future__ import annotations

from typing import Optional


class EWeLinkSessionError(RuntimeError):
    """Base class for session errors."""


class InvalidPowerStateError(EWeLinkSessionError, ValueError):
    """Raised when a requested power state is not one of the valid states."""

    def __init__(self, state: object) -> None:
        super().__init__(f"Invalid power state: {state!r}")
        self.state = state


class InvalidChannelError(EWeLinkSessionError, ValueError):
    """Raised when a channel index is out of range for a device."""

    def __init__(self, channel: object, channel_count: int) -> None:
        super().__init__(
            f"Invalid channel {channel!r} (device has {channel_count} channels)"
        )
        self.channel = channel
        self.channel_count = channel_count


class TransportError(EWeLinkSessionError):
    """Raised when the underlying connection rejects a send, connect or close."""

    def __init__(self, message: str, *, sequence: Optional[int] = None) -> None:
        super().__init__(message)
        self.sequence = sequence

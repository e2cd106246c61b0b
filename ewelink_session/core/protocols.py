"""Protocol definitions for the session's external collaborators."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol

MessageListener = Callable[[str], None]


class Transport(Protocol):
    """Minimal contract for the persistent connection carrying commands."""

    async def send(self, payload: str) -> None:
        """Send one text frame.

        Raises:
            TransportError: If the connection rejects the frame.
        """
        ...

    async def close(self) -> None:
        """Close the connection and release its resources."""
        ...

    def add_listener(self, listener: MessageListener) -> None:
        """Route every inbound text frame to ``listener``."""
        ...

    def remove_listener(self, listener: MessageListener) -> None:
        """Stop routing inbound frames to ``listener``."""
        ...


class DeviceDirectory(Protocol):
    """Lookup service for device records."""

    async def get_device(self, device_id: str) -> Mapping[str, Any]:
        """Return the device record.

        The record carries at least ``apikey`` (the owning account's key) and
        ``params`` (the device's current parameter set).
        """
        ...

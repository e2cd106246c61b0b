"""Core primitives for ewelink-session."""

from .correlation import CorrelationRegistry
from .models import ChannelState, CommandResult, PowerStateReport
from .protocols import DeviceDirectory, MessageListener, Transport
from .sequence import SequenceGenerator, unix_timestamp

__all__ = [
    "ChannelState",
    "CommandResult",
    "CorrelationRegistry",
    "DeviceDirectory",
    "MessageListener",
    "PowerStateReport",
    "SequenceGenerator",
    "Transport",
    "unix_timestamp",
]

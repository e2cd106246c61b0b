"""Session layer for the eWeLink device-control websocket."""

from .commands import CommandEncoder, CommandEnvelope
from .config import SessionSettings, load_config
from .core import (
    ChannelState,
    CommandResult,
    CorrelationRegistry,
    PowerStateReport,
    SequenceGenerator,
)
from .errors import (
    EWeLinkSessionError,
    InvalidChannelError,
    InvalidPowerStateError,
    TransportError,
)
from .logging import configure_logging
from .session import DeviceControlSession

__all__ = [
    "ChannelState",
    "CommandEncoder",
    "CommandEnvelope",
    "CommandResult",
    "CorrelationRegistry",
    "DeviceControlSession",
    "EWeLinkSessionError",
    "InvalidChannelError",
    "InvalidPowerStateError",
    "PowerStateReport",
    "SequenceGenerator",
    "SessionSettings",
    "TransportError",
    "configure_logging",
    "load_config",
]

__version__ = "0.1.0"

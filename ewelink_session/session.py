"""Device-control session over a shared websocket connection."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional

from . import constants
from .commands import CommandEncoder, CommandEnvelope
from .config import SessionSettings
from .core import (
    CommandResult,
    CorrelationRegistry,
    DeviceDirectory,
    PowerStateReport,
    SequenceGenerator,
    Transport,
)
from .errors import TransportError
from .logging import configure_logging
from .power_state import (
    get_power_state_params,
    get_power_state_report,
    validate_power_state,
)

LOGGER = logging.getLogger(__name__)


class DeviceControlSession:
    """Sends device commands and correlates their acknowledgements.

    The session owns the transport and the correlation registry. Any number
    of correlated commands may be in flight at once; acknowledgements are
    matched by sequence id, whatever order they arrive in.

    Credentials are per call: commands for a shared device carry that
    device's ``apikey`` without touching the session's own key.
    """

    def __init__(
        self,
        transport: Transport,
        directory: DeviceDirectory,
        *,
        api_key: Optional[str],
        at: Optional[str] = None,
        app_id: str = constants.DEFAULT_APP_ID,
        response_timeout: float = constants.DEFAULT_RESPONSE_TIMEOUT_SECONDS,
        handshake_settle_delay: float = constants.DEFAULT_HANDSHAKE_SETTLE_DELAY_SECONDS,
        sequence: Optional[SequenceGenerator] = None,
        registry: Optional[CorrelationRegistry] = None,
    ) -> None:
        self.api_key = api_key
        self.at = at
        self.app_id = app_id

        self._transport: Optional[Transport] = transport
        self._directory = directory
        self._encoder = CommandEncoder(sequence=sequence)
        self._registry = registry or CorrelationRegistry(timeout=response_timeout)
        self._settle_delay: Optional[float] = handshake_settle_delay

        transport.add_listener(self._registry.dispatch)

    @classmethod
    def from_settings(
        cls,
        settings: SessionSettings,
        transport: Transport,
        directory: DeviceDirectory,
        *,
        setup_logging: bool = False,
    ) -> "DeviceControlSession":
        """Build a session from loaded settings.

        With ``setup_logging`` the root handlers are installed from the
        ``[logging]`` section first.
        """

        if setup_logging:
            configure_logging(settings.logging)
        return cls(
            transport,
            directory,
            api_key=settings.account.api_key,
            at=settings.account.at,
            app_id=settings.connection.app_id,
            response_timeout=settings.session.response_timeout_seconds,
            handshake_settle_delay=settings.session.handshake_settle_delay_seconds,
        )

    @property
    def is_open(self) -> bool:
        return self._transport is not None

    @property
    def pending_count(self) -> int:
        return self._registry.pending_count

    # ------------------------------------------------------------------
    # Raw commands
    # ------------------------------------------------------------------
    async def handshake(self, *, apikey: Optional[str] = None) -> CommandEnvelope:
        """Authenticate the connection.

        The server does not acknowledge the handshake in a way that can be
        correlated, so success is assumed once the settle delay has elapsed.
        """

        transport = self._require_transport()
        envelope = self._encoder.handshake(apikey or self.api_key, self.at, self.app_id)
        await transport.send(envelope.encode())
        LOGGER.info("Handshake sent (seq=%s)", envelope.sequence)

        if self._settle_delay:
            await asyncio.sleep(self._settle_delay)
        return envelope

    async def query_status(
        self,
        device_id: str,
        fields: Iterable[str] = constants.DEFAULT_STATUS_FIELDS,
        *,
        apikey: Optional[str] = None,
    ) -> CommandEnvelope:
        """Ask the server for a device's params without waiting for the reply."""

        transport = self._require_transport()
        envelope = self._encoder.query(device_id, apikey or self.api_key, fields)
        await transport.send(envelope.encode())
        return envelope

    async def update_status(
        self,
        device_id: str,
        params: Mapping[str, Any],
        sequence: Optional[int] = None,
        *,
        apikey: Optional[str] = None,
    ) -> CommandEnvelope:
        """Push ``params`` to a device and return the envelope that was sent.

        The envelope's ``sequence`` is what the eventual acknowledgement
        carries.
        """

        transport = self._require_transport()
        envelope = self._encoder.update(
            device_id, apikey or self.api_key, params, sequence
        )
        await transport.send(envelope.encode())
        return envelope

    # ------------------------------------------------------------------
    # Correlated operations
    # ------------------------------------------------------------------
    async def set_power_state(
        self,
        device_id: str,
        state: str,
        *,
        channel: int = 1,
        all_channels: bool = False,
        shared: bool = False,
    ) -> CommandResult:
        """Switch a device (or one of its channels) on or off.

        Raises:
            InvalidPowerStateError: Before any network I/O, if ``state`` is
                not a valid power state.
            InvalidChannelError: If ``channel`` does not exist on the device.
            TransportError: If the update cannot be sent.
        """

        validate_power_state(state)
        self._require_transport()

        device = await self._directory.get_device(device_id)
        params = get_power_state_params(
            device.get("params") or {}, state, channel, all_channels
        )
        apikey = self._credential_for(device, shared)

        envelope = self._encoder.update(device_id, apikey, params)
        return await self._request(envelope)

    async def set_params(
        self,
        device_id: str,
        params: Mapping[str, Any],
        *,
        shared: bool = False,
    ) -> CommandResult:
        """Push arbitrary ``params`` to a device and wait for the acknowledgement."""

        self._require_transport()

        apikey = self.api_key
        if shared:
            device = await self._directory.get_device(device_id)
            apikey = self._credential_for(device, shared)

        envelope = self._encoder.update(device_id, apikey, params)
        return await self._request(envelope)

    async def get_power_state(
        self,
        device_id: str,
        *,
        channel: int = 1,
        all_channels: bool = False,
        shared: bool = False,
    ) -> PowerStateReport:
        """Query a device's current power state.

        Raises:
            InvalidChannelError: If ``channel`` does not exist on the device.
            TransportError: If the query cannot be sent.
        """

        self._require_transport()

        apikey = self.api_key
        if shared:
            device = await self._directory.get_device(device_id)
            apikey = self._credential_for(device, shared)

        envelope = self._encoder.query(device_id, apikey, constants.DEFAULT_STATUS_FIELDS)
        result = await self._request(envelope)

        if not result.ok:
            return PowerStateReport(status="error", message=result.message)
        if result.params is None:
            return PowerStateReport(
                status="error", message="response carried no device params"
            )
        return get_power_state_report(result.params, channel, all_channels)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def close(self) -> None:
        """Close the connection and drop session-scoped state.

        Requests still in flight are not resolved here; each one settles
        with a timeout result when its deadline passes.
        """

        transport = self._transport
        if transport is None:
            return

        self._transport = None
        self._settle_delay = None
        transport.remove_listener(self._registry.dispatch)

        if self._registry.pending_count:
            LOGGER.info(
                "Closing session with %d request(s) still in flight",
                self._registry.pending_count,
            )
        await transport.close()

    async def __aenter__(self) -> "DeviceControlSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise TransportError("no websocket open")
        return self._transport

    def _credential_for(self, device: Mapping[str, Any], shared: bool) -> Optional[str]:
        if shared and device.get("apikey"):
            return device["apikey"]
        return self.api_key

    async def _request(self, envelope: CommandEnvelope) -> CommandResult:
        transport = self._require_transport()
        device_id = envelope.device_id or ""
        future = self._registry.register(envelope.sequence, device_id)

        try:
            await transport.send(envelope.encode())
        except BaseException:
            self._registry.discard(envelope.sequence, device_id)
            raise

        return await future

"""aiohttp websocket transport for the device-control connection."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Optional

import aiohttp

from ..core import MessageListener
from ..errors import TransportError

LOGGER = logging.getLogger(__name__)


class WebSocketTransport:
    """Single websocket connection with fan-out of inbound text frames.

    There is no reconnect: once the connection drops, ``send`` raises
    ``TransportError`` until ``connect`` is called again.
    """

    def __init__(
        self,
        url: str,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        heartbeat: Optional[float] = None,
    ) -> None:
        self.url = url
        self.heartbeat = heartbeat

        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._listeners: list[MessageListener] = []
        self._reader_task: Optional[asyncio.Task[None]] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def connected(self) -> bool:
        return self._ws is not None and not self._ws.closed

    async def connect(self) -> None:
        """Open the websocket and start routing inbound frames."""

        if self.connected:
            return

        session = await self._ensure_session()
        try:
            self._ws = await session.ws_connect(self.url, heartbeat=self.heartbeat)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(f"Failed to connect to {self.url}: {exc}") from exc

        LOGGER.info("Connected to device-control websocket at %s", self.url)
        self._reader_task = asyncio.create_task(self._read_loop(self._ws))

    async def send(self, payload: str) -> None:
        ws = self._ws
        if ws is None or ws.closed:
            raise TransportError("no websocket open")

        try:
            await ws.send_str(payload)
        except (aiohttp.ClientError, ConnectionError, RuntimeError) as exc:
            LOGGER.warning("Websocket send failed: %s", exc)
            raise TransportError(f"Websocket send failed: {exc}") from exc

    async def close(self) -> None:
        """Close the websocket, stop the reader and release the session."""

        ws, self._ws = self._ws, None

        try:
            if ws is not None and not ws.closed:
                await ws.close()
        except (aiohttp.ClientError, ConnectionError) as exc:
            raise TransportError(f"Websocket close failed: {exc}") from exc
        finally:
            if self._reader_task is not None:
                self._reader_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._reader_task
                self._reader_task = None

            if self._owns_session and self._session is not None:
                await self._session.close()
                self._session = None

    def add_listener(self, listener: MessageListener) -> None:
        if listener in self._listeners:
            raise ValueError("Listener already registered")
        self._listeners.append(listener)

    def remove_listener(self, listener: MessageListener) -> None:
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)

    async def __aenter__(self) -> "WebSocketTransport":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=None)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def _read_loop(self, ws: aiohttp.ClientWebSocketResponse) -> None:
        try:
            async for message in ws:
                if message.type == aiohttp.WSMsgType.TEXT:
                    self._dispatch(message.data)
                elif message.type == aiohttp.WSMsgType.BINARY:
                    pass  # Ignore binary messages
                elif message.type == aiohttp.WSMsgType.ERROR:
                    LOGGER.warning("Websocket error: %s", ws.exception())
                    break
        finally:
            LOGGER.info("Device-control websocket closed")

    def _dispatch(self, raw: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(raw)
            except Exception:  # pragma: no cover - defensive logging
                LOGGER.exception("Websocket listener failed")

# WebSocket Transport
# Persistent connection in a background thread; inbound frames go to a FrameRelay

import asyncio
import logging
import threading
from typing import Optional

import websockets

from .relay import FrameRelay
from .transport import SendError

logger = logging.getLogger(__name__)


class WebSocketTransport:
    """
    Text-frame transport over a single WebSocket connection.

    Design:
    - asyncio loop with websockets.connect runs in a daemon thread
    - every inbound text frame is published to the relay
    - send() is thread-safe: it schedules onto the loop's outbound queue
    - no reconnection; once closed, the transport stays closed
    """

    def __init__(self, url: str, relay: FrameRelay):
        """Initialize transport (does not connect)."""
        self.url = url
        self.relay = relay

        self.connected = False
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self.outbound: Optional[asyncio.Queue] = None
        self.thread: Optional[threading.Thread] = None

        self._ready = threading.Event()
        self._stopping: Optional[asyncio.Event] = None
        self.error: Optional[BaseException] = None

    def connect(self, timeout: float = 5.0) -> bool:
        """
        Open the connection and start the network thread.

        Returns:
            True once the WebSocket handshake has completed
        """
        logger.info("Connecting to %s", self.url)
        self.thread = threading.Thread(target=self._run, name="ws-transport", daemon=True)
        self.thread.start()

        if not self._ready.wait(timeout):
            logger.error("Connection to %s timed out after %.1fs", self.url, timeout)
            return False
        if not self.connected:
            logger.error("Connection to %s failed: %s", self.url, self.error)
            return False

        logger.info("Connected to %s", self.url)
        return True

    def send(self, text: str) -> None:
        """
        Queue one text frame for delivery.

        Raises:
            SendError: If the connection is not open
        """
        if not self.connected or self.loop is None or self.outbound is None:
            raise SendError(f"Not connected to {self.url}")
        try:
            self.loop.call_soon_threadsafe(self.outbound.put_nowait, text)
        except RuntimeError as e:
            # Loop already closed
            raise SendError(str(e)) from e

    def close(self) -> None:
        """Close the connection and wait briefly for the network thread."""
        if self.loop is not None and self._stopping is not None and self.connected:
            self.loop.call_soon_threadsafe(self._stopping.set)
        if self.thread is not None:
            self.thread.join(timeout=2.0)
        logger.info("Disconnected from %s", self.url)

    def _run(self) -> None:
        try:
            asyncio.run(self._main())
        except Exception as e:
            self.error = e
        finally:
            self.connected = False
            self._ready.set()

    async def _main(self) -> None:
        self.loop = asyncio.get_running_loop()
        self.outbound = asyncio.Queue()
        self._stopping = asyncio.Event()

        async with websockets.connect(self.url) as ws:
            self.connected = True
            self._ready.set()

            tasks = [
                asyncio.create_task(self._receive(ws)),
                asyncio.create_task(self._produce(ws)),
                asyncio.create_task(self._stopping.wait()),
            ]
            try:
                await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            finally:
                self.connected = False
                for task in tasks:
                    task.cancel()
                results = await asyncio.gather(*tasks, return_exceptions=True)
                failures = [r for r in results if isinstance(r, Exception)]
                if failures and self.error is None:
                    self.error = failures[0]
                    logger.error("Network task failed: %r", failures[0])

    async def _receive(self, ws) -> None:
        """Publish inbound text frames until the server closes."""
        try:
            async for raw in ws:
                if isinstance(raw, bytes):
                    logger.warning("Ignoring %d-byte binary frame", len(raw))
                    continue
                self.relay.publish(raw)
        except websockets.ConnectionClosed as e:
            logger.info("Connection closed by server: %s", e)

    async def _produce(self, ws) -> None:
        """Drain the outbound queue onto the socket."""
        while True:
            text = await self.outbound.get()
            try:
                await ws.send(text)
            except websockets.ConnectionClosed as e:
                logger.error("Send failed, connection closed: %s", e)
                return

"""Mini README: Live-update fan-out to connected dashboards.

Structure:
    * Sink - abstract output connection receiving encoded messages.
    * QueueSink - bounded asyncio queue drained by an SSE response.
    * BroadcastChannel - sink registry; serialises state once per publish.
    * encode_event - Server-Sent Events framing for a state payload.

A publish encodes the full board state a single time and hands the same
string to every sink in registration order. Writes never block: queue sinks
use ``put_nowait`` and a full queue is treated as a dead connection. A sink
that fails is closed and removed without affecting the others, and the
browser's EventSource reconnects to receive a fresh initial message.
"""

from __future__ import annotations

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class SinkClosedError(RuntimeError):
    """Raised when writing to a sink that can no longer accept messages."""


def encode_event(state: Mapping[str, Any]) -> str:
    """Frame a state payload as a single SSE ``data`` event."""

    return f"data: {json.dumps(state, ensure_ascii=False)}\n\n"


class Sink(ABC):
    """An open output connection."""

    closed: bool = False

    @abstractmethod
    def send(self, message: str) -> None:
        """Deliver one encoded message or raise."""

    def close(self) -> None:
        self.closed = True


class QueueSink(Sink):
    """Sink buffered in a bounded queue that an async stream drains."""

    def __init__(self, max_pending: int = 64) -> None:
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max_pending)
        self.closed = False

    def send(self, message: str) -> None:
        if self.closed:
            raise SinkClosedError("Sink already closed")
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull as error:
            raise SinkClosedError("Sink queue is full") from error

    def pending(self) -> int:
        return self._queue.qsize()

    def get_nowait(self) -> str:
        return self._queue.get_nowait()

    async def next_message(self, timeout: Optional[float] = None) -> Optional[str]:
        """Wait for the next message; ``None`` when the timeout elapses first."""

        try:
            return await asyncio.wait_for(self._queue.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None


class BroadcastChannel:
    """Registry of sinks receiving the full board state after each change."""

    def __init__(
        self, state_provider: Callable[[], Mapping[str, Any]], *, max_pending: int = 64
    ) -> None:
        self._state_provider = state_provider
        self._max_pending = max_pending
        self._sinks: List[Sink] = []

    def __len__(self) -> int:
        return len(self._sinks)

    def subscribe(self, sink: Optional[Sink] = None) -> Sink:
        """Register a sink and send it the current state straight away."""

        if sink is None:
            sink = QueueSink(self._max_pending)
        self._sinks.append(sink)
        LOGGER.debug("Sink subscribed (%s connected)", len(self._sinks))
        self._deliver(sink, encode_event(self._state_provider()))
        return sink

    def unsubscribe(self, sink: Sink) -> None:
        """Forget a sink; unknown or already removed sinks are ignored."""

        sink.close()
        if sink in self._sinks:
            self._sinks.remove(sink)
            LOGGER.debug("Sink unsubscribed (%s connected)", len(self._sinks))

    def publish(self) -> int:
        """Send the current state to every sink; returns the delivery count."""

        message = encode_event(self._state_provider())
        delivered = 0
        for sink in list(self._sinks):
            if self._deliver(sink, message):
                delivered += 1
        LOGGER.debug("Published state to %s/%s sinks", delivered, len(self._sinks))
        return delivered

    def _deliver(self, sink: Sink, message: str) -> bool:
        try:
            sink.send(message)
        except Exception as exc:  # noqa: BLE001 - one bad sink must not stop the rest
            LOGGER.warning("Dropping live-update sink after failed write: %s", exc)
            self.unsubscribe(sink)
            return False
        return True

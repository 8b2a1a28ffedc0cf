"""Mini README: Live-update broadcast package.

Re-exports the channel and sink types used by the SSE endpoint and by the
dashboard context after every ledger or roster change.
"""

from .channel import BroadcastChannel, QueueSink, Sink, SinkClosedError, encode_event

__all__ = ["BroadcastChannel", "QueueSink", "Sink", "SinkClosedError", "encode_event"]

"""Stream sink and source backed by in-process queues."""

from __future__ import annotations

import queue
import time
from typing import Any

from pipestream.message import Message, StreamsError

_CONSUME_TIMEOUT = 0.1


class ChannelSink:
    """Processor that puts every message it receives onto a queue.

    A batch size of 0 never commits.
    """

    def __init__(self, channel: queue.Queue[Message] | None, batch: int) -> None:
        self._channel = channel
        self._batch = batch
        self._count = 0
        self._pipe: Any = None
        self._closed = False

    def with_pipe(self, pipe: Any) -> None:
        """Set the pipe the sink reports to."""
        self._pipe = pipe

    def process(self, msg: Message) -> None:
        """Queue the message, then mark it or commit the batch."""
        if self._closed:
            raise StreamsError("channel: sink is closed")
        if self._channel is None:
            raise StreamsError("channel: sink has no channel")
        self._channel.put(msg)

        self._count += 1
        if self._batch > 0 and self._count >= self._batch:
            self._count = 0
            self._pipe.commit(msg)
            return

        self._pipe.mark(msg)

    def close(self) -> None:
        """Close the sink; further messages are refused."""
        self._closed = True


class ChannelSource:
    """Source that reads messages from a queue."""

    def __init__(self, channel: queue.Queue[Message] | None) -> None:
        self._channel = channel
        self._committed: Any = None
        self._closed = False

    def consume(self) -> Message:
        """Return the next message, or an empty one after a short wait."""
        if self._channel is None:
            time.sleep(_CONSUME_TIMEOUT)
            return Message()
        try:
            msg = self._channel.get(timeout=_CONSUME_TIMEOUT)
        except queue.Empty:
            return Message()
        return msg.with_metadata(None, None)

    def commit(self, value: Any) -> None:
        """Accept a commit; a queue has no positions, so only the last value is kept."""
        self._committed = value

    def close(self) -> None:
        """Close the source, leaving the queue untouched."""
        self._closed = True
"""Stream sink that stores messages in a cache."""

from __future__ import annotations

from typing import Any

from pipestream.message import Message


class CacheSink:
    """Processor that writes each message's value under its key.

    The cache must provide ``set(key, value, expire)``.
    """

    def __init__(self, cache: Any, expire: float, batch: int) -> None:
        self._cache = cache
        self._expire = expire
        self._batch = batch
        self._count = 0
        self._pipe: Any = None
        self._closed = False

    def with_pipe(self, pipe: Any) -> None:
        """Set the pipe the sink reports to."""
        self._pipe = pipe

    def process(self, msg: Message) -> None:
        """Store the message, then mark it or commit the batch."""
        if not isinstance(msg.key, str):
            raise TypeError(f"cache: key must be a string, got {type(msg.key).__name__}")

        self._cache.set(msg.key, msg.value, self._expire)

        self._count += 1
        if self._count >= self._batch:
            self._count = 0
            self._pipe.commit(msg)
            return

        self._pipe.mark(msg)

    def close(self) -> None:
        """Close the sink; the cache itself is left open."""
        self._closed = True
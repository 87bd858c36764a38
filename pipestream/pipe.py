"""Pipe that lets processors forward, mark and commit messages."""

from __future__ import annotations

import time
from typing import Any, Sequence

from pipestream.message import Message, StreamsError


class ProcessorPipe:
    """Connects a processor to its children, metastore and supervisor.

    The time spent inside pipe operations is accumulated and can be read
    with :meth:`duration`.
    """

    def __init__(
        self, store: Any, supervisor: Any, processor: Any, children: Sequence[Any]
    ) -> None:
        self._store = store
        self._supervisor = supervisor
        self._processor = processor
        self._children = list(children)
        self._elapsed_ns = 0

    def reset(self) -> None:
        """Reset the accumulated duration."""
        self._elapsed_ns = 0

    def duration(self) -> float:
        """Return the accumulated duration in seconds."""
        return self._elapsed_ns / 1e9

    def mark(self, msg: Message) -> None:
        """Record that the message has been dealt with."""
        start = time.perf_counter_ns()
        try:
            self._store.mark(self._processor, *msg.metadata())
        finally:
            self._add_time(start)

    def forward(self, msg: Message) -> None:
        """Pass the message to every child."""
        start = time.perf_counter_ns()
        for child in self._children:
            child.accept(msg)
        self._add_time(start)

    def forward_to_child(self, msg: Message, index: int) -> None:
        """Pass the message to the child at ``index``."""
        start = time.perf_counter_ns()
        if not 0 <= index < len(self._children):
            raise StreamsError("streams: child index out of bounds")
        try:
            self._children[index].accept(msg)
        finally:
            self._add_time(start)

    def commit(self, msg: Message) -> None:
        """Mark the message and ask the supervisor to commit."""
        start = time.perf_counter_ns()
        self._store.mark(self._processor, *msg.metadata())
        try:
            self._supervisor.commit(self._processor)
        finally:
            self._add_time(start)

    def _add_time(self, start: int) -> None:
        self._elapsed_ns += time.perf_counter_ns() - start
"""Collection of processing and commit events into aggregated stats."""

from __future__ import annotations

import queue
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any

from pipestream.message import StreamsError

_QUEUE_SIZE = 1000


class Stats(ABC):
    """Receiver of metrics."""

    @abstractmethod
    def inc(self, name: str, value: int, *args: Any) -> None:
        """Increment a count by the value."""

    @abstractmethod
    def gauge(self, name: str, value: float, *args: Any) -> None:
        """Record the value of a metric."""

    @abstractmethod
    def timing(self, name: str, value: float, *args: Any) -> None:
        """Record a duration in seconds."""


@dataclass
class _Event:
    event_type: str
    name: str
    count: int
    latency: float
    back_pressure: float = 0.0


class Monitor:
    """Aggregates stream events and flushes them to ``Stats`` periodically."""

    def __init__(self, stats: Stats, interval: float) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._stats = stats
        self._interval = interval
        self._events: queue.Queue[_Event | None] = queue.Queue(maxsize=_QUEUE_SIZE)
        self._flushes: queue.Queue[list[_Event] | None] = queue.Queue(maxsize=_QUEUE_SIZE)
        self._closed = False
        self._cache_thread = threading.Thread(target=self._run_cache, daemon=True)
        self._flush_thread = threading.Thread(target=self._run_flush, daemon=True)
        self._cache_thread.start()
        self._flush_thread.start()

    def __enter__(self) -> Monitor:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def processed(self, name: str, latency: float, back_pressure: float) -> None:
        """Record that a node processed a message."""
        self._put(_Event("node", name, 1, latency, back_pressure))

    def committed(self, latency: float) -> None:
        """Record a commit."""
        self._put(_Event("commit", "streams:commit", 1, latency))

    def close(self) -> None:
        """Flush pending events and stop the background threads."""
        if self._closed:
            raise StreamsError("streams: monitor already closed")
        self._closed = True
        self._events.put(None)
        self._cache_thread.join()
        self._flushes.put(None)
        self._flush_thread.join()

    def _put(self, event: _Event) -> None:
        if self._closed:
            raise StreamsError("streams: monitor is closed")
        self._events.put(event)

    def _run_cache(self) -> None:
        cache: list[_Event] = []
        next_tick = time.monotonic() + self._interval
        while True:
            now = time.monotonic()
            if now >= next_tick:
                self._flushes.put(cache)
                cache = []
                next_tick = now + self._interval

            try:
                event = self._events.get(timeout=max(0.0, next_tick - time.monotonic()))
            except queue.Empty:
                continue

            if event is None:
                if cache:
                    self._flushes.put(cache)
                return

            index = next((i for i, e in enumerate(cache) if e.name == event.name), None)
            if index is None:
                cache.append(event)
            else:
                cached = cache[index]
                cache[index] = replace(
                    event,
                    count=event.count + cached.count,
                    latency=event.latency + cached.latency,
                )

    def _run_flush(self) -> None:
        while (cache := self._flushes.get()) is not None:
            for event in cache:
                if event.event_type == "node":
                    tags = ("name", event.name)
                    self._stats.timing("node.latency", event.latency / event.count, *tags)
                    self._stats.inc("node.throughput", event.count, *tags)
                    if event.back_pressure >= 0:
                        self._stats.gauge("node.back-pressure", event.back_pressure, *tags)
                elif event.event_type == "commit":
                    self._stats.timing("commit.latency", event.latency / event.count)
                    self._stats.inc("commit.commits", event.count, 1)

            self._stats.gauge(
                "monitor.back-pressure", self._events.qsize() / _QUEUE_SIZE * 100
            )


class NullMonitor:
    """Monitor that discards every event, keeping only a count of them."""

    def __init__(self) -> None:
        self._discarded = 0
        self._closed = False

    def processed(self, name: str, latency: float, back_pressure: float) -> None:
        """Discard a processed event."""
        self._discarded += 1

    def committed(self, latency: float) -> None:
        """Discard a commit event."""
        self._discarded += 1

    def close(self) -> None:
        """Close the monitor; there is nothing to flush."""
        self._closed = True


class NullStats(Stats):
    """Stats receiver that discards every metric, keeping only a count of them."""

    def __init__(self) -> None:
        self._discarded = 0

    def inc(self, name: str, value: int, *args: Any) -> None:
        self._discarded += 1

    def gauge(self, name: str, value: float, *args: Any) -> None:
        self._discarded += 1

    def timing(self, name: str, value: float, *args: Any) -> None:
        self._discarded += 1
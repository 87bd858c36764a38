"""Kafka partition offsets as stream metadata, and consumption tracking."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable

from pipestream.message import Metadata, MetadataOrigin, MetadataStrategy


class CommitStrategy(IntEnum):
    """How consumed offsets are committed."""

    AUTO = 0
    MANUAL = 1
    BOTH = 2


@dataclass
class PartitionOffset:
    """The position of a message in a topic partition."""

    topic: str
    partition: int
    offset: int
    origin: MetadataOrigin = MetadataOrigin.COMMITTER


class KafkaMetadata(list, Metadata):
    """A list of partition offsets that can be merged."""

    def __init__(self, offsets: Iterable[PartitionOffset] = ()) -> None:
        super().__init__(offsets)

    def _find(self, topic: str, partition: int) -> int | None:
        return next(
            (
                i
                for i, pos in enumerate(self)
                if pos.topic == topic and pos.partition == partition
            ),
            None,
        )

    def with_origin(self, origin: MetadataOrigin) -> None:
        """Set the origin on every offset."""
        for pos in self:
            pos.origin = origin

    def merge(self, other: Metadata | None, strategy: MetadataStrategy) -> KafkaMetadata:
        """Merge these offsets into ``other`` and return the result.

        Committer offsets win over processor offsets. Between offsets of the
        same origin, lossless keeps the lowest and dupless the highest.
        """
        if other is None:
            return self
        if not isinstance(other, KafkaMetadata):
            raise TypeError(f"cannot merge with {type(other).__name__}")

        result = KafkaMetadata(other)
        for new_pos in self:
            index = result._find(new_pos.topic, new_pos.partition)
            if index is None:
                result.append(new_pos)
                continue

            old_pos = result[index]
            if new_pos.origin > old_pos.origin:
                continue
            if new_pos.origin < old_pos.origin:
                result[index] = new_pos
                continue

            if (strategy == MetadataStrategy.LOSSLESS and new_pos.offset < old_pos.offset) or (
                strategy == MetadataStrategy.DUPLESS and new_pos.offset > old_pos.offset
            ):
                result[index] = new_pos

        return result


class ConsumptionTracker:
    """Tracks the latest consumed offset per partition until it is committed."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._closing = False
        self._offsets: dict[int, int] = {}

    def close(self) -> None:
        """Stop making waiters block."""
        with self._cond:
            self._closing = True
            self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every consumed offset is committed or the tracker closes.

        Returns False if the timeout ran out first.
        """
        with self._cond:
            return self._cond.wait_for(
                lambda: self._closing or not self._offsets, timeout=timeout
            )

    def has_offsets(self) -> bool:
        """Tell whether any consumed offsets await commit."""
        with self._cond:
            return bool(self._offsets)

    def mark_consumed(self, partition: int, offset: int) -> None:
        """Record the latest consumed offset of a partition."""
        with self._cond:
            self._offsets[partition] = offset

    def mark_committed(self, partition: int, offset: int) -> bool:
        """Stop tracking a partition if ``offset`` reaches its latest consumed offset."""
        with self._cond:
            current = self._offsets.get(partition)
            if current is None or offset < current:
                return False
            del self._offsets[partition]
            self._cond.notify_all()
            return True
"""Per-processor store of source metadata awaiting commit."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterable

from pipestream.message import Metadata, MetadataOrigin, MetadataStrategy


@dataclass
class Metaitem:
    """A source together with its metadata."""

    source: Any
    metadata: Metadata | None


def merge_metaitems(
    items: Iterable[Metaitem], other: Iterable[Metaitem], strategy: MetadataStrategy
) -> list[Metaitem]:
    """Combine two item lists, merging metadata of items sharing a source."""
    result = list(items)
    for new_item in other:
        existing = next((old for old in result if old.source == new_item.source), None)
        if existing is None:
            result.append(new_item)
        elif existing.metadata is not None:
            existing.metadata = existing.metadata.merge(new_item.metadata, strategy)
    return result


def is_committer(processor: Any) -> bool:
    """Tell whether a processor can commit its own state."""
    return callable(getattr(processor, "commit", None))


class Metastore:
    """Thread-safe store of metadata marked by processors."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._metadata: dict[Any, list[Metaitem]] = {}

    def pull(self, processor: Any) -> list[Metaitem]:
        """Remove and return the metadata of one processor."""
        with self._lock:
            return self._metadata.pop(processor, [])

    def pull_all(self) -> dict[Any, list[Metaitem]]:
        """Remove and return all stored metadata."""
        with self._lock:
            old, self._metadata = self._metadata, {}
        return old

    def mark(self, processor: Any, source: Any, metadata: Metadata | None) -> None:
        """Record metadata of a source for a processor."""
        if processor is None:
            return

        if metadata is not None:
            origin = (
                MetadataOrigin.COMMITTER
                if is_committer(processor)
                else MetadataOrigin.PROCESSOR
            )
            metadata.with_origin(origin)

        with self._lock:
            items = self._metadata.get(processor)
            if items is None:
                self._metadata[processor] = [Metaitem(source, metadata)]
                return

            if source is None or metadata is None:
                return

            for item in items:
                if item.source == source:
                    item.metadata = metadata.merge(item.metadata, MetadataStrategy.DUPLESS)
                    return

            items.append(Metaitem(source, metadata))
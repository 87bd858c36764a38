"""Messages that flow through a stream, and the metadata they carry."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping


class StreamsError(Exception):
    """Raised when the stream machinery detects an invalid operation."""


class MetadataOrigin(IntEnum):
    """Where a piece of metadata was marked."""

    COMMITTER = 0
    PROCESSOR = 1


class MetadataStrategy(IntEnum):
    """How two pieces of metadata are merged."""

    LOSSLESS = 0
    DUPLESS = 1


class Metadata(ABC):
    """Source position information that can be merged."""

    @abstractmethod
    def with_origin(self, origin: MetadataOrigin) -> None:
        """Set the origin on the metadata."""

    @abstractmethod
    def merge(self, other: Metadata | None, strategy: MetadataStrategy) -> Metadata:
        """Merge this metadata into ``other`` and return the result."""


@dataclass(frozen=True)
class Message:
    """A key/value pair travelling through the stream."""

    key: Any = None
    value: Any = None
    ctx: Mapping[str, Any] = field(default_factory=dict)
    _source: Any = field(default=None, init=False, repr=False)
    _metadata: Metadata | None = field(default=None, init=False, repr=False)

    def metadata(self) -> tuple[Any, Metadata | None]:
        """Return the source and metadata attached to the message."""
        return self._source, self._metadata

    def with_metadata(self, source: Any, metadata: Metadata | None) -> Message:
        """Return a copy of the message carrying the given source metadata."""
        new = copy.copy(self)
        object.__setattr__(new, "_source", source)
        object.__setattr__(new, "_metadata", metadata)
        return new

    def empty(self) -> bool:
        """Tell whether both key and value are missing."""
        return self.key is None and self.value is None


EMPTY_MESSAGE = Message()
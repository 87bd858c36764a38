"""Encoders and decoders between message values and bytes."""

from __future__ import annotations

from typing import Any, Callable


class DecoderFunc:
    """Adapter that uses a function as a decoder."""

    def __init__(self, func: Callable[[bytes | None], Any]) -> None:
        self._func = func

    def decode(self, value: bytes | None) -> Any:
        """Transform bytes into a value."""
        return self._func(value)


class EncoderFunc:
    """Adapter that uses a function as an encoder."""

    def __init__(self, func: Callable[[Any], bytes | None]) -> None:
        self._func = func

    def encode(self, value: Any) -> bytes | None:
        """Transform a value into bytes."""
        return self._func(value)


class ByteDecoder:
    """Decoder that yields the raw bytes."""

    def decode(self, value: bytes | None) -> bytes | None:
        """Return the payload as immutable bytes; ``None`` stays ``None``."""
        if value is None:
            return None
        return bytes(value)


class ByteEncoder:
    """Encoder for values that are already bytes."""

    def encode(self, value: Any) -> bytes | None:
        """Return the bytes as they are; ``None`` stays ``None``."""
        if value is None:
            return None
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"expected bytes, got {type(value).__name__}")
        return bytes(value)


class StringDecoder:
    """Decoder that turns UTF-8 bytes into a string."""

    def decode(self, value: bytes | None) -> str:
        """Decode the bytes as UTF-8."""
        if value is None:
            return ""
        return bytes(value).decode("utf-8", errors="replace")


class StringEncoder:
    """Encoder that turns strings into UTF-8 bytes."""

    def encode(self, value: Any) -> bytes | None:
        """Encode the string as UTF-8; ``None`` stays ``None``."""
        if value is None:
            return None
        if not isinstance(value, str):
            raise TypeError(f"expected str, got {type(value).__name__}")
        return value.encode("utf-8")


NIL_DECODER = DecoderFunc(lambda _value: None)
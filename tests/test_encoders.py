import pytest

from pipestream.encoders import (
    NIL_DECODER,
    ByteDecoder,
    ByteEncoder,
    DecoderFunc,
    EncoderFunc,
    StringDecoder,
    StringEncoder,
)


def test_byte_decoder_decode():
    assert ByteDecoder().decode(b"foobar") == b"foobar"


@pytest.mark.parametrize("value, want", [(b"foobar", b"foobar"), (None, None)])
def test_byte_encoder_encode(value, want):
    assert ByteEncoder().encode(value) == want


def test_byte_encoder_rejects_non_bytes():
    with pytest.raises(TypeError):
        ByteEncoder().encode("foobar")


def test_string_decoder_decode():
    assert StringDecoder().decode(b"foobar") == "foobar"


@pytest.mark.parametrize("value, want", [("foobar", b"foobar"), (None, None)])
def test_string_encoder_encode(value, want):
    assert StringEncoder().encode(value) == want


def test_string_encoder_rejects_non_string():
    with pytest.raises(TypeError):
        StringEncoder().encode(42)


def test_string_round_trip():
    text = "zażółć"
    assert StringDecoder().decode(StringEncoder().encode(text)) == text


def test_decoder_func_decode():
    payload = b"payload"
    entity = object()
    seen = []

    def func(value):
        seen.append(value)
        return entity

    result = DecoderFunc(func).decode(payload)

    assert result is entity
    assert seen == [payload]


def test_decoder_func_propagates_error():
    error = ValueError("test")

    def func(value):
        raise error

    with pytest.raises(ValueError) as info:
        DecoderFunc(func).decode(b"payload")
    assert info.value is error


def test_encoder_func_encode():
    payload = b"payload"
    entity = object()
    seen = []

    def func(value):
        seen.append(value)
        return payload

    result = EncoderFunc(func).encode(entity)

    assert result == payload
    assert seen[0] is entity


def test_encoder_func_propagates_error():
    error = ValueError("test")

    def func(value):
        raise error

    with pytest.raises(ValueError) as info:
        EncoderFunc(func).encode("entity")
    assert info.value is error


@pytest.mark.parametrize("value", [b"test", b"", None])
def test_nil_decoder(value):
    assert NIL_DECODER.decode(value) is None
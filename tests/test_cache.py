import pytest

from pipestream.cache import CacheSink
from pipestream.message import Message


class FakeCache:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def set(self, key, value, expire):
        self.calls.append((key, value, expire))
        if self.error is not None:
            raise self.error


class FakePipe:
    def __init__(self):
        self.calls = []

    def mark(self, msg):
        self.calls.append(("mark", msg))

    def commit(self, msg):
        self.calls.append(("commit", msg))


def test_process_marks():
    cache = FakeCache()
    pipe = FakePipe()
    sink = CacheSink(cache, 0.001, 10)
    sink.with_pipe(pipe)
    msg = Message("test", "test")

    sink.process(msg)

    assert cache.calls == [("test", "test", 0.001)]
    assert pipe.calls == [("mark", msg)]


def test_process_with_commit():
    cache = FakeCache()
    pipe = FakePipe()
    sink = CacheSink(cache, 0.001, 1)
    sink.with_pipe(pipe)
    msg = Message("test", "test")

    sink.process(msg)

    assert cache.calls == [("test", "test", 0.001)]
    assert pipe.calls == [("commit", msg)]


def test_process_resets_count_after_commit():
    pipe = FakePipe()
    sink = CacheSink(FakeCache(), 0.001, 2)
    sink.with_pipe(pipe)

    for i in range(3):
        sink.process(Message(f"k{i}", i))

    assert [kind for kind, _ in pipe.calls] == ["mark", "commit", "mark"]


def test_process_with_cache_error():
    error = RuntimeError("test error")
    pipe = FakePipe()
    sink = CacheSink(FakeCache(error), 0.001, 1)
    sink.with_pipe(pipe)

    with pytest.raises(RuntimeError, match="test error"):
        sink.process(Message("test", "test"))
    assert pipe.calls == []


def test_process_rejects_non_string_key():
    cache = FakeCache()
    sink = CacheSink(cache, 0.001, 1)
    sink.with_pipe(FakePipe())

    with pytest.raises(TypeError):
        sink.process(Message(1, "test"))
    assert cache.calls == []
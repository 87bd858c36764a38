import queue

import pytest

from pipestream.channel import ChannelSink, ChannelSource
from pipestream.message import Message, Metadata, StreamsError


class FakePipe:
    def __init__(self):
        self.calls = []

    def mark(self, msg):
        self.calls.append(("mark", msg))

    def commit(self, msg):
        self.calls.append(("commit", msg))


class FakeMetadata(Metadata):
    def with_origin(self, origin):
        pass

    def merge(self, other, strategy):
        return self


class FakeSource:
    pass


def test_sink_process_marks():
    ch = queue.Queue(maxsize=1)
    sink = ChannelSink(ch, 2)
    pipe = FakePipe()
    sink.with_pipe(pipe)
    msg = Message(value="test")

    sink.process(msg)

    assert ch.get_nowait() == msg
    assert pipe.calls == [("mark", msg)]


def test_sink_process_with_commit():
    ch = queue.Queue(maxsize=1)
    sink = ChannelSink(ch, 1)
    pipe = FakePipe()
    sink.with_pipe(pipe)
    msg = Message(value="test")

    sink.process(msg)

    assert ch.get_nowait() == msg
    assert pipe.calls == [("commit", msg)]


def test_sink_commits_every_batch():
    ch = queue.Queue()
    sink = ChannelSink(ch, 2)
    pipe = FakePipe()
    sink.with_pipe(pipe)

    for i in range(4):
        sink.process(Message(value=i))

    assert [kind for kind, _ in pipe.calls] == ["mark", "commit", "mark", "commit"]


def test_sink_zero_batch_never_commits():
    ch = queue.Queue()
    sink = ChannelSink(ch, 0)
    pipe = FakePipe()
    sink.with_pipe(pipe)

    for i in range(3):
        sink.process(Message(value=i))

    assert [kind for kind, _ in pipe.calls] == ["mark", "mark", "mark"]


def test_sink_close_refuses_messages():
    ch = queue.Queue()
    sink = ChannelSink(ch, 1)
    sink.with_pipe(FakePipe())

    sink.close()

    with pytest.raises(StreamsError):
        sink.process(Message(value="test"))
    assert ch.empty()


def test_source_consume_strips_metadata():
    msgs = [Message(i, i).with_metadata(FakeSource(), FakeMetadata()) for i in range(3)]
    ch = queue.Queue()
    for msg in msgs:
        ch.put(msg)
    src = ChannelSource(ch)

    for expected in msgs:
        msg = src.consume()
        assert msg.key == expected.key
        assert msg.value == expected.value
        assert msg.metadata() == (None, None)


def test_source_consume_with_empty_message():
    src = ChannelSource(None)

    msg = src.consume()

    assert msg.empty()


def test_source_consume_times_out_on_empty_queue():
    src = ChannelSource(queue.Queue())

    msg = src.consume()

    assert msg.empty()


def test_source_close_leaves_queue_usable():
    ch = queue.Queue()
    src = ChannelSource(ch)

    src.close()
    ch.put(Message("k", "v"))

    msg = src.consume()
    assert (msg.key, msg.value) == ("k", "v")
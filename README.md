# pipestream

Building blocks for processing streams of messages: a message type that carries
source metadata, a metadata store that tracks what each processor has handled,
a pipe that moves messages between processors, a monitor that batches
statistics, queue and cache sinks, and Kafka offset metadata with encoders and
decoders. It uses only the standard library.

## Installation

```
pip install pipestream
```

For running the test suite:

```
pip install "pipestream[test]"
pytest
```

## Messages

```python
from pipestream.message import Message, EMPTY_MESSAGE

msg = Message("key", "value")
msg.empty()                       # False
Message(None, None).empty()       # True
EMPTY_MESSAGE.empty()             # True

tagged = msg.with_metadata(source, metadata)
src, meta = tagged.metadata()
```

A `Message` is immutable and has `key`, `value` and `ctx` (a mapping, empty by
default). `with_metadata` returns a new message; the original is left unchanged.

Metadata objects subclass `Metadata` and implement `with_origin(origin)` and
`merge(other, strategy)`, where `origin` is a `MetadataOrigin` (`COMMITTER` or
`PROCESSOR`) and `strategy` is a `MetadataStrategy` (`LOSSLESS` or `DUPLESS`).

## Metadata store

`Metastore` records, for each processor, which source metadata it has marked.
It is safe to use from several threads.

```python
from pipestream.metastore import Metastore

store = Metastore()
store.mark(processor, source, metadata)
items = store.pull(processor)     # list of Metaitem; empty if nothing was marked
everything = store.pull_all()     # {processor: [Metaitem, ...]}
```

`mark` ignores a `None` processor. It sets the metadata's origin to `COMMITTER`
when `is_committer(processor)` is true (the processor has a callable `commit`)
and to `PROCESSOR` otherwise. A second mark for the same source merges the new
metadata into the stored one with `DUPLESS`. `pull` and `pull_all` clear what
they return.

`merge_metaitems(items, other, strategy)` combines two lists of `Metaitem`,
merging the metadata of entries that share a source and appending the rest.

## Pipes

A `ProcessorPipe(store, supervisor, processor, children)` connects a processor
to its children (objects with `accept(msg)`), the store and a supervisor
(an object with `commit(processor)`):

* `mark(msg)` marks the message's source metadata in the store;
* `forward(msg)` passes the message to every child;
* `forward_to_child(msg, index)` passes it to one child, raising
  `StreamsError` when the index is out of range;
* `commit(msg)` marks the message, then asks the supervisor to commit.

The time spent in these calls is accumulated; `duration()` returns it in
seconds and `reset()` clears it.

## Monitoring

`Monitor(stats, interval)` collects processed and committed events on a
background thread, folds events of the same name together, and reports them to
a `Stats` object (`inc`, `gauge`, `timing`) once per `interval` seconds and on
close. It can be used as a context manager; using it after `close()` raises
`StreamsError`.

```python
from pipestream.monitor import Monitor, NullStats

with Monitor(NullStats(), 1.0) as monitor:
    monitor.processed("mapper", 0.002, 50.0)
    monitor.committed(0.010)
```

Reported metrics are `node.latency`, `node.throughput` and
`node.back-pressure` (tagged `"name", <node>`), `commit.latency`,
`commit.commits`, and `monitor.back-pressure` (how full the event queue is, in
percent). `NullMonitor` and `NullStats` discard everything and are handy
defaults.

## Sources and sinks

* `ChannelSource(queue)` (in `pipestream.channel`) returns the next message from
  a `queue.Queue` with its metadata stripped, or an empty `Message` after
  waiting 0.1 seconds. `commit` and `close` leave the queue untouched.
* `ChannelSink(queue, batch)` puts each processed message on a queue, then
  commits through its pipe every `batch` messages and marks otherwise; a batch
  of 0 never commits. After `close()` it refuses messages.
* `CacheSink(cache, expire, batch)` (in `pipestream.cache`) calls
  `cache.set(key, value, expire)` for each message, committing every `batch`
  messages and marking otherwise. Keys must be strings; anything else raises
  `TypeError`.

Sinks are given their pipe with `with_pipe(pipe)`.

## Kafka helpers

`pipestream.encoders` holds `ByteEncoder`, `ByteDecoder`, `StringEncoder`,
`StringDecoder`, the adapters `EncoderFunc` and `DecoderFunc` that turn a plain
function into an encoder or decoder, and `NIL_DECODER`, which always decodes to
`None`. Encoders turn `None` into `None` and raise `TypeError` for values of the
wrong type.

`pipestream.kafka_metadata` holds:

* `PartitionOffset(topic, partition, offset, origin)`;
* `KafkaMetadata`, a list of partition offsets whose `merge` prefers committer
  offsets over processor offsets and, for the same origin, keeps the lowest
  offset under `LOSSLESS` and the highest under `DUPLESS`;
* `CommitStrategy` (`AUTO`, `MANUAL`, `BOTH`);
* `ConsumptionTracker`, which follows the latest consumed offset per partition
  (`mark_consumed`, `mark_committed`, `has_offsets`) and lets a caller
  `wait(timeout)` until everything is committed or the tracker is closed.

## What this package does not do

It has no network client: it does not connect to Kafka brokers, consume from
or produce to topics, or run consumer groups. `CommitStrategy` and
`ConsumptionTracker` are provided for code that does. Nor does it build stream
topologies or run tasks; the pieces here are to be wired together by the
caller.

## Errors

Failures that the library reports itself raise `pipestream.message.StreamsError`.
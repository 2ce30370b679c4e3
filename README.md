# nodekit

In-process building blocks for game and service back ends, in plain Python.

## What is in it

| Module | What it provides |
| --- | --- |
| `nodekit.skiplist` | `SkipList`: a sorted skip list that can also be addressed by position. It supports `insert`, `delete`, `get`, `get_with_position`, `by_position`, `insert_at_position`, `replace_at_position` and `split_at`. `iter` and `iter_at_position` return a `SkipIterator` that walks with `next()` / `prev()`. |
| `nodekit.rankdata` | `RankEntry` (key, sort values, payload), `RankData` (a ranked entry ordered ascending or descending, ties broken by key), and the helpers `transform_level`, `compare_is_equal` and `compare_more_than`. |
| `nodekit.rankexpire` | `ExpireHeap`: tracks when keys were last refreshed, in nanoseconds, and pops those that have expired. |
| `nodekit.rankskip` | `RankSkip`: a leaderboard with an optional maximum length and optional expiry. Hooks go to a `RankModule`, whose default implementation counts enter, leave and change events. Also `RankChange` and `RankPosData`. |
| `nodekit.cronexpr` | `CronExpr`: cron expressions of 5 or 6 fields, where the seconds field is optional. `next()` gives the next matching second. `parse_cron_field` parses a single field. |
| `nodekit.timer` | `TimerHeap`, `Timer`, `Ticker`, `Cron` and `Dispatcher`: one-shot timers, repeating tickers and cron timers. Due timers are delivered on the dispatcher's `chan_timer` queue. |
| `nodekit.ringqueue` | `RingQueue`, a growable ring-buffer FIFO, and `SyncQueue`, a locked version of it. |
| `nodekit.squeue` | `SQueue`: a bounded, thread-safe circular queue. `SCursor` reads elements in place. |
| `nodekit.priorityqueue` | `PriorityQueue` of `Item`s. The highest priority pops first. Queued items can be updated or removed. |
| `nodekit.memoryqueue` | `TopicData`. `SeqGenerator` makes sequence numbers with Unix seconds in the high 32 bits and a per-second counter starting at 1 in the low bits. `MemoryQueue` is a bounded ring of recent topic data that can be searched by sequence number. |
| `nodekit.umap` | `LockedMap`, a dict behind a lock, and `ShardedMap`, which spreads keys over shards (10 by default) by the CRC-32 of `str(key)`. |
| `nodekit.mempool` | `Pool` and `PoolEx`: bounded caches of reusable objects. `PoolEx` works with `PoolData` objects and raises `RuntimeError` when an object is handed out twice or released twice. |
| `nodekit.bisearch` | `bi_search`: binary search that can fall back to the nearest element above or below the value. |
| `nodekit.bitwise` | Bit flags in a list of fixed-width integers: `get_bitwise_num`, `get_bitwise_tag`, `set_bitwise_tag`, `clear_bitwise_tag`. |
| `nodekit.digest` | `hash_number` (IEEE CRC-32) and `md5_hex`. |
| `nodekit.uid` | `UUID`: random version 4 identifiers, `from_str` parsing, and the `hex()` / `hex_ex()` forms. |
| `nodekit.aesencrypt` | `AesEncrypt`: AES-CFB encryption of text with a text key. |
| `nodekit.randutil` | `rand_group` (weighted index), `rand_interval`, and `rand_interval_n` (distinct values). |
| `nodekit.coroutine` | `go`, `go_recover` and `run_recovering`: run a callable in a daemon thread and restart it after exceptions. |

## Installation

```
pip install nodekit
```

To run the tests:

```
pip install "nodekit[test]"
pytest
```

## Examples

### A leaderboard

```python
from nodekit.rankdata import RankEntry
from nodekit.rankskip import RankModule, RankSkip

board = RankSkip(
    rank_id=1,
    rank_name="arena",
    is_des=True,
    level=32,
    max_len=100,
    expire_ms=0,
    module=RankModule(),
)
added, modified = board.upset_rank_list([
    RankEntry(key=7, sort_data=[1200], data=b"alice"),
    RankEntry(key=9, sort_data=[1500], data=b"bob"),
])                                            # (2, 0)

entry, rank = board.get_rank_node_data(7)     # rank == 2
top = board.get_rank_data_from_to_limit(0, 10)  # list of RankPosData, ranks 1 and 2
```

If the board is full, a new entry replaces the last one only when it ranks strictly better. Otherwise `upset_rank` returns `RankChange.NONE`.

### Binary search

```python
from nodekit.bisearch import bi_search

scores = [10, 20, 30, 40]
bi_search(scores, 11, 1)    # 1: nearest element above 11
bi_search(scores, 11, -1)   # 0: nearest element below 11
bi_search(scores, 11, 0)    # -1: no exact match
```

Pass `key=` to search a sequence of objects by an attribute.

### Cron expressions

```python
from datetime import datetime
from nodekit.cronexpr import CronExpr

every_quarter_hour = CronExpr("0 */15 * * * *")
every_quarter_hour.next(datetime(2024, 1, 1, 10, 7, 30))  # 2024-01-01 10:15:00
```

`next` returns `None` when nothing matches before the end of the following year.

### Timers

```python
from nodekit.timer import Dispatcher, TimerHeap

heap = TimerHeap()
dispatcher = Dispatcher(100, heap)
dispatcher.after_func(0, cb=lambda timer_id, data: print("fired"))

heap.tick()                      # moves the due timer to dispatcher.chan_timer
dispatcher.chan_timer.get().do() # runs the callback
```

`heap.start(0.01)` runs `tick` in a daemon thread, and `heap.stop()` ends it. Tickers and crons re-arm themselves after each `do()` until they are cancelled.

### A bounded cyclic queue

```python
from nodekit.squeue import SQueue

queue = SQueue(5)
for value in range(6):
    queue.push(value)        # the sixth push returns False: the queue is full

list(queue.get_cursor())     # [0, 1, 2, 3, 4]
queue.remove_element(2)      # 2
queue.pop()                  # 2
```

### Encryption

```python
from nodekit.aesencrypt import AesEncrypt

key = "placeholder" * 2
cipher = AesEncrypt(key)
blob = cipher.encrypt("hello")
cipher.decrypt(blob)         # "hello"
```

Keys shorter than 16 bytes raise `ValueError`. Longer keys are cut to 32, 24 or 16 bytes, whichever is the longest they can fill. The first 16 key bytes also serve as the IV.

## What it does not do

Everything here runs in a single process and keeps its data in memory. There are:

- no network servers (HTTP, TCP or WebSocket),
- no RPC or cluster layer,
- no storage back end.

Rankings and topic queues are not saved anywhere. `RankModule` and `MemoryQueue` give you the hooks and the data to persist them yourself.
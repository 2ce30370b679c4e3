import pytest

from nodekit.memoryqueue import MemoryQueue, SeqGenerator, TopicData


def _seqs(items):
    return [d.seq for d in items]


@pytest.fixture
def wrapped_queue():
    queue = MemoryQueue(5)
    for i in range(1, 9):
        queue.push(TopicData(seq=i, raw_data=bytes([i])))
    return queue


def test_push_keeps_latest_capacity_entries(wrapped_queue):
    assert len(wrapped_queue) == 5


def test_evicted_data_is_not_served(wrapped_queue):
    assert wrapped_queue.find_data(1, 10) == ([], False)


def test_find_in_back_part(wrapped_queue):
    items, ok = wrapped_queue.find_data(4, 10)
    assert ok is True
    assert _seqs(items) == [4, 5]


def test_find_in_front_part(wrapped_queue):
    items, ok = wrapped_queue.find_data(6, 10)
    assert ok is True
    assert _seqs(items) == [6, 7, 8]
    assert [d.raw_data for d in items] == [b"\x06", b"\x07", b"\x08"]


def test_find_past_newest(wrapped_queue):
    assert wrapped_queue.find_data(9, 10) == ([], False)


def test_limit_applies(wrapped_queue):
    items, ok = wrapped_queue.find_data(5, 1)
    assert ok is True
    assert _seqs(items) == [5]


def test_walk_like_subscriber(wrapped_queue):
    start_index = 3
    collected = []
    while True:
        items, ok = wrapped_queue.find_data(start_index + 1, 10)
        for d in items:
            collected.append(d.seq)
            start_index = max(start_index, d.seq)
        if not ok:
            break
    assert collected == [4, 5, 6, 7, 8]


def test_empty_queue():
    queue = MemoryQueue(4)
    assert queue.find_data(1, 10) == ([], False)
    assert len(queue) == 0


def test_unwrapped_queue():
    queue = MemoryQueue(10)
    for i in (1, 2, 3):
        assert queue.push(TopicData(seq=i)) is True
    items, ok = queue.find_data(2, 10)
    assert ok and _seqs(items) == [2, 3]
    items, ok = queue.find_data(2, 1)
    assert ok and _seqs(items) == [2]
    assert queue.find_data(0, 10) == ([], False)


def test_gap_in_sequence_returns_next_higher():
    queue = MemoryQueue(10)
    for i in (10, 20, 30):
        queue.push(TopicData(seq=i))
    items, ok = queue.find_data(15, 10)
    assert ok and _seqs(items) == [20, 30]


def test_invalid_capacity():
    with pytest.raises(ValueError):
        MemoryQueue(0)


def test_seq_generator_resets_each_second():
    times = iter([100.2, 100.9, 101.0, 101.5])
    gen = SeqGenerator(clock=lambda: next(times))
    assert gen.next_seq() == (100 << 32) | 1
    assert gen.next_seq() == (100 << 32) | 2
    assert gen.next_seq() == (101 << 32) | 1
    assert gen.next_seq() == (101 << 32) | 2


def test_seq_generator_is_increasing():
    gen = SeqGenerator()
    values = [gen.next_seq() for _ in range(50)]
    assert values == sorted(values)
    assert len(set(values)) == 50
    assert all(v & 0xFFFFFFFF >= 1 for v in values)
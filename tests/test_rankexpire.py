from nodekit.rankexpire import ExpireHeap


def test_not_expired_before_deadline():
    heap = ExpireHeap(100)
    heap.push_or_refresh(1, 1000)
    assert heap.pop_expire_key(1099) is None
    assert len(heap) == 1


def test_expired_at_deadline():
    heap = ExpireHeap(100)
    heap.push_or_refresh(1, 1000)
    assert heap.pop_expire_key(1100) == 1
    assert len(heap) == 0
    assert heap.pop_expire_key(5000) is None


def test_oldest_expires_first():
    heap = ExpireHeap(10)
    heap.push_or_refresh(5, 300)
    heap.push_or_refresh(6, 100)
    heap.push_or_refresh(7, 200)
    order = [heap.pop_expire_key(10_000) for _ in range(3)]
    assert order == [6, 7, 5]


def test_refresh_moves_key_later():
    heap = ExpireHeap(10)
    heap.push_or_refresh(1, 100)
    heap.push_or_refresh(2, 200)
    heap.push_or_refresh(1, 300)
    assert len(heap) == 2
    assert heap.pop_expire_key(250) == 2
    assert heap.pop_expire_key(250) is None
    assert heap.pop_expire_key(310) == 1


def test_remove():
    heap = ExpireHeap(10)
    heap.push_or_refresh(1, 100)
    heap.push_or_refresh(2, 200)
    assert heap.remove(1) is True
    assert heap.remove(1) is False
    assert 1 not in heap
    assert heap.pop_expire_key(10_000) == 2
    assert heap.pop_expire_key(10_000) is None
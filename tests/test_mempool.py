import pytest

from nodekit.mempool import Pool, PoolData, PoolEx


class Payload(PoolData):
    def __init__(self):
        self.value = None
        self.resets = 0

    def reset(self):
        super().reset()
        self.value = None
        self.resets += 1


def test_pool_reuses_put_object():
    pool = Pool(2, dict)
    obj = pool.get()
    pool.put(obj)
    assert pool.get() is obj


def test_pool_creates_when_empty():
    created = []

    def factory():
        created.append(object())
        return created[-1]

    pool = Pool(1, factory)
    first = pool.get()
    second = pool.get()
    assert first is not second
    assert created == [first, second]


def test_pool_drops_beyond_capacity():
    pool = Pool(1, list)
    a, b = [1], [2]
    pool.put(a)
    pool.put(b)
    assert pool.get() is a
    assert pool.get() not in (a, b)


def test_pool_ex_marks_in_use_and_resets():
    pool = PoolEx(4, Payload)
    data = pool.get()
    assert data.in_use is True
    data.value = "payload"
    pool.put(data)
    assert data.in_use is False
    assert data.value is None
    assert data.resets == 1
    again = pool.get()
    assert again is data
    assert again.in_use is True


def test_pool_ex_double_put_raises():
    pool = PoolEx(4, Payload)
    data = pool.get()
    pool.put(data)
    with pytest.raises(RuntimeError):
        pool.put(data)


def test_pool_ex_get_in_use_cached_raises():
    pool = PoolEx(4, Payload)
    data = pool.get()
    pool.put(data)
    data.in_use = True
    with pytest.raises(RuntimeError):
        pool.get()


def test_pool_ex_capacity_limits_cache():
    pool = PoolEx(1, Payload)
    first = pool.get()
    second = pool.get()
    pool.put(first)
    pool.put(second)
    assert pool.get() is first
    third = pool.get()
    assert third is not second
    assert third is not first
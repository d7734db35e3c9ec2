# tests/test_utils.py
import threading
from acoustic_wsn.utils import FitnessCache, hash_route


def test_fitness_cache_basic():
    c = FitnessCache(maxsize=3)
    assert len(c) == 0
    c.set(b"a", 0.1)
    c.set(b"b", 0.2)
    assert c.get(b"a") == 0.1
    assert c.get(b"x") is None
    assert c.hits == 1 and c.misses == 1
    c.clear()
    assert len(c) == 0
    assert c.hits == 0 and c.misses == 0


def test_fitness_cache_drops_table_when_full():
    c = FitnessCache(maxsize=2)
    c.set(b"a", 1.0)
    c.set(b"b", 2.0)
    # overwriting an existing key never flushes
    c.set(b"b", 3.0)
    assert len(c) == 2
    c.set(b"c", 4.0)
    assert len(c) == 1
    assert c.get(b"c") == 4.0
    assert c.get(b"a") is None


def test_fitness_cache_keeps_zero_scores():
    c = FitnessCache(maxsize=2)
    c.set(b"z", 0.0)
    assert c.get(b"z") == 0.0


def test_fitness_cache_thread_safety():
    c = FitnessCache(maxsize=100)
    def writer(i):
        for j in range(100):
            c.set(f"{i}-{j}".encode(), float(j))
    threads = [threading.Thread(target=writer, args=(i,)) for i in range(5)]
    for t in threads: t.start()
    for t in threads: t.join()
    assert len(c) <= 100


def test_hash_route_consistency():
    a = hash_route([1, 2, 3], digest_size=8)
    b = hash_route([1, 2, 3], digest_size=8)
    assert a == b
    # order matters for the route length
    assert a != hash_route([3, 2, 1], digest_size=8)
    assert len(a) == 8


def test_hash_route_includes_state():
    plain = hash_route([1, 2])
    charged = hash_route([1, 2], state=[13.5, 16.3])
    assert plain != charged
    assert charged == hash_route([1, 2], state=[13.5, 16.3])
    assert charged != hash_route([1, 2], state=[13.5, 20.0])

# acoustic_wsn/utils.py
import hashlib
import threading
from typing import Dict, Hashable, Optional, Sequence

import numpy as np


class FitnessCache:
    """
    Route score memo shared by the evaluation threads.

    Entries are never evicted one by one: once ``maxsize`` is reached the
    whole table is dropped, which is enough for a planner that clears it at
    every ``prepare()`` anyway.
    """

    def __init__(self, maxsize: int = 100_000):
        self.maxsize = max(1, int(maxsize))
        self._scores: Dict[Hashable, float] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[float]:
        with self._lock:
            score = self._scores.get(key)
            if score is None:
                self.misses += 1
            else:
                self.hits += 1
            return score

    def set(self, key: Hashable, score: float):
        with self._lock:
            if key not in self._scores and len(self._scores) >= self.maxsize:
                self._scores.clear()
            self._scores[key] = score

    def clear(self):
        with self._lock:
            self._scores.clear()
            self.hits = self.misses = 0

    def __len__(self):
        with self._lock:
            return len(self._scores)


def hash_route(route: Sequence[int], state: Optional[Sequence[float]] = None, digest_size: int = 8) -> bytes:
    """Key for a route; ``state`` holds the energies of its nodes, if given."""
    h = hashlib.blake2b(digest_size=digest_size)
    h.update(np.asarray(route, dtype=np.int64).tobytes())
    h.update(b'|')
    h.update(len(route).to_bytes(4, "little"))
    if state is not None:
        h.update(b'|')
        h.update(np.asarray(state, dtype=np.float64).tobytes())
    return h.digest()

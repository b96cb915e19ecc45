import logging
from typing import Callable, NamedTuple

import pandas as pd

from .policies.base import InvalidConfiguration
from .policies.lru import EvictionCache

logger = logging.getLogger(__name__)


class TraceObject(NamedTuple):
    """One cached object from a trace; only its byte count matters."""
    nbytes: int

    def size(self) -> int:
        return self.nbytes


def default_key(row) -> str:
    return str(row.key)


def video_key(row) -> str:
    """Key for video traces: one object per title and quality ladder."""
    return f"{row.video}_{row.ladder}"


class CacheSim:
    """
    Replays a request trace through an ``EvictionCache``.

    Every row is a GET: a miss inserts a ``TraceObject`` of ``row.bytes``.
    Evictions are counted through the cache's ``on_evicted`` hook.
    """
    def __init__(self, capacity_mb: int, policy_ctor: Callable = EvictionCache):
        if capacity_mb < 0:
            raise InvalidConfiguration(
                f"capacity_mb must be non-negative, got {capacity_mb}")
        self.cap_bytes = capacity_mb * 1024 * 1024
        self.evictions = 0
        self.policy    = policy_ctor(self.cap_bytes, self._count_eviction)

    def _count_eviction(self, key, value):
        self.evictions += 1

    def request(self, key: str, nbytes: int) -> bool:
        _, hit = self.policy.get(key)
        if not hit:
            self.policy.add(key, TraceObject(int(nbytes)))
        return hit

    def replay(self, df: pd.DataFrame, key_func: Callable = None) -> float:
        key_func = key_func or default_key
        if len(df) == 0:
            return 0.0
        hits = 0
        for row in df.itertuples(index=False):
            if self.request(key_func(row), row.bytes):
                hits += 1
        logger.debug("replayed %d requests, %d hits, %d evictions",
                     len(df), hits, self.evictions)
        return hits / len(df)

    # used by dynamic resize simulations
    def resize(self, new_cap_mb: int):
        self.policy.resize(new_cap_mb * 1024 * 1024)
        self.cap_bytes = self.policy.max_bytes

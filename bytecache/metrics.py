# bytecache/metrics.py
from typing import Callable, Mapping
import pandas as pd

from .simulator import CacheSim, default_key
from .policies.lru import EvictionCache

EDGE_LAT_MS = 5
# miss penalty per tier; the default table is keyed by video quality ladder
MISS_LAT_MS = {"480p": 60, "720p": 40, "1080p": 20}
DEFAULT_MISS_LAT_MS = 40


def replay_with_metrics(df: pd.DataFrame, cap_mb: int,
                        key_func: Callable = default_key,
                        policy_ctor: Callable = EvictionCache,
                        miss_lat_ms: Mapping[str, float] = MISS_LAT_MS,
                        tier_attr: str = "ladder") -> dict:
    """
    Replay ``df`` and report hit ratio, byte hit ratio, mean latency and
    eviction count.

    A hit costs ``EDGE_LAT_MS``. A miss costs ``miss_lat_ms[row.<tier_attr>]``,
    or ``DEFAULT_MISS_LAT_MS`` when the row has no tier or an unknown one.
    """
    sim = CacheSim(cap_mb, policy_ctor)
    hits = reqs = 0
    bytes_hit = bytes_total = 0
    lat_sum = 0.0

    for row in df.itertuples(index=False):
        hit = sim.request(key_func(row), row.bytes)
        reqs += 1
        bytes_total += row.bytes
        if hit:
            hits += 1
            bytes_hit += row.bytes
            lat_sum += EDGE_LAT_MS
        else:
            lat_sum += miss_lat_ms.get(getattr(row, tier_attr, None),
                                       DEFAULT_MISS_LAT_MS)

    if reqs == 0:
        return {"hit_ratio": 0.0, "bytes_saved_pct": 0.0,
                "avg_latency_ms": 0.0, "evictions": 0}
    return {
        "hit_ratio": hits / reqs,
        "bytes_saved_pct": bytes_hit / bytes_total if bytes_total else 0.0,
        "avg_latency_ms": lat_sum / reqs,
        "evictions": sim.evictions,
    }


def dynamic_replay(df: pd.DataFrame, cap_low: int = 200, cap_high: int = 1000,
                   window="1min", hi_req: int = 1500, lo_req: int = 400,
                   key_func: Callable = default_key,
                   policy_ctor: Callable = EvictionCache,
                   never_shrink_when_high: bool = True) -> float:
    """
    Replay ``df`` (sorted by ``ts``) starting at ``cap_low`` MB.

    At every ``window`` boundary the request count of the window just closed
    decides the size: above ``hi_req`` grows the cache to ``cap_high``, below
    ``lo_req`` shrinks it back to ``cap_low``. Shrinking evicts immediately.
    With ``never_shrink_when_high`` a grown cache stays grown.
    """
    window = pd.Timedelta(window)
    sim = CacheSim(cap_low, policy_ctor)
    high_mode = False
    hits = reqs = 0
    buf = 0
    window_start = None

    for row in df.itertuples(index=False):
        ts = pd.Timestamp(row.ts)
        if window_start is None:
            window_start = ts
        elif ts - window_start >= window:
            if buf > hi_req and not high_mode:
                sim.resize(cap_high)
                high_mode = True
            elif buf < lo_req and (not never_shrink_when_high or not high_mode):
                sim.resize(cap_low)
                high_mode = False
            buf = 0
            window_start = ts

        reqs += 1
        buf += 1
        if sim.request(key_func(row), row.bytes):
            hits += 1
    return hits / reqs if reqs else 0.0

# bytecache/policies/lru.py
import logging
from typing import Callable, Hashable, Iterator, List, Optional, Tuple

from .base import BasePolicy, Value

logger = logging.getLogger(__name__)

NIL = -1

EvictCallback = Callable[[str, Value], None]


class EvictionCache(BasePolicy):
    """
    Least-Recently-Used cache with byte accounting.

    Every entry costs ``len(key) + value.size()`` bytes. When the running
    total exceeds ``max_bytes`` the tail of the recency list is evicted until
    the total fits again; ``max_bytes=0`` disables eviction.

    The recency list lives in an arena: parallel slot arrays addressed by
    integer index, linked through ``prev``/``next`` indices. ``_index`` maps
    each key to its slot. Slots freed by removal are reused.

    Not safe for concurrent use. ``on_evicted`` must not call back into the
    same cache.
    """
    def __init__(self, max_bytes: int = 0,
                 on_evicted: Optional[EvictCallback] = None):
        super().__init__(max_bytes)
        self.on_evicted = on_evicted
        self._used = 0                           # bytes currently held
        self._index = {}                         # key -> slot
        self._keys: List[Optional[str]] = []     # slot -> key
        self._vals: List[Optional[Value]] = []   # slot -> value
        self._prev: List[int] = []               # slot -> towards head
        self._next: List[int] = []               # slot -> towards tail
        self._free: List[int] = []               # recycled slots
        self._head = NIL                         # most recently used
        self._tail = NIL                         # least recently used

    @property
    def max_bytes(self) -> int:
        return self.cap

    @property
    def used_bytes(self) -> int:
        return self._used

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._index

    def keys(self) -> List[str]:
        """Keys ordered from most to least recently used."""
        return [self._keys[slot] for slot in self._walk()]

    # ----------------------------------------------------------
    def get(self, key: str) -> Tuple[Optional[Value], bool]:
        slot = self._index.get(key)
        if slot is None:
            return None, False
        self._move_to_front(slot)
        return self._vals[slot], True

    def peek(self, key: str) -> Tuple[Optional[Value], bool]:
        """Like ``get`` but leaves the recency order alone."""
        slot = self._index.get(key)
        if slot is None:
            return None, False
        return self._vals[slot], True

    def add(self, key: str, value: Value) -> None:
        slot = self._index.get(key)
        if slot is not None:
            # overwrite is not eviction: the old value is dropped silently
            self._used += value.size() - self._vals[slot].size()
            self._vals[slot] = value
            self._move_to_front(slot)
        else:
            slot = self._alloc(key, value)
            self._index[key] = slot
            self._push_front(slot)
            self._used += len(key) + value.size()
        self._shrink()

    def remove_oldest(self) -> Optional[Tuple[str, Value]]:
        if self._tail == NIL:
            return None
        key, value = self._drop(self._tail)
        logger.debug("evicted %r, %d/%d bytes used",
                     key, self._used, self.cap)
        if self.on_evicted is not None:
            self.on_evicted(key, value)
        return key, value

    def remove(self, key: str) -> bool:
        """Delete ``key`` without notifying ``on_evicted``."""
        slot = self._index.get(key)
        if slot is None:
            return False
        self._drop(slot)
        return True

    def resize(self, new_cap: int):
        super().resize(new_cap)
        logger.debug("resized to %d bytes, %d used", new_cap, self._used)
        self._shrink()

    def clear(self) -> None:
        self._index.clear()
        self._keys.clear()
        self._vals.clear()
        self._prev.clear()
        self._next.clear()
        self._free.clear()
        self._head = self._tail = NIL
        self._used = 0

    # ----------------------------------------------------------
    def _shrink(self):
        # a lone entry stays even when it alone exceeds the budget
        while self.cap != 0 and self._used > self.cap and len(self._index) > 1:
            self.remove_oldest()

    def _alloc(self, key: str, value: Value) -> int:
        if self._free:
            slot = self._free.pop()
            self._keys[slot] = key
            self._vals[slot] = value
            return slot
        self._keys.append(key)
        self._vals.append(value)
        self._prev.append(NIL)
        self._next.append(NIL)
        return len(self._keys) - 1

    def _drop(self, slot: int) -> Tuple[str, Value]:
        key, value = self._keys[slot], self._vals[slot]
        self._unlink(slot)
        del self._index[key]
        self._used -= len(key) + value.size()
        self._keys[slot] = None
        self._vals[slot] = None
        self._free.append(slot)
        return key, value

    def _push_front(self, slot: int):
        self._prev[slot] = NIL
        self._next[slot] = self._head
        if self._head != NIL:
            self._prev[self._head] = slot
        self._head = slot
        if self._tail == NIL:
            self._tail = slot

    def _unlink(self, slot: int):
        prev, nxt = self._prev[slot], self._next[slot]
        if prev != NIL:
            self._next[prev] = nxt
        else:
            self._head = nxt
        if nxt != NIL:
            self._prev[nxt] = prev
        else:
            self._tail = prev
        self._prev[slot] = self._next[slot] = NIL

    def _move_to_front(self, slot: int):
        if slot == self._head:
            return
        self._unlink(slot)
        self._push_front(slot)

    def _walk(self) -> Iterator[int]:
        slot = self._head
        while slot != NIL:
            yield slot
            slot = self._next[slot]

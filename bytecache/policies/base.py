# bytecache/policies/base.py
from typing import Protocol, runtime_checkable


class InvalidConfiguration(ValueError):
    """Raised when a cache is built or resized with a negative byte ceiling."""


@runtime_checkable
class Value(Protocol):
    """Anything stored in a cache must report how many bytes it costs."""
    def size(self) -> int: ...


class BasePolicy:
    def __init__(self, capacity_bytes: int):
        self.cap = _check_capacity(capacity_bytes)

    def resize(self, new_cap: int):
        self.cap = _check_capacity(new_cap)


def _check_capacity(capacity_bytes: int) -> int:
    if capacity_bytes < 0:
        raise InvalidConfiguration(
            f"capacity must be non-negative, got {capacity_bytes}")
    return capacity_bytes

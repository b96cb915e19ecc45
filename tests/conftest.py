import pytest


class Blob:
    """Test payload with a fixed byte count."""
    def __init__(self, n: int, tag: str = ""):
        self.n = n
        self.tag = tag

    def size(self) -> int:
        return self.n

    def __repr__(self):
        return f"Blob({self.n}, {self.tag!r})"


@pytest.fixture
def blob():
    """Factory for size-reporting payloads."""
    return Blob


@pytest.fixture
def evicted():
    """Collects (key, value) pairs passed to on_evicted."""
    seen = []

    def record(key, value):
        seen.append((key, value))

    record.seen = seen
    return record

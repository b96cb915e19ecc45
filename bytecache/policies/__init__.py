from .base import BasePolicy, InvalidConfiguration, Value
from .lru import EvictionCache

__all__ = ["BasePolicy", "EvictionCache", "InvalidConfiguration", "Value"]

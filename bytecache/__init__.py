from .policies import EvictionCache, InvalidConfiguration, Value
from .simulator import CacheSim, TraceObject, default_key, video_key

__all__ = ["CacheSim", "EvictionCache", "InvalidConfiguration",
           "TraceObject", "Value", "default_key", "video_key"]

from .kv import KeyValue

__all__ = [
    "KeyValue",
]

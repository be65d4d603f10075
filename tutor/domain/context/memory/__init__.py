from .memory_provider import (
    MemoryProvider,
    NullMemoryProvider,
    InMemoryMemoryProvider,
    VectorStoreMemoryProvider,
    WORLDVIEW_TYPE,
    INTERACTION_TYPE,
)

__all__ = [
    "MemoryProvider",
    "NullMemoryProvider",
    "InMemoryMemoryProvider",
    "VectorStoreMemoryProvider",
    "WORLDVIEW_TYPE",
    "INTERACTION_TYPE",
]

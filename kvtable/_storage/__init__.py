from .memory import MemoryItemStorage
from .protocol import ItemStorageProtocol

__all__ = ["MemoryItemStorage", "ItemStorageProtocol"]

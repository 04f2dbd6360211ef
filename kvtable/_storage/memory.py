from typing import List, Optional

from kvtable._storage.base import AbstractItemStorage
from kvtable.core.item import Item, fold_key


class MemoryItemStorage(AbstractItemStorage):
    """In-memory backing sequence kept as a plain list.

    Lookup is a linear scan in insertion order. Tables are expected to be
    small, so no secondary index is kept.
    """

    def __init__(self) -> None:
        self._items: List[Item] = []

    def find(self, key: str) -> Optional[int]:
        folded = fold_key(key)
        for index, item in enumerate(self._items):
            if item.folded == folded:
                return index
        return None

    def get(self, index: int) -> Item:
        return self._items[index]

    def append(self, item: Item) -> None:
        self._items.append(item)

    def replace(self, index: int, item: Item) -> None:
        self._items[index] = item

    def clear(self) -> None:
        self._items.clear()

    def items(self) -> List[Item]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

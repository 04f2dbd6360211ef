from typing import List, Optional, Protocol, runtime_checkable

from kvtable.core.item import Item


@runtime_checkable
class ItemStorageProtocol(Protocol):
    """Minimal protocol describing the backing sequence expected by KVTable.

    Only the methods that `kvtable.core.table.KVTable` uses are specified
    here. Implementations are not expected to be thread-safe; the table
    serializes every call under its own lock.
    """

    def find(self, key: str) -> Optional[int]:  # pragma: no cover - interface
        ...

    def get(self, index: int) -> Item:  # pragma: no cover - interface
        ...

    def append(self, item: Item) -> None:  # pragma: no cover - interface
        ...

    def replace(self, index: int, item: Item) -> None:  # pragma: no cover
        ...

    def clear(self) -> None:  # pragma: no cover - interface
        ...

    def items(self) -> List[Item]:  # pragma: no cover - interface
        ...

    def __len__(self) -> int:  # pragma: no cover - interface
        ...

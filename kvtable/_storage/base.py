from abc import ABC, abstractmethod
from typing import List, Optional

from kvtable.core.item import Item


class AbstractItemStorage(ABC):
    """Abstract base class for backing sequence implementations."""

    @abstractmethod
    def find(self, key: str) -> Optional[int]:
        pass

    @abstractmethod
    def get(self, index: int) -> Item:
        pass

    @abstractmethod
    def append(self, item: Item) -> None:
        pass

    @abstractmethod
    def replace(self, index: int, item: Item) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def items(self) -> List[Item]:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

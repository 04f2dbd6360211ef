import functools
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Callable

from kvtable._storage import MemoryItemStorage, ItemStorageProtocol

if TYPE_CHECKING:  # pragma: no cover
    from .table import KVTable


def locked_method(method: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to hold the table lock for the whole method call."""

    @functools.wraps(method)
    def wrapper(self: "KVTable", *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


def _make_default_store() -> ItemStorageProtocol:
    """Create the default in-memory backing sequence."""
    return MemoryItemStorage()


class PutOutcome(IntEnum):
    """What a call to `KVTable.put` did to the table."""

    IGNORED = 0
    ADDED = 1
    UPDATED = 2
    FAILED = 3

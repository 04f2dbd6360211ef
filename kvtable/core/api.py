"""Handle-style functions over `KVTable`.

Each function accepts None as the null handle and answers with a
sentinel instead of raising, so callers holding an optional table never
need to guard their calls.
"""
import logging
from typing import Optional

from kvtable._types import Pair
from kvtable.core.item import Item
from kvtable.core.table import KVTable

logger = logging.getLogger(__name__)


def create(name: Optional[str] = None) -> Optional[KVTable]:
    """Create an empty table, or return None if memory ran out."""
    try:
        return KVTable(name)
    except MemoryError:
        logger.warning("Out of memory creating table %r", name)
        return None


def destroy(table: Optional[KVTable]) -> None:
    """
    Destroy `table` and return None.

    Rebind the handle with the result so it cannot be reused:

        table = destroy(table)
    """
    if table is not None:
        table.destroy()
    return None


def dump(table: Optional[KVTable]) -> None:
    if table is not None:
        table.dump()


def put(table: Optional[KVTable], key: str, value: Optional[str] = None) -> None:
    if table is not None:
        table.put(key, value)


def find(table: Optional[KVTable], key: str) -> Optional[Item]:
    if table is None:
        return None
    return table.find(key)


def get_value(table: Optional[KVTable], key: str) -> Optional[str]:
    if table is None:
        return None
    return table.get_value(key)


def count(table: Optional[KVTable]) -> int:
    if table is None:
        return 0
    return table.count()


def get_by_index(table: Optional[KVTable], index: int) -> Pair:
    if table is None:
        return (None, None)
    return table.get_by_index(index)

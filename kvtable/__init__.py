"""kvtable — small thread-safe ordered key-value table.

This package exposes `KVTable`, an insertion-ordered table of
case-insensitive text keys and text values meant for per-session or
per-connection properties, plus a handle-style function API over it.
"""
from pathlib import Path
from typing import Optional

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from kvtable._sink import LogSink
from kvtable.core.api import (
    count,
    create,
    destroy,
    dump,
    find,
    get_by_index,
    get_value,
    put,
)
from kvtable.core.item import Item
from kvtable.core.table import KVTable
from kvtable.core.utils import PutOutcome


def _read_version_file() -> Optional[str]:
    try:
        return Path(__file__).with_name("VERSION").read_text(encoding="utf8").strip()
    except OSError:
        return None


def _get_version() -> str:
    # 1) Try to read installed distribution metadata
    try:
        return _pkg_version("kvtable")
    except PackageNotFoundError:
        pass

    # 2) Try the VERSION file written at build time
    v = _read_version_file()
    if v:
        return v

    # 3) Fall back to a safe default
    return "0.0.0"


__version__ = _get_version()


__all__ = [
    "KVTable",
    "Item",
    "PutOutcome",
    "LogSink",
    "create",
    "destroy",
    "dump",
    "put",
    "find",
    "get_value",
    "count",
    "get_by_index",
    "__version__",
]

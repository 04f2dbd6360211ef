import contextlib
import json
import logging
from threading import RLock
from typing import (
    Any,
    ContextManager,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
)

from kvtable._sink import LogSink
from kvtable._storage import ItemStorageProtocol
from kvtable._types import Pair
from kvtable.core.item import Item
from kvtable.core.utils import PutOutcome, _make_default_store, locked_method

logger = logging.getLogger(__name__)


class KVTable:
    """
    Thread-safe ordered table of case-insensitive text keys and text values.

    Every public operation holds the table lock for its full duration.
    Invalid arguments never raise: they turn the call into a no-op or an
    absent result. Once destroyed, the table behaves like an empty one and
    ignores writes.

    Arguments:
        name: Optional label written by `dump`.
        lock: Optional lock object to use for synchronization. If None,
            a new RLock is created.

    Examples:
        >>> table = KVTable("session")
        >>> table.put("user", "alice")
        <PutOutcome.ADDED: 1>
        >>> table.get_value("USER")
        'alice'
        >>> table.get_by_index(0)
        ('user', 'alice')
    """

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        lock: Optional[RLock] = None,
        log_level: Optional[int] = None,
        store: Optional[ItemStorageProtocol] = None,
        sink: Optional[LogSink] = None,
    ) -> None:
        """
        Initialize the table.

        Args:
            name: Optional diagnostic label. Non-text names are converted
                with `str()`.
            lock: An optional threading.RLock or similar object. It must be
                re-entrant if `locked()` is combined with table calls.
            log_level: Optional logging level applied to the `kvtable`
                package logger. Left untouched when None.
            store: An optional backing sequence implementing
                ItemStorageProtocol.
            sink: An optional LogSink receiving `dump` output. Defaults to
                the module logger.

        Raises:
            TypeError: If lock, store or sink do not provide the required
                methods.
            ValueError: If log_level is not a valid logging level.
        """
        if lock is not None and not all(
            hasattr(lock, method)
            for method in ("__enter__", "__exit__", "acquire", "release")
        ):
            raise TypeError("lock must be a threading.RLock or similar object")

        if log_level is not None and not (50 >= log_level >= 0):
            raise ValueError("log_level must be a valid logging level between 0 and 50")

        if store is not None and not isinstance(store, ItemStorageProtocol):
            raise TypeError("store must implement ItemStorageProtocol")

        if sink is not None and not isinstance(sink, LogSink):
            raise TypeError("sink must provide a log(level, msg, *args) method")

        self._lock: RLock = lock or RLock()
        # None once the table has been destroyed
        self._store: Optional[ItemStorageProtocol] = (
            store if store is not None else _make_default_store()
        )
        self._name: Optional[str] = str(name) if name is not None else None
        self._sink: LogSink = sink if sink is not None else logger
        if log_level is not None:
            logging.getLogger("kvtable").setLevel(log_level)

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    @locked_method
    def destroyed(self) -> bool:
        return self._store is None

    @locked_method
    def put(self, key: str, value: Optional[str] = None) -> PutOutcome:
        """
        Insert `key` or replace the value stored under it.

        A None value clears the stored value but keeps the key. The key
        spelling from the first insertion is kept on update.

        Returns:
            ADDED or UPDATED on success, IGNORED for invalid arguments or a
            destroyed table, FAILED when storage ran out of memory. The
            table is unchanged unless ADDED or UPDATED is returned.
        """
        if self._store is None:
            return PutOutcome.IGNORED
        if not isinstance(key, str) or not key:
            logger.debug("Ignored put with invalid key %r", key)
            return PutOutcome.IGNORED
        if value is not None and not isinstance(value, str):
            logger.debug("Ignored put of %s value for %s", type(value).__name__, key)
            return PutOutcome.IGNORED

        index = self._store.find(key)
        try:
            if index is None:
                self._store.append(Item(key, value))
            else:
                self._store.replace(index, self._store.get(index).with_value(value))
        except MemoryError:
            logger.warning("Out of memory storing %s, table left unchanged", key)
            return PutOutcome.FAILED

        if index is None:
            logger.debug("Added %s", key)
            return PutOutcome.ADDED
        logger.debug("Updated %s", key)
        return PutOutcome.UPDATED

    @locked_method
    def find(self, key: str) -> Optional[Item]:
        """Return the first Item whose key matches `key`, ignoring case."""
        if self._store is None or not isinstance(key, str):
            return None
        index = self._store.find(key)
        if index is None:
            return None
        return self._store.get(index)

    def get_value(self, key: str) -> Optional[str]:
        item = self.find(key)
        if item is None:
            return None
        return item.value

    @locked_method
    def count(self) -> int:
        if self._store is None:
            return 0
        return len(self._store)

    @locked_method
    def get_by_index(self, index: int) -> Pair:
        """
        Return the (key, value) pair at insertion position `index`.

        Both sides are None when `index` is negative or not below
        `count()`; callers iterate from 0 to count() - 1.
        """
        if self._store is None or not isinstance(index, int):
            return (None, None)
        if index < 0 or index >= len(self._store):
            return (None, None)
        return self._store.get(index).as_pair()

    @locked_method
    def dump(self) -> None:
        """
        Write the table name and every item with a value to the sink at
        DEBUG level. An empty table writes nothing. Sink failures are
        logged and never raised.
        """
        if self._store is None or len(self._store) == 0:
            return
        try:
            if self._name is not None:
                self._sink.log(logging.DEBUG, "kv_table: name=[%s]", self._name)
            for item in self._store.items():
                if item.value is not None:
                    self._sink.log(
                        logging.DEBUG, "\t[%s] = [%s]", item.key, item.value
                    )
        except Exception:
            logger.warning("Failed to dump table %r", self._name, exc_info=True)

    @locked_method
    def destroy(self) -> None:
        """
        Release every item and the name. Calling it again is a no-op.

        Threads waiting on the lock while the table is destroyed proceed
        afterwards and see an empty, read-only table.
        """
        if self._store is None:
            return
        self._store.clear()
        self._store = None
        self._name = None
        logger.debug("Table destroyed")

    def locked(self) -> ContextManager["KVTable"]:
        """
        Context manager holding the table lock across several calls.

        Usage:
            with table.locked() as t:
                if t.find("user") is None:
                    t.put("user", "guest")
        """

        @contextlib.contextmanager
        def _locked_ctx() -> Iterator[KVTable]:
            self._lock.acquire()
            try:
                yield self
            finally:
                self._lock.release()

        return _locked_ctx()

    @locked_method
    def items(self) -> List[Item]:
        """Return a snapshot of the items in insertion order."""
        if self._store is None:
            return []
        return self._store.items()

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {item.key: item.value for item in self.items()}

    def to_json(self, **kwargs: Any) -> str:
        """Serialize the items to a JSON object string."""
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Optional[str]], name: Optional[str] = None
    ) -> "KVTable":
        """
        Create a table from a mapping, in the mapping's iteration order.

        Entries that `put` would ignore are skipped.
        """
        t = cls(name)
        with t.locked():
            for k, v in data.items():
                t.put(k, v)
        return t

    def __len__(self) -> int:
        return self.count()

    def __bool__(self) -> bool:
        return not self.destroyed

    def __iter__(self) -> Iterator[str]:
        return iter([item.key for item in self.items()])

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.find(key) is not None

    @locked_method
    def __repr__(self) -> str:
        if self._store is None:
            return f"{self.__class__.__name__}(<destroyed>)"
        keys = [item.key for item in self._store.items()]
        return f"{self.__class__.__name__}({self._name!r}, {keys!r})"

    def __getstate__(self) -> Dict[str, Any]:
        with self._lock:
            items = self._store.items() if self._store is not None else []
            return {
                "name": self._name,
                "destroyed": self._store is None,
                "items": [item.as_pair() for item in items],
            }

    def __setstate__(self, state: Dict[str, Any]) -> None:
        """
        Rebuild a pickled table.

        The lock, store backend and sink are not pickled: the restored table
        gets a fresh RLock, the default in-memory store, and writes `dump`
        output to the module logger.
        """
        self._lock = RLock()
        self._name = state.get("name")
        self._sink = logger
        self._store = None
        if state.get("destroyed"):
            return
        self._store = _make_default_store()
        for key, value in state.get("items", []):
            self._store.append(Item(key, value))

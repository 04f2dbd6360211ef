from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LogSink(Protocol):
    """Leveled text sink used by `KVTable.dump`.

    A `logging.Logger` already satisfies this protocol, so the default
    sink is simply the module logger.
    """

    def log(
        self, level: int, msg: str, *args: Any
    ) -> None:  # pragma: no cover - interface
        ...

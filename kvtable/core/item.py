from dataclasses import dataclass, field, replace
from typing import Optional

from kvtable._types import Pair


def fold_key(key: str) -> str:
    """Return the case-insensitive identity of `key`."""
    return key.casefold()


@dataclass(frozen=True)
class Item:
    """A single (key, value) entry held by a `KVTable`.

    Items are immutable. Updating a key swaps in a new Item, so an Item
    handed to a caller is a private snapshot that later writes to the
    table never alter.
    """

    key: str
    value: Optional[str] = None
    folded: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.key, str):
            raise TypeError(f"Item key must be a string, got {type(self.key)}")
        if not self.key:
            raise ValueError("Item key cannot be an empty string")
        if self.value is not None and not isinstance(self.value, str):
            raise TypeError(f"Item value must be a string, got {type(self.value)}")
        object.__setattr__(self, "folded", fold_key(self.key))

    def with_value(self, value: Optional[str]) -> "Item":
        return replace(self, value=value)

    def as_pair(self) -> Pair:
        return (self.key, self.value)

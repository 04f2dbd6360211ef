from typing import Optional, Tuple

# Pair is the (key, value) shape handed out by positional access:
# both sides are None when the index does not name a live item.
Pair = Tuple[Optional[str], Optional[str]]

__all__ = ["Pair"]

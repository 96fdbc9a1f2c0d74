import itertools
from typing import Callable
from uuid import uuid4

# prefix -> new id, e.g. "S" -> "S-3f9c2a71b0de"
IdGenerator = Callable[[str], str]


class UuidIdGenerator:
    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{uuid4().hex[:12]}"


class SequentialIdGenerator:
    """Monotonic ids ("S-0001", "S-0002", ...) for deterministic tests.

    A single counter is shared by every prefix, so ids stay unique across
    stores. Not safe to reuse against an existing data directory: the counter
    restarts at ``start`` every time.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter):04d}"

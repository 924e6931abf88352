from __future__ import annotations


class IdSequence:
    """Monotonic integer id generator, starting at ``start``.

    Not thread-safe on its own; callers hold the registry lock.
    """

    def __init__(self, start: int = 0) -> None:
        self._next = start

    def peek(self) -> int:
        return self._next

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

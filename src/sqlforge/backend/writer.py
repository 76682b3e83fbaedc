from __future__ import annotations

from typing import Callable, List, Tuple

from ..value import Value, Values


class SqlWriter:
    """
    Append-only SQL buffer with a positional parameter sink.

    In inline mode values are written as literals by the dialect; otherwise
    each value is pushed onto ``values`` and the dialect's marker for its
    1-based position is written in its place.
    """

    def __init__(self, inline: bool = False) -> None:
        self.inline = inline
        self._parts: List[str] = []
        self.values = Values()

    def write(self, text: str) -> None:
        self._parts.append(text)

    def push_param(self, value: Value, marker: Callable[[int], str]) -> None:
        self.values.append(value)
        self._parts.append(marker(len(self.values)))

    def getvalue(self) -> str:
        return "".join(self._parts)

    def result(self) -> Tuple[str, Values]:
        return self.getvalue(), self.values

    def __str__(self) -> str:
        return self.getvalue()

"""Accumulator for rendered function and class definitions."""

from __future__ import annotations


class FunctionRegistry:
    """Rendered definitions collected during one program render.

    Append-only while rendering. normalized() collapses identical text and
    orders entries lexicographically, so the result depends only on what
    was rendered, not on discovery order.
    """

    def __init__(self) -> None:
        self.entries: list[str] = []

    def add(self, text: str) -> None:
        self.entries.append(text)

    def normalized(self) -> list[str]:
        return sorted(set(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

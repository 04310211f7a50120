"""Character cursor over raw expression text."""

from __future__ import annotations

from dataclasses import dataclass

_WHITESPACE = frozenset(" \t\n\r")


@dataclass
class Source:
    text: str
    index: int = 0

    def test(self, char: str) -> bool:
        return self.index < len(self.text) and self.text[self.index] == char

    def is_next_space(self) -> bool:
        return self.index < len(self.text) and self.text[self.index] in _WHITESPACE

    def skip_space(self) -> None:
        while self.is_next_space():
            self.index += 1

    def has_next(self) -> bool:
        """Skip whitespace, then report whether unread input remains."""
        self.skip_space()
        return self.index < len(self.text)

    def has_char(self) -> bool:
        # Unlike has_next(), leaves whitespace in place.
        return self.index < len(self.text)

    def next(self) -> str:
        ch = self.text[self.index]
        self.index += 1
        return ch

    def shift(self, delta: int) -> None:
        self.index += delta

    @property
    def pos(self) -> int:
        return self.index

    def position(self) -> int:
        return self.index

from __future__ import annotations

from typing import Protocol


class BraceScanner(Protocol):
    def find_closing(self, text: str, start: int) -> int | None:
        """Return the index of the brace closing the one at ``start``, or None."""

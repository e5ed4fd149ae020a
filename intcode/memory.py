"""
Tape — the flat, growable memory of an Intcode machine.

The tape is also the instruction stream, so programs can rewrite themselves.
Reads and writes past the end zero-fill up to the touched address.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from .errors import AddressFault, LoadError

logger = logging.getLogger(__name__)

# Optional sign, then ASCII digits only. No padding or underscores.
_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_word(token: str, index: int) -> int:
    """Convert one signed decimal token, raising LoadError for anything else."""
    if _INTEGER.fullmatch(token) is None:
        raise LoadError(token, index)
    return int(token)


class Tape:
    """Zero-initialized signed-integer memory that grows on demand."""

    def __init__(self, cells: Iterable[int] = ()):
        self.cells: list[int] = [int(c) for c in cells]

    @classmethod
    def parse(cls, text: str) -> Tape:
        """Parse comma-separated program text. Whitespace trimming is the caller's job."""
        if text == "":
            return cls()
        cells = []
        for index, token in enumerate(text.split(",")):
            cells.append(parse_word(token, index))
        logger.debug("parsed program of %d cells", len(cells))
        return cls(cells)

    def _grow(self, addr: int):
        if addr < 0:
            raise AddressFault(addr)
        if addr >= len(self.cells):
            self.cells.extend([0] * (addr + 1 - len(self.cells)))

    def read(self, addr: int) -> int:
        self._grow(addr)
        return self.cells[addr]

    def write(self, addr: int, value: int):
        self._grow(addr)
        self.cells[addr] = value

    def snapshot(self) -> list[int]:
        return list(self.cells)

    def copy(self) -> Tape:
        return Tape(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self) -> str:
        return f"Tape({len(self.cells)} cells)"

# aad/core/tape.py
from __future__ import annotations
from typing import Iterator, List

from .entry import TapeEntry


class Tape:
    """
    Append-only record of TapeEntry objects in forward (recording) order.

    Entries are referenced by their integer position; Variables carry that
    index and never hold the tape. One tape serves one computation: once
    interpreted it accepts no further entries.
    """
    def __init__(self):
        self._entries: List[TapeEntry] = []
        self._interpreted = False

    def size(self) -> int:
        return len(self._entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self) -> Iterator[TapeEntry]:
        return iter(self._entries)

    @property
    def interpreted(self) -> bool:
        """True once the reverse sweep has populated the adjoints."""
        return self._interpreted

    def get(self, index: int) -> TapeEntry:
        """Entry at `index`; negative or past-the-end indices are rejected."""
        if not 0 <= index < len(self._entries):
            raise IndexError(f"tape index {index} out of range for tape of size {len(self._entries)}")
        return self._entries[index]

    def append(self, entry: TapeEntry) -> int:
        """
        Append `entry` and return its index (0, 1, 2, ...).

        Every operand of `entry` must already be on the tape, which keeps a
        plain descending scan a valid reverse-topological order.
        """
        if self._interpreted:
            raise RuntimeError("tape has already been interpreted; record on a new Tape")
        index = len(self._entries)
        for operand in entry.operands():
            if not 0 <= operand < index:
                raise ValueError(
                    f"{entry.kind.tag} entry at index {index} refers to operand {operand}, "
                    f"operands must be recorded earlier"
                )
        self._entries.append(entry)
        return index

    def _mark_interpreted(self):
        self._interpreted = True

    def __repr__(self):
        state = "interpreted" if self._interpreted else "recording"
        return f"Tape(size={len(self._entries)}, {state})"

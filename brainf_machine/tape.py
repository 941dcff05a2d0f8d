"""
Memory tape: one growable byte buffer and a head index.

    [ 0 | 0 | 7 | 0 | ... ]      cells allocated so far
              ^
              head

Index 0 is where the head starts and is also the left edge: there is nothing
to the left of it, so moving left from there fails. The right edge grows on
demand, one chunk of zero cells at a time, whenever the head needs a cell
that has not been allocated yet.
"""

from typing import List, Tuple

import numpy as np

from .config import DEFAULT_CHUNK_SIZE
from .errors import BackwardBoundaryUnderflow


class Tape:
    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        self.cells = np.zeros(0, dtype=np.uint8)
        self.head = 0

    def __len__(self):
        """Number of cells allocated so far."""
        return len(self.cells)

    def _ensure(self):
        if self.head >= len(self.cells):
            grow = self.head - len(self.cells) + self.chunk_size
            self.cells = np.concatenate([self.cells, np.zeros(grow, dtype=np.uint8)])

    @property
    def current(self) -> int:
        self._ensure()
        return int(self.cells[self.head])

    @current.setter
    def current(self, value: int):
        self._ensure()
        self.cells[self.head] = value % 256

    def increment(self):
        self.current = self.current + 1

    def decrement(self):
        self.current = self.current - 1

    def forward(self):
        self._ensure()
        self.head += 1

    def backward(self):
        if self.head == 0:
            raise BackwardBoundaryUnderflow()
        self.head -= 1

    def window(self, size: int = 10) -> Tuple[int, List[int]]:
        """Up to `size` cells around the head as (first_address, values).

        Cells past the allocated edge read as zero without being allocated.
        """
        start = max(0, self.head - size // 2)
        values = [int(self.cells[i]) if i < len(self.cells) else 0
                  for i in range(start, start + size)]
        return start, values

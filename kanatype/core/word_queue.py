from __future__ import annotations

import random
from typing import Optional, Sequence

# Upper bound on rejected draws before a repeat is accepted.
MAX_DRAW_ATTEMPTS = 1000


class WordQueue:
    """Hands out words from a fixed pool for the lifetime of one session.

    With ``randomize`` every call picks a uniform random word. Adding
    ``no_repeat`` avoids words already served until the whole pool has been
    used once, after which the pool starts over. Without ``randomize`` the
    pool is cycled in order.
    """

    def __init__(
        self,
        pool: Sequence[str],
        randomize: bool = True,
        no_repeat: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._pool = list(pool)
        self._randomize = randomize
        self._no_repeat = no_repeat
        self._rng = rng or random.Random()
        self._used: set[int] = set()
        self._cursor = 0

    @property
    def pool(self) -> list[str]:
        return list(self._pool)

    @property
    def used_indices(self) -> frozenset[int]:
        """Indices served so far in the current no-repeat cycle."""
        return frozenset(self._used)

    @property
    def cursor(self) -> int:
        """Index of the next word under the sequential policy."""
        return self._cursor

    def __len__(self) -> int:
        return len(self._pool)

    def reset(self) -> None:
        self._used.clear()
        self._cursor = 0

    def next(self) -> str:
        """Return the next word, or ``""`` when the pool is empty."""
        if not self._pool:
            return ""
        if self._randomize:
            return self._pool[self._draw_index()]
        idx = self._cursor % len(self._pool)
        self._cursor = (idx + 1) % len(self._pool)
        return self._pool[idx]

    def _draw_index(self) -> int:
        size = len(self._pool)
        if self._no_repeat and len(self._used) >= size:
            self._used.clear()
        idx = self._rng.randrange(size)
        attempts = 1
        while self._no_repeat and idx in self._used and attempts < MAX_DRAW_ATTEMPTS:
            idx = self._rng.randrange(size)
            attempts += 1
        self._used.add(idx)
        return idx

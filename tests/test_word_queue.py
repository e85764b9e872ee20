"""Tests for kanatype.core.word_queue – word selection policies."""

from __future__ import annotations

import random

import pytest

from kanatype.core.word_queue import MAX_DRAW_ATTEMPTS, WordQueue


class _FixedRandom(random.Random):
    """Always draws the same index."""

    def __init__(self, value: int) -> None:
        super().__init__(0)
        self.value = value
        self.calls = 0

    def randrange(self, *args, **kwargs):  # type: ignore[override]
        self.calls += 1
        return self.value


# ---------------------------------------------------------------------------
# Empty pool
# ---------------------------------------------------------------------------

class TestEmptyPool:
    @pytest.mark.parametrize("randomize, no_repeat", [(True, False), (True, True), (False, False)])
    def test_returns_empty_sentinel(self, randomize, no_repeat):
        q = WordQueue([], randomize=randomize, no_repeat=no_repeat)
        assert q.next() == ""
        assert len(q) == 0


# ---------------------------------------------------------------------------
# Sequential policy
# ---------------------------------------------------------------------------

class TestSequential:
    def test_cycles_in_order(self):
        pool = ["cat", "dog"]
        q = WordQueue(pool, randomize=False)
        assert [q.next() for _ in range(3)] == ["cat", "dog", "cat"]

    def test_ith_call_matches_pool_modulo(self):
        pool = ["a", "b", "c", "d", "e"]
        q = WordQueue(pool, randomize=False)
        for i in range(1, 23):
            assert q.next() == pool[(i - 1) % len(pool)]

    def test_does_not_touch_used_indices(self):
        q = WordQueue(["a", "b"], randomize=False, no_repeat=True)
        q.next()
        q.next()
        assert q.used_indices == frozenset()

    def test_cursor_wraps(self):
        q = WordQueue(["a", "b"], randomize=False)
        q.next()
        assert q.cursor == 1
        q.next()
        assert q.cursor == 0

    def test_reset(self):
        q = WordQueue(["a", "b", "c"], randomize=False)
        q.next()
        q.next()
        q.reset()
        assert q.next() == "a"


# ---------------------------------------------------------------------------
# Random policy
# ---------------------------------------------------------------------------

class TestRandom:
    def test_words_come_from_pool(self):
        pool = ["a", "b", "c"]
        q = WordQueue(pool, randomize=True, rng=random.Random(1))
        assert all(q.next() in pool for _ in range(50))

    def test_repeats_allowed_without_no_repeat(self):
        q = WordQueue(["a", "b"], randomize=True, rng=_FixedRandom(0))
        assert [q.next() for _ in range(3)] == ["a", "a", "a"]

    def test_seeded_rng_is_deterministic(self):
        pool = list("abcdefgh")
        a = WordQueue(pool, rng=random.Random(42))
        b = WordQueue(pool, rng=random.Random(42))
        assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]

    def test_pool_is_copied(self):
        pool = ["a", "b"]
        q = WordQueue(pool)
        pool.append("c")
        assert len(q) == 2


# ---------------------------------------------------------------------------
# Random policy with no-repeat
# ---------------------------------------------------------------------------

class TestNoRepeat:
    @pytest.mark.parametrize("seed", [0, 1, 7, 123])
    def test_each_cycle_is_a_permutation(self, seed):
        pool = [f"w{i}" for i in range(7)]
        q = WordQueue(pool, randomize=True, no_repeat=True, rng=random.Random(seed))
        for _ in range(4):
            cycle = [q.next() for _ in range(len(pool))]
            assert sorted(cycle) == sorted(pool)

    def test_used_indices_bounded_by_pool(self):
        q = WordQueue(["a", "b", "c"], randomize=True, no_repeat=True, rng=random.Random(3))
        for _ in range(20):
            q.next()
            assert len(q.used_indices) <= 3

    def test_used_indices_cleared_after_full_cycle(self):
        q = WordQueue(["a", "b"], randomize=True, no_repeat=True, rng=random.Random(5))
        q.next()
        q.next()
        assert len(q.used_indices) == 2
        q.next()
        assert len(q.used_indices) == 1

    def test_bounded_retries_accept_repeat(self):
        rng = _FixedRandom(0)
        q = WordQueue(["a", "b"], randomize=True, no_repeat=True, rng=rng)
        assert q.next() == "a"
        rng.calls = 0
        # index 0 is used and the rng never yields anything else
        assert q.next() == "a"
        assert rng.calls == MAX_DRAW_ATTEMPTS

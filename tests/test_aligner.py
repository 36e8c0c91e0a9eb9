"""Tests for LCS alignment — validity, optimality, and deterministic tie-breaking."""

import itertools
from functools import lru_cache

import pytest

from cipherdiff.engine.aligner import align, lcs_table


def _reference_lcs_length(a: tuple, b: tuple) -> int:
    @lru_cache(maxsize=None)
    def go(i: int, j: int) -> int:
        if i == len(a) or j == len(b):
            return 0
        if a[i] == b[j]:
            return 1 + go(i + 1, j + 1)
        return max(go(i + 1, j), go(i, j + 1))

    return go(0, 0)


def _assert_valid(baseline, candidate, pairs):
    for i, j in pairs:
        assert baseline[i] == candidate[j]
    bs = [i for i, _ in pairs]
    cs = [j for _, j in pairs]
    assert all(x < y for x, y in zip(bs, bs[1:]))
    assert all(x < y for x, y in zip(cs, cs[1:]))


FIXTURES = [
    ([], []),
    (["a"], []),
    ([], ["a"]),
    (["a", "b", "c"], ["a", "b", "c"]),
    (["a", "c"], ["a", "b", "c"]),
    (["a", "b", "c"], ["a", "c"]),
    (["x", "a"], ["a", "x"]),
    (["common1", "common2", "common3"], ["common3", "common1", "common2"]),
    (["a", "", "b", "", "c"], ["", "a", "b", "c", ""]),
    (["a", "a", "b", "a"], ["b", "a", "a"]),
    (list("ABCBDAB"), list("BDCABA")),
]


class TestValidity:
    @pytest.mark.parametrize("baseline,candidate", FIXTURES)
    def test_pairs_match_and_increase(self, baseline, candidate):
        pairs = align(baseline, candidate)
        _assert_valid(baseline, candidate, pairs)

    @pytest.mark.parametrize("baseline,candidate", FIXTURES)
    def test_length_is_optimal(self, baseline, candidate):
        pairs = align(baseline, candidate)
        assert len(pairs) == _reference_lcs_length(tuple(baseline), tuple(candidate))

    def test_exhaustive_small_alphabet(self):
        """Every pair of length-4 sequences over {a, b} aligns optimally."""
        words = ["".join(p) for p in itertools.product("ab", repeat=4)]
        for left, right in itertools.product(words, repeat=2):
            b, c = list(left), list(right)
            pairs = align(b, c)
            _assert_valid(b, c, pairs)
            assert len(pairs) == _reference_lcs_length(tuple(b), tuple(c))


class TestExamples:
    def test_identical(self):
        assert align(["a", "b", "c"], ["a", "b", "c"]) == [(0, 0), (1, 1), (2, 2)]

    def test_insertion(self):
        assert align(["a", "c"], ["a", "b", "c"]) == [(0, 0), (1, 2)]

    def test_deletion(self):
        assert align(["a", "b", "c"], ["a", "c"]) == [(0, 0), (2, 1)]

    def test_modification(self):
        assert align(["a", "b", "c"], ["a", "B", "c"]) == [(0, 0), (2, 2)]

    def test_empty_inputs(self):
        assert align([], ["a"]) == []
        assert align(["a"], []) == []

    def test_table_dimensions(self):
        table = lcs_table(["a", "b"], ["a", "b", "c"])
        assert len(table) == 3
        assert all(len(row) == 4 for row in table)
        assert table[2][3] == 2


class TestTieBreaking:
    def test_prefers_earlier_baseline_match(self):
        # Both (0, 1) and (1, 0) are maximal; ties step the baseline index.
        assert align(["x", "a"], ["a", "x"]) == [(0, 1)]

    def test_reorder_keeps_first_two(self):
        pairs = align(["common1", "common2", "common3"], ["common3", "common1", "common2"])
        assert pairs == [(0, 1), (1, 2)]

    def test_deterministic(self):
        b = list("ABCBDAB")
        c = list("BDCABA")
        assert align(b, c) == align(b, c)

"""Longest-common-subsequence alignment of two line sequences.

Uses the classic dynamic-programming table of size (|B|+1) x (|C|+1), so time
and memory are O(|B|·|C|). That is fine for config-sized files; very large
files pay quadratically.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

Alignment = List[Tuple[int, int]]


def lcs_table(baseline: Sequence[str], candidate: Sequence[str]) -> List[List[int]]:
    """Return the LCS length table; ``table[i][j]`` covers ``baseline[:i]`` vs ``candidate[:j]``."""
    m, n = len(baseline), len(candidate)
    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        row, prev = table[i], table[i - 1]
        b = baseline[i - 1]
        for j in range(1, n + 1):
            if b == candidate[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = prev[j] if prev[j] >= row[j - 1] else row[j - 1]
    return table


def align(baseline: Sequence[str], candidate: Sequence[str]) -> Alignment:
    """Return ``(baseline_index, candidate_index)`` pairs of a longest common subsequence.

    Pairs are ordered and strictly increasing in both indices. On equal scores
    the backtrack steps the baseline index, which keeps matches on the
    earliest baseline lines; identical inputs always give identical output.
    """
    if not baseline or not candidate:
        return []

    table = lcs_table(baseline, candidate)
    pairs: Alignment = []
    i, j = len(baseline), len(candidate)
    while i > 0 and j > 0:
        if baseline[i - 1] == candidate[j - 1]:
            pairs.append((i - 1, j - 1))
            i -= 1
            j -= 1
        elif table[i - 1][j] >= table[i][j - 1]:
            i -= 1
        else:
            j -= 1
    pairs.reverse()
    return pairs

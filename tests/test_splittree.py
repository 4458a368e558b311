"""Tests for inverting booked intervals into free intervals."""

import itertools
import random

import pytest

from roomsearch.splittree import split


def covered(spans):
    minutes = set()
    for a, b in spans:
        minutes.update(range(a, b))
    return minutes


def test_two_bookings_in_a_day():
    result = split((510, 1365), [(600, 645), (900, 945)])
    assert result == [(510, 600), (645, 900), (945, 1365)]


def test_overlapping_exclusions():
    assert split((0, 100), [(10, 50), (40, 80)]) == [(0, 10), (80, 100)]


def test_full_coverage():
    assert split((0, 60), [(0, 60)]) == []


def test_no_exclusions_returns_full_interval():
    assert split((510, 1365), []) == [(510, 1365)]


def test_exclusions_outside_window_are_clamped():
    assert split((100, 200), [(0, 120), (180, 300)]) == [(120, 180)]


def test_disjoint_exclusion_keeps_interval():
    assert split((100, 200), [(0, 50), (250, 300)]) == [(100, 200)]


def test_touching_exclusions_leave_no_gap():
    assert split((0, 100), [(0, 30), (30, 60)]) == [(60, 100)]


def test_empty_and_inverted_exclusions_are_ignored():
    assert split((0, 100), [(50, 50), (80, 20)]) == [(0, 100)]


def test_nested_exclusion_inside_existing_gap():
    assert split((0, 100), [(10, 90), (20, 30)]) == [(0, 10), (90, 100)]


def test_later_exclusion_spanning_several_leaves():
    result = split((0, 100), [(20, 30), (50, 60), (10, 70)])
    assert result == [(0, 10), (70, 100)]


@pytest.mark.parametrize(
    "exclusions",
    [
        [(600, 645), (900, 945), (600, 645)],
        [(515, 700), (650, 1000), (1300, 1400)],
        [(400, 520), (1360, 1500), (700, 710), (705, 800)],
    ],
)
def test_order_independent_and_idempotent(exclusions):
    expected = split((510, 1365), exclusions)
    for permutation in itertools.permutations(exclusions):
        assert split((510, 1365), list(permutation)) == expected
    assert split((510, 1365), exclusions + exclusions) == expected


def test_result_is_window_minus_exclusions():
    rng = random.Random(4)
    window = (510, 1365)
    for _ in range(200):
        exclusions = []
        for _ in range(rng.randint(0, 8)):
            a = rng.randint(400, 1400)
            exclusions.append((a, a + rng.randint(1, 200)))

        result = split(window, exclusions)

        assert covered(result) == covered([window]) - covered(exclusions)
        assert result == sorted(result)
        for (_, b1), (a2, _) in zip(result, result[1:]):
            assert b1 < a2  # disjoint and maximal
        assert all(a < b for a, b in result)

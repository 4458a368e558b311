"""Interval splitting tree used to invert booked intervals into free intervals.

Starting from one full interval, every exclusion splits the leaves it
touches into a left and a right remainder. The non-empty leaves, read
depth-first, are the remaining intervals: sorted and disjoint without any
pre-sorting of the exclusions.
"""

from collections.abc import Iterable


class _Node:
    """A closed-open interval [a, b) that is either a leaf or split in two."""

    __slots__ = ("a", "b", "left", "right", "empty")

    def __init__(self, a: int, b: int) -> None:
        self.a = a
        self.b = b
        self.left: _Node | None = None
        self.right: _Node | None = None
        self.empty = False

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def cut(self, x: int, y: int) -> None:
        """Cut [x, y) out of this leaf."""
        if self.empty:
            return

        if x <= self.a and y >= self.b:
            self.empty = True
            return

        # clamp to the node bounds
        x = max(self.a, min(self.b, x))
        y = min(self.b, max(self.a, y))
        if x >= y:
            # no overlap, leave the leaf untouched
            return

        if x > self.a:
            self.left = _Node(self.a, x)
        if y < self.b:
            self.right = _Node(y, self.b)

    def split(self, x: int, y: int) -> None:
        if self.is_leaf:
            self.cut(x, y)
            return

        if self.left is not None and x < self.left.b:
            self.left.split(x, y)
        if self.right is not None and y > self.right.a:
            self.right.split(x, y)

    def leaves(self, out: list[tuple[int, int]]) -> None:
        if self.empty:
            return
        if self.is_leaf:
            out.append((self.a, self.b))
            return
        if self.left is not None:
            self.left.leaves(out)
        if self.right is not None:
            self.right.leaves(out)


def split(
    interval: tuple[int, int], exclusions: Iterable[tuple[int, int]]
) -> list[tuple[int, int]]:
    """Return the parts of ``interval`` not covered by any of ``exclusions``.

    Exclusions may overlap, repeat, be unordered or reach outside the
    interval. Empty or inverted exclusions are ignored.

    >>> split((510, 1365), [(600, 645), (900, 945)])
    [(510, 600), (645, 900), (945, 1365)]
    """
    a, b = interval
    if a >= b:
        return []

    root = _Node(a, b)
    for x, y in exclusions:
        if x < y:
            root.split(x, y)

    result: list[tuple[int, int]] = []
    root.leaves(result)
    return result

"""Ordering primitives used to sort indices, series and dataframes.

Sorting a Series or a DataFrame never moves data around directly,
it computes an *order*: the list of current positions in the
sequence they should appear after sorting. The order is then applied
to the Index and to every column, which guarantees that all
columns of a DataFrame are permuted in the same way and rows stay
consistent.

Sorting in FrameGround is always deterministic:

* Rows with equal sort keys keep the order of their Index ids,
  whatever the sorting direction is.
* Missing values always go to the end, both when sorting in
  ascending and in descending order.

>>> from frameground.cells import MISSING
>>> value_order([3.0, MISSING, 1.0, 3.0], ids=[0, 1, 2, 3], ascending=False)
[0, 3, 2, 1]
"""

from typing import Any, Sequence

from ..cells import is_missing, sort_key

__all__ = ("stable_order", "value_order", "apply_order")


def stable_order(
    keys: Sequence[Any], ids: Sequence[int], ascending: bool = True
) -> list[int]:
    """Positions that sort ``keys``, ties broken by ascending id.

    The positions are first ordered by id, then sorted by key.
    As Python sorting is stable also when ``reverse=True``,
    entries with equal keys preserve the id ordering in both directions.

    :param keys: The comparable sort key of each entry.
    :param ids: The stable id of each entry, used to break ties.
    :param ascending: If the keys should be sorted smallest first.
    """
    if len(keys) != len(ids):
        raise ValueError("Keys and ids must have the same length")

    order = sorted(range(len(keys)), key=ids.__getitem__)
    order.sort(key=keys.__getitem__, reverse=not ascending)
    return order


def value_order(
    values: Sequence[Any], ids: Sequence[int], ascending: bool = True
) -> list[int]:
    """Positions that sort the cells in ``values``.

    Cells of the same type sort naturally, missing cells are moved
    after all the others and are ordered by id among themselves.
    """
    present = [p for p, v in enumerate(values) if not is_missing(v)]
    missing = [p for p, v in enumerate(values) if is_missing(v)]

    present_order = stable_order(
        [sort_key(values[p]) for p in present],
        [ids[p] for p in present],
        ascending=ascending,
    )
    missing.sort(key=ids.__getitem__)
    return [present[p] for p in present_order] + missing


def apply_order(data: Sequence[Any], order: Sequence[int]) -> list[Any]:
    """Reorder ``data`` picking the entries at the positions listed in ``order``."""
    return [data[p] for p in order]

"""Order statistics in linear time.

Computing the median or the quartiles of a dataset only requires
to know the values at a few positions of the *sorted* dataset,
there is no need to actually sort all of it.

Quickselect finds the k-th smallest element in expected linear time.
It works like quicksort, partitioning the data around a pivot so
that smaller values end on the left and bigger values on the right,
but after each partition it only continues into the side
that contains the position ``k``, discarding the other one.

This module uses Hoare's partition scheme, with the middle element
of the range as the pivot. Suppose we are looking for ``k=2``
(the third smallest value) in::

    [7, 1, 9, 3, 5]

The pivot is ``9`` (the middle element), after the partitioning step
the data is split in ``[7, 1, 5, 3] | [9]``: every value on the left
is less or equal than every value on the right. ``k=2`` is on the left,
so the ``[9]`` part is never looked at again and the left part is
partitioned further, until the range shrinks to the single position ``k``:

>>> quickselect([7, 1, 9, 3, 5], 2)
5

When selection terminates, every value before position ``k``
is less or equal to the selected one and every value after it
is greater or equal. This is what allows to compute the
two middle values of an even length dataset with a single selection:
the lower middle is the biggest value on the left of the upper one.

>>> order_statistics([4.0, 1.0, 3.0, 2.0], [1, 2])
[2.0, 3.0]
"""

from typing import Sequence

__all__ = ("hoare_partition", "quickselect", "order_statistics")


def hoare_partition(data: list[float], lo: int, hi: int) -> int:
    """Partition ``data[lo:hi + 1]`` in place around its middle element.

    Returns the split point ``p``: once done every value in ``data[lo:p + 1]``
    is less or equal to every value in ``data[p + 1:hi + 1]``.
    ``lo <= p < hi`` always holds when ``lo < hi``.
    """
    pivot = data[(lo + hi) // 2]
    i = lo - 1
    j = hi + 1
    while True:
        i += 1
        while data[i] < pivot:
            i += 1
        j -= 1
        while data[j] > pivot:
            j -= 1
        if i >= j:
            return j
        data[i], data[j] = data[j], data[i]


def quickselect(data: list[float], k: int) -> float:
    """Return the ``k``-th smallest value (0 based) of ``data``.

    The list is reordered in place, copy it first if the
    original order matters.
    """
    if not 0 <= k < len(data):
        raise IndexError(f"k={k} is out of range for {len(data)} values")

    lo, hi = 0, len(data) - 1
    while lo < hi:
        split = hoare_partition(data, lo, hi)
        if k <= split:
            hi = split
        else:
            lo = split + 1
    return data[k]


def order_statistics(data: Sequence[float], ranks: Sequence[int]) -> list[float]:
    """Return the values at the given ``ranks`` of the sorted ``data``.

    ``data`` is not modified. Consecutive ranks are resolved
    with a single selection: after selecting rank ``k`` the value
    at rank ``k - 1`` is the biggest one in the left part.
    """
    work = list(data)
    results: dict[int, float] = {}
    for rank in sorted(set(ranks), reverse=True):
        if rank in results:
            continue
        results[rank] = quickselect(work, rank)
        if rank - 1 in ranks and rank > 0:
            results[rank - 1] = max(work[:rank])
    return [results[r] for r in ranks]

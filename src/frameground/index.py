"""Row labels of Series and DataFrames.

An :class:`Index` is an ordered sequence of row descriptors,
each descriptor (a :class:`RowLabel`) holds:

* a stable integer ``id``, assigned when the index is created and
  equal to the original position of the row.
* a tuple of ``labels``, one per level of the index.
  Indices with more than one level allow to identify rows by
  composite keys, like ``("Rome", 2024)``.

The ids are never reassigned: when rows are filtered, sorted or
moved around the id travels with its row. This allows to recognize
the same row across DataFrames derived one from the other.

Labels instead can repeat, so looking up a label might
return more than one row:

>>> idx = Index.from_label_columns([["a", "b", "a"]], ["letter"])
>>> idx.locate("a")
[0, 2]
>>> idx.with_permutation([2, 1, 0]).ids
[2, 1, 0]

Indices are immutable, every operation returns a new Index,
so it's safe to share the same Index between multiple Series.
"""

import functools
from typing import Any, Iterable, Iterator, NamedTuple, Self, Sequence

from .cells import make_key, normalize_cell, sort_key
from .compute.sorting import stable_order
from .errors import DimensionMismatchError, LabelNotFoundError

__all__ = ("Index", "RowLabel")


class RowLabel(NamedTuple):
    """Descriptor of a single row in an :class:`Index`."""

    id: int
    labels: tuple


class Index:
    """Ordered sequence of row descriptors with named levels."""

    def __init__(
        self, rows: Iterable[RowLabel], names: Sequence[str | None]
    ) -> None:
        """
        :param rows: The row descriptors, in order.
        :param names: The name of each level of the index.
        """
        self._rows = tuple(RowLabel(r[0], tuple(r[1])) for r in rows)
        self._names = tuple(names)
        for row in self._rows:
            if len(row.labels) != len(self._names):
                raise DimensionMismatchError(
                    f"row {row.id} has {len(row.labels)} labels, "
                    f"index has {len(self._names)} levels"
                )

    @classmethod
    def range_index(cls, n: int) -> Self:
        """Index of ``n`` rows labeled by their position.

        >>> Index.range_index(3).labels
        [(0,), (1,), (2,)]
        """
        return cls((RowLabel(i, (i,)) for i in range(n)), [None])

    @classmethod
    def from_label_columns(
        cls, columns: Sequence[Sequence[Any]], names: Sequence[str]
    ) -> Self:
        """Build the index from columns of labels.

        Each row gets a label tuple made of the values
        at the same position in every column.

        :param columns: One sequence of labels for each level.
        :param names: The names of the levels.
        """
        if len(columns) != len(names):
            raise DimensionMismatchError(
                f"{len(columns)} label columns provided for {len(names)} names"
            )
        if not columns:
            raise DimensionMismatchError("an index requires at least one level")

        lengths = {len(c) for c in columns}
        if len(lengths) > 1:
            raise DimensionMismatchError(
                f"index label columns have different lengths: {sorted(lengths)}"
            )

        rows = (
            RowLabel(rowid, tuple(normalize_cell(v) for v in labels))
            for rowid, labels in enumerate(zip(*columns))
        )
        return cls(rows, names)

    @staticmethod
    def hash(labels: Iterable[Any]) -> tuple:
        """Composite key of a label tuple.

        Two label tuples have the same key when they
        identify the same row, see :func:`frameground.cells.make_key`.
        """
        return make_key(labels)

    @property
    def names(self) -> list[str | None]:
        return list(self._names)

    @property
    def nlevels(self) -> int:
        return len(self._names)

    @property
    def ids(self) -> list[int]:
        return [r.id for r in self._rows]

    @property
    def labels(self) -> list[tuple]:
        return [r.labels for r in self._rows]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[RowLabel]:
        return iter(self._rows)

    def __getitem__(self, position: int) -> RowLabel:
        return self._rows[position]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Index):
            return NotImplemented
        return self._names == other._names and self._rows == other._rows

    def __hash__(self) -> int:
        return hash((self._names, self._rows))

    def __str__(self) -> str:
        return f"Index(names={list(self._names)}, rows={len(self._rows)})"

    __repr__ = __str__

    def positions(self, labels: Any) -> list[int]:
        """Positions of all the rows labeled by ``labels``.

        For single level indices a scalar label is accepted
        in place of a one element tuple.
        """
        found = self._lookup.get(self.hash(self._as_tuple(labels)))
        if not found:
            raise LabelNotFoundError(f"label {labels!r} not found in index")
        return list(found)

    def locate(self, labels: Any) -> list[int]:
        """Ids of all the rows labeled by ``labels``, in index order."""
        return [self._rows[pos].id for pos in self.positions(labels)]

    def take(self, positions: Iterable[int]) -> Self:
        """New index made of the rows at ``positions``, ids are preserved."""
        return self.__class__((self._rows[p] for p in positions), self._names)

    def with_permutation(self, order: Sequence[int]) -> Self:
        """Reorder the rows, ``order`` lists the current position of each row.

        The ids move together with their labels.
        """
        if sorted(order) != list(range(len(self._rows))):
            raise DimensionMismatchError(
                f"{list(order)} is not a permutation of {len(self._rows)} rows"
            )
        return self.take(order)

    def append(self, other: "Index", id_offset: int) -> Self:
        """Concatenate ``other`` after this index.

        The ids of ``other`` are shifted by ``id_offset``,
        so that merging two indices that both start from 0
        doesn't lead to duplicated ids.
        """
        if other.nlevels != self.nlevels:
            raise DimensionMismatchError(
                f"can't append an index with {other.nlevels} levels "
                f"to one with {self.nlevels} levels"
            )
        shifted = (RowLabel(r.id + id_offset, r.labels) for r in other)
        return self.__class__((*self._rows, *shifted), self._names)

    def rename_levels(self, mapping: dict[str, str]) -> Self:
        """New index where the level names in ``mapping`` are renamed."""
        names = [mapping.get(n, n) if n is not None else None for n in self._names]
        return self.__class__(self._rows, names)

    def sort_order(self, ascending: bool = True) -> list[int]:
        """Positions that would sort the index by its labels.

        Rows with equal labels stay ordered by id.
        """
        return stable_order(
            [tuple(sort_key(v) for v in r.labels) for r in self._rows],
            self.ids,
            ascending=ascending,
        )

    @functools.cached_property
    def _lookup(self) -> dict[tuple, list[int]]:
        # positions of the rows, grouped by label key
        lookup: dict[tuple, list[int]] = {}
        for pos, row in enumerate(self._rows):
            lookup.setdefault(self.hash(row.labels), []).append(pos)
        return lookup

    def _as_tuple(self, labels: Any) -> tuple:
        if isinstance(labels, tuple):
            return labels
        if self.nlevels == 1:
            return (labels,)
        raise DimensionMismatchError(
            f"index has {self.nlevels} levels, a tuple of labels is required"
        )

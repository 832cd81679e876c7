"""Grouping of DataFrame rows.

A :class:`GroupBy` partitions the rows of a DataFrame by the values
of one or more columns. Rows with the same values in those columns,
according to :meth:`frameground.index.Index.hash`, end up in the same group.
Groups are kept in the order their first row appears in the DataFrame.

>>> from frameground import DataFrame
>>> df = DataFrame(
...     [["Pasta", "Pizza", "Pasta", "Pizza"], [5.0, 8.0, 7.0, 10.0]],
...     ["dish", "price"],
... )
>>> grouped = df.group_by("dish")
>>> grouped.groups
{('Pasta',): [0, 2], ('Pizza',): [1, 3]}

Each group can then be aggregated, see :mod:`frameground.compute.aggregate`:

>>> from frameground.compute import mean
>>> grouped.aggregate("price", mean).rows()
[['Pasta', 6.0], ['Pizza', 9.0]]
"""

import logging
from typing import TYPE_CHECKING, Any, Iterator, Sequence

from ..cells import DType
from ..compute.aggregate import StatsFunc, aggregate_many, stats_name
from ..errors import DuplicateColumnError, LabelNotFoundError
from ..index import Index
from ..series import Series

if TYPE_CHECKING:
    from .dataframe import DataFrame

log = logging.getLogger(__name__)


class GroupBy:
    """The rows of a DataFrame partitioned by the values of some columns."""

    def __init__(self, dataframe: "DataFrame", by: Sequence[str]) -> None:
        """
        :param dataframe: The DataFrame whose rows have to be grouped.
        :param by: The names of the columns to group by.
        """
        if not by:
            raise ValueError("At least one column to group by is required")

        self.dataframe = dataframe
        self.labels = list(by)

        keyed = dataframe.select_columns(*by)
        self._keys: list[tuple] = []
        self._positions: dict[tuple, list[int]] = {}
        for pos, row in enumerate(keyed.rows()):
            key = Index.hash(row)
            if key not in self._positions:
                self._keys.append(tuple(row))
                self._positions[key] = []
            self._positions[key].append(pos)
        log.debug("%d rows grouped by %s in %d groups", len(dataframe), self.labels, len(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[tuple[tuple, "DataFrame"]]:
        for key in self._keys:
            yield key, self._group(key)

    @property
    def keys(self) -> list[tuple]:
        """The values identifying each group, in order of appearance."""
        return list(self._keys)

    @property
    def groups(self) -> dict[tuple, list[int]]:
        """The ids of the rows in each group."""
        ids = self.dataframe.index.ids
        return {
            key: [ids[p] for p in self._positions[Index.hash(key)]]
            for key in self._keys
        }

    def get_group(self, key: Any) -> "DataFrame":
        """The rows of a group, as a new DataFrame.

        For groups made by a single column the value
        itself can be provided in place of a tuple.
        """
        if not isinstance(key, tuple):
            key = (key,)
        if Index.hash(key) not in self._positions:
            raise LabelNotFoundError(f"group {key!r} does not exist")
        return self._group(key)

    def _group(self, key: tuple) -> "DataFrame":
        return self.dataframe._take(self._positions[Index.hash(key)])

    def aggregate(
        self, column: str, *funcs: StatsFunc, max_workers: int | None = None
    ) -> "DataFrame":
        """Aggregate the values of ``column`` within each group.

        Returns a DataFrame indexed by the grouping columns,
        with one row per group and one column per aggregation.
        Groups that don't have enough values to be aggregated are missing.

        :param column: The column whose values have to be aggregated.
        :param funcs: The aggregations to apply.
        :param max_workers: Aggregate the groups concurrently using
                            this number of threads.
        """
        if not funcs:
            raise ValueError("At least one aggregation is required")

        names = [stats_name(f) for f in funcs]
        clashing = [n for n in names if names.count(n) > 1 or n in self.labels]
        if clashing:
            raise DuplicateColumnError(f"aggregations produce duplicate columns: {sorted(set(clashing))}")

        values = self.dataframe.column(column).values
        datasets = [[values[p] for p in self._positions[Index.hash(key)]] for key in self._keys]

        index = Index.from_label_columns(
            [[key[level] for key in self._keys] for level in range(len(self.labels))],
            self.labels,
        )
        dtypes = self.dataframe.dtypes
        series = [
            Series([key[level] for key in self._keys], name=label, index=index, dtype=dtypes[label])
            for level, label in enumerate(self.labels)
        ]
        for func, name in zip(funcs, names):
            results = aggregate_many(func, datasets, max_workers=max_workers)
            series.append(Series(results, name=name, index=index, dtype=DType.FLOAT))
        return self.dataframe._from_series(series, index)

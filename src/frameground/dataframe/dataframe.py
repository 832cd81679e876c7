"""The DataFrame object itself."""

import logging
from typing import Any, Iterable, NamedTuple, Self, Sequence

import pyarrow as pa

from ..cells import MISSING, DType, format_cell, make_key
from ..compute.aggregate import SUMMARY, StatsFunc, aggregate_many, stats_name
from ..compute.sorting import apply_order
from ..errors import (
    AmbiguousPivotError,
    ColumnNotFoundError,
    DimensionMismatchError,
    DuplicateColumnError,
    InvalidAxisError,
    SchemaMismatchError,
)
from ..index import Index, RowLabel
from ..series import Series
from ..utils.tabulate import tabulate
from .groupby import GroupBy

log = logging.getLogger(__name__)


def _check_unique(names: Sequence[str]) -> None:
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise DuplicateColumnError(f"duplicate column names: {duplicates}")


class ColumnData(NamedTuple):
    """A column exported for serialization, see :meth:`DataFrame.to_columns`."""

    name: str
    dtype: str
    values: list[Any]


class DataFrame:
    """Data structure that handles data in rows and columns.

    The DataFrame is an ordered collection of :class:`frameground.series.Series`,
    all of the same length and all sharing the same :class:`frameground.index.Index`.

    >>> df = DataFrame(
    ...     [["Flamingo", "Horse", "Centipede"], [2, 4, 100]],
    ...     ["animal", "n_legs"],
    ...     index_columns=["animal"],
    ... )
    >>> df.shape
    (3, 2)
    >>> df.select_rows("Horse").rows()
    [['Horse', 4]]

    Columns used as the index remain available as regular columns.

    Every operation returns a new DataFrame, the original one is
    never modified. The only exceptions are :meth:`rename_col` and
    the sorting methods when ``inplace=True`` is provided, which
    replace the content of the DataFrame they are called on.
    """

    def __init__(
        self,
        columns: Sequence[Sequence[Any]],
        column_names: Sequence[str],
        index_columns: Sequence[str] | None = None,
    ) -> None:
        """
        :param columns: The values of each column, already parsed.
        :param column_names: The name of each column.
        :param index_columns: The columns whose values label the rows,
                              a range index is used if not provided.
        """
        if len(columns) != len(column_names):
            raise DimensionMismatchError(
                f"{len(columns)} columns provided for {len(column_names)} names"
            )
        series = [Series(values, name=name) for values, name in zip(columns, column_names)]
        self._setup(series, index_columns)

    @classmethod
    def from_arrow(
        cls, table: pa.Table | pa.RecordBatch, index_columns: Sequence[str] | None = None
    ) -> Self:
        """Create a DataFrame from a :class:`pyarrow.Table` or :class:`pyarrow.RecordBatch`.

        Arrow types are mapped to the matching dtype,
        nulls become missing values.
        """
        dataframe = cls.__new__(cls)
        dataframe._setup(
            [Series.from_arrow(table.column(i), name=name) for i, name in enumerate(table.column_names)],
            index_columns,
        )
        return dataframe

    @classmethod
    def _from_series(cls, series: Iterable[Series], index: Index) -> Self:
        """Build a DataFrame from Series that already have the right length."""
        dataframe = cls.__new__(cls)
        dataframe._assign(series, index)
        return dataframe

    def _setup(self, series: list[Series], index_columns: Sequence[str] | None) -> None:
        names = [s.name for s in series]
        _check_unique(names)

        lengths = {len(s) for s in series}
        if len(lengths) > 1:
            raise DimensionMismatchError(
                f"columns have different lengths: {sorted(lengths)}"
            )
        nrows = lengths.pop() if lengths else 0

        if isinstance(index_columns, str):
            index_columns = [index_columns]
        if index_columns:
            for name in index_columns:
                if name not in names:
                    raise ColumnNotFoundError(f"index column {name!r} does not exist")
            index = Index.from_label_columns(
                [series[names.index(name)].values for name in index_columns],
                list(index_columns),
            )
        else:
            index = Index.range_index(nrows)

        self._assign(series, index)

    def _assign(self, series: Iterable[Series], index: Index) -> None:
        # Every Series of the DataFrame references the DataFrame index
        # and owns its values.
        series = [Series._from_cells(list(s.values), s.name, s.dtype, index) for s in series]
        columns = [s.name for s in series]
        _check_unique(columns)
        self._series = series
        self._index = index
        self._columns = columns

    def _replace_with(self, other: "DataFrame") -> None:
        self._assign(other._series, other._index)

    def __str__(self) -> str:
        return tabulate(self)

    __repr__ = __str__

    def __len__(self) -> int:
        return len(self._index)

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    @property
    def index(self) -> Index:
        return self._index

    @property
    def series(self) -> list[Series]:
        return list(self._series)

    @property
    def dtypes(self) -> dict[str, DType]:
        return {s.name: s.dtype for s in self._series}

    @property
    def shape(self) -> tuple[int, int]:
        """Number of rows and number of columns."""
        return (len(self._index), len(self._columns))

    def equals(self, other: "DataFrame") -> bool:
        """Same columns, dtypes, values and index."""
        return (
            self._columns == other._columns
            and self._index == other._index
            and all(a.equals(b) for a, b in zip(self._series, other._series))
        )

    # Access to raw data

    def rows(self) -> list[list[Any]]:
        """The data as a list of rows, each row a list of cells."""
        if not self._series:
            return [[] for _ in self._index]
        return [list(row) for row in zip(*(s.values for s in self._series))]

    def records(self) -> list[dict[str, Any]]:
        """The data as a list of ``{column: value}`` dictionaries."""
        return [dict(zip(self._columns, row)) for row in self.rows()]

    def to_columns(self) -> list[ColumnData]:
        """Export the columns for serialization.

        Each column is provided with its name, its dtype
        name and its values, missing values are replaced by ``None``.
        """
        return [
            ColumnData(s.name, s.dtype.value, [None if v is MISSING else v for v in s.values])
            for s in self._series
        ]

    def to_arrow(self) -> pa.Table:
        """Convert the data to a :class:`pyarrow.Table`."""
        return pa.Table.from_arrays(
            [s.to_arrow() for s in self._series], names=self._columns
        )

    # Selection

    def _position(self, name: str) -> int:
        try:
            return self._columns.index(name)
        except ValueError:
            raise ColumnNotFoundError(f"column {name!r} does not exist") from None

    def column(self, name: str) -> Series:
        """The Series of a single column."""
        return self._series[self._position(name)].copy()

    def select_columns(self, *names: str) -> Self:
        """New DataFrame made of the requested columns, in the requested order."""
        selected = [self._series[self._position(name)].copy() for name in names]
        return self._from_series(selected, self._index)

    def _row_positions(self, labels: Sequence[Any]) -> list[int]:
        positions = []
        for label in labels:
            positions.extend(self._index.positions(label))
        return positions

    def _take(self, positions: Sequence[int]) -> Self:
        index = self._index.take(positions)
        return self._from_series(
            (Series._from_cells(apply_order(s.values, positions), s.name, s.dtype, index) for s in self._series),
            index,
        )

    def select_rows(self, *labels: Any) -> Self:
        """New DataFrame with all the rows matching the index ``labels``.

        Each label is a tuple with one value per index level,
        for single level indices the value itself can be provided.
        All the rows matching a label are included, and
        rows are in the same order as the labels.
        """
        return self._take(self._row_positions(labels))

    def select_rows_items(self, *labels: Any) -> list[list[Any]]:
        """Like :meth:`select_rows` but returns the raw rows."""
        return [[s.values[p] for s in self._series] for p in self._row_positions(labels)]

    def loc(self, columns: Sequence[str] | str, *labels: Any) -> Self:
        """Select both columns and rows, see :meth:`select_columns` and :meth:`select_rows`."""
        if isinstance(columns, str):
            columns = [columns]
        return self.select_columns(*columns).select_rows(*labels)

    def head(self, n: int = 5) -> Self:
        """The first ``n`` rows."""
        return self._take(range(min(n, len(self))))

    def tail(self, n: int = 5) -> Self:
        """The last ``n`` rows."""
        return self._take(range(max(len(self) - n, 0), len(self)))

    # Operations on columns

    def _replace_column(self, series: Series) -> Self:
        position = self._position(series.name)
        columns = list(self._series)
        columns[position] = series
        return self._from_series(columns, self._index)

    def col_add(self, colname: str, value: float) -> Self:
        """Add ``value`` to each element of a float column."""
        return self._replace_column(self.column(colname).add(value))

    def col_sub(self, colname: str, value: float) -> Self:
        """Subtract ``value`` from each element of a float column."""
        return self._replace_column(self.column(colname).sub(value))

    def col_mul(self, colname: str, value: float) -> Self:
        """Multiply each element of a float column by ``value``."""
        return self._replace_column(self.column(colname).mul(value))

    def col_div(self, colname: str, value: float) -> Self:
        """Divide each element of a float column by ``value``."""
        return self._replace_column(self.column(colname).div(value))

    def col_mod(self, colname: str, value: float) -> Self:
        """Remainder of the division of each element of a float column by ``value``."""
        return self._replace_column(self.column(colname).mod(value))

    def col_gt(self, colname: str, value: float) -> Self:
        """Replace a float column with the result of ``column > value``."""
        return self._replace_column(self.column(colname).gt(value))

    def col_lt(self, colname: str, value: float) -> Self:
        """Replace a float column with the result of ``column < value``."""
        return self._replace_column(self.column(colname).lt(value))

    def col_eq(self, colname: str, value: float) -> Self:
        """Replace a float column with the result of ``column == value``."""
        return self._replace_column(self.column(colname).eq(value))

    def new_col(self, colname: str, data: Sequence[Any] | None = None) -> Self:
        """Append a new column.

        :param colname: The name of the new column.
        :param data: The values of the column,
                     if ``None`` the column is a float column of missing values.
        """
        if colname in self._columns:
            raise DuplicateColumnError(f"column {colname!r} already exists")
        if data is None:
            series = Series([MISSING] * len(self), name=colname, index=self._index, dtype=DType.FLOAT)
        else:
            series = Series(data, name=colname, index=self._index)
        return self._from_series([*self._series, series], self._index)

    def new_derived_col(self, colname: str, source: str) -> Self:
        """Append a new column that is a copy of the ``source`` column."""
        if colname in self._columns:
            raise DuplicateColumnError(f"column {colname!r} already exists")
        return self._from_series([*self._series, self.column(source).rename(colname)], self._index)

    def rename(self, mapping: dict[str, str]) -> Self:
        """New DataFrame with columns renamed according to ``{old: new}``.

        Index levels with the same name are renamed too.
        """
        for old in mapping:
            self._position(old)

        renamed = [mapping.get(name, name) for name in self._columns]
        return self._from_series(
            [s.rename(name) for s, name in zip(self._series, renamed)],
            self._index.rename_levels(mapping),
        )

    def rename_col(self, mapping: dict[str, str]) -> None:
        """Rename the columns in place, see :meth:`rename`."""
        self._replace_with(self.rename(mapping))

    # Missing data

    def drop_missing(self, axis: int = 0) -> Self:
        """Drop rows (``axis=0``) or columns (``axis=1``) with missing values.

        A row is dropped if any of its cells is missing,
        a column is dropped if any of its cells is missing.
        """
        if axis == 0:
            # Collect all the rows to drop first, then remove them in a single pass.
            dropped = {p for s in self._series for p, v in enumerate(s.values) if v is MISSING}
            return self._take([p for p in range(len(self)) if p not in dropped])
        elif axis == 1:
            return self._from_series((s for s in self._series if not s.has_missing()), self._index)
        raise InvalidAxisError(f"axis can only be either 0 or 1, got {axis!r}")

    # Merging

    def merge_horizontal(self, other: "DataFrame") -> Self:
        """Place the columns of ``other`` at the right of this DataFrame.

        Rows are aligned by position. When one of the two DataFrames
        is shorter its columns are padded with missing values,
        int columns that get padded become float columns.
        The resulting DataFrame has a new range index.
        """
        overlap = [c for c in other._columns if c in self._columns]
        if overlap:
            raise DuplicateColumnError(f"columns exist in both dataframes: {overlap}")

        nrows = max(len(self), len(other))
        index = Index.range_index(nrows)
        return self._from_series(
            [self._padded(s, nrows) for s in (*self._series, *other._series)], index
        )

    @staticmethod
    def _padded(series: Series, nrows: int) -> Series:
        missing = nrows - len(series)
        if missing <= 0:
            return series

        dtype = series.dtype
        values = list(series.values)
        if dtype is DType.INT:
            log.debug("column %r padded with missing values, promoted to float", series.name)
            dtype = DType.FLOAT
            values = [float(v) for v in values]
        values.extend([MISSING] * missing)
        return Series._from_cells(values, series.name, dtype, series.index)

    def merge_vertical(self, other: "DataFrame") -> Self:
        """Append the rows of ``other`` after the rows of this DataFrame.

        Both DataFrames must have the same columns, in the same order
        and with the same dtypes, their indices must have the same
        level names. The ids of the rows of ``other``
        are shifted so that they don't collide with existing ids.
        """
        if self._columns != other._columns:
            raise SchemaMismatchError(
                f"column names do not match: {self._columns} != {other._columns}"
            )
        for mine, theirs in zip(self._series, other._series):
            if mine.dtype is not theirs.dtype:
                raise SchemaMismatchError(
                    f"column {mine.name!r} dtypes do not match: {mine.dtype} != {theirs.dtype}"
                )
        if self._index.names != other._index.names:
            raise SchemaMismatchError(
                f"index levels do not match: {self._index.names} != {other._index.names}"
            )

        # Usually the number of rows, unless rows were filtered or
        # merged, in which case ids might go past the number of rows.
        id_offset = max([len(self), *(i + 1 for i in self._index.ids)])
        index = self._index.append(other._index, id_offset)
        return self._from_series(
            (
                Series._from_cells(mine.values + theirs.values, mine.name, mine.dtype, index)
                for mine, theirs in zip(self._series, other._series)
            ),
            index,
        )

    # Reshaping

    def pivot(self, column: str, value: str) -> Self:
        """Reshape the data using the values of ``column`` as the new columns.

        Rows are identified by the index, each distinct value of ``column``
        becomes a column containing the matching ``value`` for each row.

        >>> df = DataFrame(
        ...     [[1, 1, 2], ["a", "b", "a"], [10, 20, 30]],
        ...     ["id", "cat", "val"],
        ...     index_columns=["id"],
        ... )
        >>> pivoted = df.pivot("cat", "val")
        >>> pivoted.columns, pivoted.rows()
        (['a', 'b'], [[10, 20.0], [30, MISSING]])

        Combinations of index and column that have no value are missing,
        more than one value for the same combination
        raises :class:`frameground.errors.AmbiguousPivotError`.
        """
        column_series = self._series[self._position(column)]
        value_series = self._series[self._position(value)]

        row_numbers: dict[tuple, int] = {}
        row_labels: list[tuple] = []
        new_columns: dict[tuple, str] = {}
        cells: dict[tuple[int, tuple], Any] = {}
        for pos, row in enumerate(self._index):
            row_key = Index.hash(row.labels)
            if row_key not in row_numbers:
                row_numbers[row_key] = len(row_labels)
                row_labels.append(row.labels)

            col_value = column_series.values[pos]
            col_key = make_key((col_value,))
            colname = new_columns.setdefault(col_key, format_cell(col_value))

            cell = (row_numbers[row_key], col_key)
            if cell in cells:
                raise AmbiguousPivotError(
                    f"index {row.labels!r} has more than one value for column {colname!r}"
                )
            cells[cell] = value_series.values[pos]

        index = Index(
            (RowLabel(i, labels) for i, labels in enumerate(row_labels)),
            self._index.names,
        )
        series = []
        for col_key, colname in new_columns.items():
            values = [cells.get((i, col_key), MISSING) for i in range(len(row_labels))]
            dtype = value_series.dtype
            if dtype is DType.INT and any(v is MISSING for v in values):
                dtype = DType.FLOAT
            series.append(Series(values, name=colname, index=index, dtype=dtype))
        return self._from_series(series, index)

    def pivot_table(
        self,
        index: str,
        column: str,
        value: str,
        aggfunc: StatsFunc,
        max_workers: int | None = None,
    ) -> Self:
        """Reshape and aggregate the data.

        Rows are grouped by their ``index`` and ``column`` values,
        the ``value`` of each group is aggregated using ``aggfunc``.
        Each distinct value of ``index`` becomes a row and each distinct
        value of ``column`` becomes a column, both sorted as text.

        Missing values are excluded before aggregating, groups that
        are left without enough values to aggregate are missing.

        :param index: The column providing the labels of the new rows.
        :param column: The column providing the names of the new columns.
        :param value: The column to aggregate.
        :param aggfunc: The aggregation, see :mod:`frameground.compute.aggregate`.
        :param max_workers: Aggregate the groups concurrently using
                            this number of threads.
        """
        index_series = self._series[self._position(index)]
        column_series = self._series[self._position(column)]
        value_series = self._series[self._position(value)]

        groups: dict[tuple, list[Any]] = {}
        index_values: dict[tuple, Any] = {}
        column_names: dict[tuple, str] = {}
        for idx, col, val in zip(index_series.values, column_series.values, value_series.values):
            idx_key, col_key = make_key((idx,)), make_key((col,))
            index_values.setdefault(idx_key, idx)
            column_names.setdefault(col_key, format_cell(col))
            group = groups.setdefault((idx_key, col_key), [])
            if val is not MISSING:
                group.append(val)

        sorted_index = sorted(index_values, key=lambda k: format_cell(index_values[k]))
        sorted_columns = sorted(column_names, key=column_names.__getitem__)

        new_index = Index(
            (RowLabel(i, (index_values[k],)) for i, k in enumerate(sorted_index)),
            [index],
        )
        series = []
        for col_key in sorted_columns:
            results = aggregate_many(
                aggfunc,
                (groups.get((idx_key, col_key), ()) for idx_key in sorted_index),
                max_workers=max_workers,
            )
            series.append(
                Series(results, name=column_names[col_key], index=new_index, dtype=DType.FLOAT)
            )
        return self._from_series(series, new_index)

    def melt(self, column_label: str, value_label: str) -> Self:
        """Reshape the data from wide to long format, the inverse of :meth:`pivot`.

        For each cell a row is emitted, made of the index labels
        of the cell, the name of its column and its value.
        Unnamed index levels are emitted as ``index`` columns.
        """
        level_names = [
            name if name is not None else ("index" if self._index.nlevels == 1 else f"level_{i}")
            for i, name in enumerate(self._index.names)
        ]
        label_columns: list[list[Any]] = [[] for _ in level_names]
        names, values = [], []
        for pos, row in enumerate(self._index):
            for s in self._series:
                for level, label in enumerate(row.labels):
                    label_columns[level].append(label)
                names.append(s.name)
                values.append(s.values[pos])

        return self.__class__(
            [*label_columns, names, values],
            [*level_names, column_label, value_label],
            index_columns=level_names,
        )

    def group_by(self, *by: str) -> GroupBy:
        """Group the rows by the values of the ``by`` columns."""
        return GroupBy(self, by)

    def describe(self, funcs: Sequence[StatsFunc] | None = None, max_workers: int | None = None) -> Self:
        """Summary statistics of the numeric columns.

        Returns a DataFrame with one row for each statistic,
        labeled by the name of the statistic, and one column
        for each int or float column. Statistics that can't be
        computed for a column are missing.
        A numeric column named ``statistic`` clashes with the column
        holding the names of the statistics and raises
        :class:`frameground.errors.DuplicateColumnError`.

        :param funcs: The aggregations to compute,
                      :data:`frameground.compute.aggregate.SUMMARY` by default.
        :param max_workers: Aggregate the columns concurrently using this
                            number of threads.
        """
        funcs = funcs or SUMMARY
        numeric = [s for s in self._series if s.dtype in (DType.INT, DType.FLOAT)]
        names = [stats_name(f) for f in funcs]
        rows = [aggregate_many(f, (s.values for s in numeric), max_workers=max_workers) for f in funcs]

        index = Index.from_label_columns([names], ["statistic"])
        series = [Series(names, name="statistic", index=index, dtype=DType.STRING)]
        for position, column in enumerate(numeric):
            series.append(
                Series([row[position] for row in rows], name=column.name, index=index, dtype=DType.FLOAT)
            )
        return self._from_series(series, index)

    # Sorting

    def _sorted(self, result: Self, inplace: bool) -> Self | None:
        if inplace:
            self._replace_with(result)
            return None
        return result

    def sort_by_index(self, ascending: bool = True, inplace: bool = False) -> Self | None:
        """Sort the rows by their index labels, rows with the same labels keep their id order."""
        return self._sorted(self._take(self._index.sort_order(ascending)), inplace)

    def sort_by_values(self, by: str, ascending: bool = True, inplace: bool = False) -> Self | None:
        """Sort the rows by the values of the ``by`` column.

        Missing values go last, rows with equal values keep their id order.
        """
        sorted_column = self._series[self._position(by)].sort_by_values(ascending)
        index = sorted_column.index
        result = self._from_series(
            (sorted_column if s.name == by else s.reorder_by(index) for s in self._series),
            index,
        )
        return self._sorted(result, inplace)

    def sort_by_columns(self, inplace: bool = False) -> Self | None:
        """Sort the columns by name, rows are not affected."""
        result = self._from_series(sorted(self._series, key=lambda s: s.name), self._index)
        return self._sorted(result, inplace)

    def sort_index_col_first(self, inplace: bool = False) -> Self | None:
        """Move the columns that are index levels before all the other columns."""
        levels = [name for name in self._index.names if name in self._columns]
        first = [self._series[self._position(name)] for name in levels]
        rest = [s for s in self._series if s.name not in levels]
        return self._sorted(self._from_series([*first, *rest], self._index), inplace)

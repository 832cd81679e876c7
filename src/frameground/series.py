"""Typed columns of data.

A :class:`Series` is a named sequence of cells bound to an
:class:`frameground.index.Index` that labels each cell.
All non missing cells of a Series share the same dtype,
which is inferred from the data when the Series is created:

>>> Series([1, 2, 3]).dtype
<DType.INT: 'int'>

Integers have no way to represent a missing value,
so a column of integers with missing values becomes a column of floats:

>>> s = Series([1, None, 3], name="n_legs")
>>> s.dtype, s.to_list()
(<DType.FLOAT: 'float'>, [1.0, MISSING, 3.0])

The inference rules are:

=========================== ==========
Non missing cells           dtype
=========================== ==========
only bool                   bool
only int, nothing missing   int
only int, some missing      float
float (and maybe int)       float
str (and maybe int, float)  string
nothing (all missing)       string
bool mixed with others      error
=========================== ==========

Numbers stored in a string column are converted to text.

Series support element-wise arithmetic and comparisons with a scalar,
but only when their dtype is float. Coercion from int to float only
happens when inferring the dtype or when merging DataFrames, never
implicitly during arithmetic.
"""

import math
import operator
from typing import Any, Callable, Iterable, Iterator, Self, Sequence

import pyarrow as pa

from .cells import (
    MISSING,
    DType,
    classify,
    coerce,
    normalize_cell,
)
from .compute.aggregate import StatsFunc, StatsResult
from .compute.sorting import apply_order, value_order
from .errors import (
    DimensionMismatchError,
    InvalidColumnTypeError,
    LabelNotFoundError,
    TypeMismatchError,
)
from .index import Index

__all__ = ("Series", "infer_dtype", "ARROW_TYPES")

ARROW_TYPES = {
    DType.BOOL: pa.bool_(),
    DType.INT: pa.int64(),
    DType.FLOAT: pa.float64(),
    DType.STRING: pa.string(),
}
"""The Arrow type used to export each dtype."""


def infer_dtype(cells: Iterable[Any]) -> DType:
    """Infer the dtype of a sequence of normalized cells."""
    kinds = set()
    has_missing = False
    for cell in cells:
        kind = classify(cell)
        if kind is None:
            has_missing = True
        else:
            kinds.add(kind)

    if not kinds:
        return DType.STRING
    if DType.BOOL in kinds:
        if len(kinds) > 1:
            raise InvalidColumnTypeError(
                "booleans can't be mixed with other types: "
                + ", ".join(sorted(str(k) for k in kinds))
            )
        return DType.BOOL
    if DType.STRING in kinds:
        return DType.STRING
    if DType.FLOAT in kinds or has_missing:
        return DType.FLOAT
    return DType.INT


def dtype_from_arrow(arrow_type: pa.DataType) -> DType | None:
    """The dtype matching an Arrow type, ``None`` if there is none."""
    if pa.types.is_boolean(arrow_type):
        return DType.BOOL
    if pa.types.is_integer(arrow_type):
        return DType.INT
    if pa.types.is_floating(arrow_type) or pa.types.is_decimal(arrow_type):
        return DType.FLOAT
    if pa.types.is_string(arrow_type) or pa.types.is_large_string(arrow_type):
        return DType.STRING
    return None


class Series:
    """A named and typed column of cells with its row labels."""

    def __init__(
        self,
        values: Iterable[Any],
        name: str | None = None,
        index: Index | None = None,
        dtype: DType | str | None = None,
    ) -> None:
        """
        :param values: The cells of the Series.
        :param name: The name of the Series, usually the column name.
        :param index: The row labels, a range index if not provided.
        :param dtype: Force a dtype instead of inferring it,
                      values are converted to the dtype when possible.
        """
        cells = [normalize_cell(v) for v in values]
        if dtype is None:
            dtype = infer_dtype(cells)
        else:
            dtype = DType(dtype)

        if index is None:
            index = Index.range_index(len(cells))
        if len(index) != len(cells):
            raise DimensionMismatchError(
                f"{len(cells)} values provided for an index of {len(index)} rows"
            )

        self.name = name
        self.dtype = dtype
        self.values = [coerce(c, dtype) for c in cells]
        self.index = index

    @classmethod
    def _from_cells(
        cls, values: list[Any], name: str | None, dtype: DType, index: Index
    ) -> Self:
        """Build a Series from cells that already fit ``dtype``."""
        series = cls.__new__(cls)
        series.name = name
        series.dtype = dtype
        series.values = values
        series.index = index
        return series

    @classmethod
    def from_arrow(
        cls,
        array: pa.Array | pa.ChunkedArray,
        name: str | None = None,
        index: Index | None = None,
    ) -> Self:
        """Create a Series from a pyarrow Array.

        Arrow types without a matching dtype (dates, timestamps, ...)
        are converted to text.
        """
        if pa.types.is_decimal(array.type):
            array = array.cast(pa.float64())

        dtype = dtype_from_arrow(array.type)
        if dtype is None:
            try:
                array = array.cast(pa.string())
            except (pa.ArrowInvalid, pa.ArrowNotImplementedError) as e:
                raise InvalidColumnTypeError(
                    f"unsupported arrow type {array.type} for column {name}"
                ) from e
            dtype = DType.STRING
        elif dtype is DType.INT and array.null_count:
            dtype = DType.FLOAT
        return cls(array.to_pylist(), name=name, index=index, dtype=dtype)

    def __str__(self) -> str:
        return f"Series(name={self.name!r}, dtype={self.dtype}, rows={len(self.values)})"

    __repr__ = __str__

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def __getitem__(self, position: int) -> Any:
        return self.values[position]

    def equals(self, other: "Series") -> bool:
        """Same name, dtype, values and index."""
        return (
            self.name == other.name
            and self.dtype is other.dtype
            and self.values == other.values
            and self.index == other.index
        )

    def copy(self) -> Self:
        return self._from_cells(list(self.values), self.name, self.dtype, self.index)

    def rename(self, name: str) -> Self:
        """A copy of the Series with a different name."""
        return self._from_cells(list(self.values), name, self.dtype, self.index)

    def to_list(self) -> list[Any]:
        return list(self.values)

    def to_arrow(self) -> pa.Array:
        """Convert the values to a pyarrow Array, missing values become nulls."""
        return pa.array(
            [None if v is MISSING else v for v in self.values],
            type=ARROW_TYPES[self.dtype],
        )

    def missing_count(self) -> int:
        return sum(1 for v in self.values if v is MISSING)

    def has_missing(self) -> bool:
        return any(v is MISSING for v in self.values)

    def aggregate(self, func: StatsFunc, **options: Any) -> StatsResult:
        """Compute a statistic over the values, see :mod:`frameground.compute.aggregate`."""
        return func(self.values, **options)

    # Label based access

    def positions(self, *labels: Any) -> list[int]:
        """Positions of the rows matching each of the ``labels``, in order."""
        positions = []
        for label in labels:
            positions.extend(self.index.positions(label))
        return positions

    def loc(self, *labels: Any) -> Self:
        """New Series with all the rows matching any of the ``labels``.

        Rows are returned grouped by label, in the order the labels are provided.
        """
        positions = self.positions(*labels)
        return self._from_cells(
            apply_order(self.values, positions),
            self.name,
            self.dtype,
            self.index.take(positions),
        )

    def loc_items(self, *labels: Any) -> list[Any]:
        """The values of the rows matching the ``labels``."""
        return apply_order(self.values, self.positions(*labels))

    # Arithmetic and comparisons

    def _check_numeric(self, operation: str, value: Any) -> None:
        if self.dtype is not DType.FLOAT:
            raise TypeMismatchError(
                f"cannot {operation} column {self.name!r}, "
                f"column data type is {self.dtype} not float"
            )
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeMismatchError(f"cannot {operation} by {value!r}, not a number")

    def _arithmetic(
        self, operation: str, func: Callable[[float, float], float], value: float
    ) -> Self:
        self._check_numeric(operation, value)
        values = [
            MISSING if v is MISSING else normalize_cell(func(v, value))
            for v in self.values
        ]
        return self._from_cells(values, self.name, DType.FLOAT, self.index)

    def _comparison(
        self, operation: str, func: Callable[[float, float], bool], value: float
    ) -> Self:
        self._check_numeric(operation, value)
        values = [MISSING if v is MISSING else func(v, value) for v in self.values]
        return self._from_cells(values, self.name, DType.BOOL, self.index)

    def add(self, value: float) -> Self:
        return self._arithmetic("add", operator.add, value)

    def sub(self, value: float) -> Self:
        return self._arithmetic("subtract", operator.sub, value)

    def mul(self, value: float) -> Self:
        return self._arithmetic("multiply", operator.mul, value)

    def div(self, value: float) -> Self:
        return self._arithmetic("divide", operator.truediv, value)

    def mod(self, value: float) -> Self:
        """Remainder of the division, with the sign of the dividend."""
        return self._arithmetic("use modulus", math.fmod, value)

    def gt(self, value: float) -> Self:
        return self._comparison("compare", operator.gt, value)

    def lt(self, value: float) -> Self:
        return self._comparison("compare", operator.lt, value)

    def eq(self, value: float) -> Self:
        return self._comparison("compare", operator.eq, value)

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __truediv__ = div
    __mod__ = mod
    __gt__ = gt
    __lt__ = lt

    # Sorting

    def _reordered(self, order: Sequence[int]) -> Self:
        return self._from_cells(
            apply_order(self.values, order),
            self.name,
            self.dtype,
            self.index.with_permutation(order),
        )

    def sort_by_values(self, ascending: bool = True) -> Self:
        """Sort by value, missing values last and ties ordered by id."""
        return self._reordered(value_order(self.values, self.index.ids, ascending))

    def sort_by_index(self, ascending: bool = True) -> Self:
        """Sort by the index labels, ties ordered by id."""
        return self._reordered(self.index.sort_order(ascending))

    def reorder_by(self, index: Index) -> Self:
        """Reorder the values to follow the rows of ``index``.

        ``index`` must contain the same ids of the Series index,
        usually it's the index of another Series that was sorted.
        The returned Series adopts ``index`` as its own.
        """
        if len(index) != len(self.index):
            raise DimensionMismatchError(
                f"can't reorder {len(self.index)} rows by an index of {len(index)} rows"
            )

        positions_by_id: dict[int, list[int]] = {}
        for pos, rowid in enumerate(self.index.ids):
            positions_by_id.setdefault(rowid, []).append(pos)

        order = []
        for rowid in index.ids:
            candidates = positions_by_id.get(rowid)
            if not candidates:
                raise LabelNotFoundError(f"row id {rowid} not found in {self}")
            order.append(candidates.pop(0))

        return self._from_cells(
            apply_order(self.values, order), self.name, self.dtype, index
        )

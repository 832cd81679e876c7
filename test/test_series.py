import decimal

import pyarrow as pa
import pytest

from frameground.cells import MISSING, DType
from frameground.compute import mean
from frameground.errors import (
    DimensionMismatchError,
    InvalidColumnTypeError,
    LabelNotFoundError,
    TypeMismatchError,
)
from frameground.index import Index
from frameground.series import Series, infer_dtype


@pytest.mark.parametrize(
    "values,dtype",
    [
        ([True, False, MISSING], DType.BOOL),
        ([1, 2, 3], DType.INT),
        ([1, MISSING, 3], DType.FLOAT),
        ([1, 2.5], DType.FLOAT),
        (["a", 1, 2.5], DType.STRING),
        ([MISSING, MISSING], DType.STRING),
        ([], DType.STRING),
    ],
)
def test_infer_dtype(values, dtype):
    assert infer_dtype(values) is dtype


def test_infer_dtype_refuses_mixed_bools():
    with pytest.raises(InvalidColumnTypeError):
        infer_dtype([True, 1])


def test_series_construction():
    s = Series([1, None, 3], name="n_legs")
    assert s.dtype is DType.FLOAT
    assert s.values == [1.0, MISSING, 3.0]
    assert s.index.ids == [0, 1, 2]
    assert str(s) == "Series(name='n_legs', dtype=float, rows=3)"


def test_series_numbers_in_string_column():
    s = Series(["x", 1, 2.5, ""])
    assert s.values == ["x", "1", "2.5", MISSING]


def test_series_forced_dtype():
    s = Series([1, 2], dtype=DType.FLOAT)
    assert s.values == [1.0, 2.0]
    assert all(isinstance(v, float) for v in s.values)

    with pytest.raises(InvalidColumnTypeError):
        Series(["a"], dtype="float")


def test_series_index_mismatch():
    with pytest.raises(DimensionMismatchError):
        Series([1, 2, 3], index=Index.range_index(2))


def test_series_from_arrow():
    s = Series.from_arrow(pa.array([1, None, 3]), name="n")
    assert s.dtype is DType.FLOAT
    assert s.values == [1.0, MISSING, 3.0]

    s = Series.from_arrow(pa.array([1, 2]), name="n")
    assert s.dtype is DType.INT

    s = Series.from_arrow(pa.array([None, None], type=pa.float64()))
    assert s.dtype is DType.FLOAT
    assert s.values == [MISSING, MISSING]

    s = Series.from_arrow(pa.array([decimal.Decimal("1.25")]))
    assert s.dtype is DType.FLOAT
    assert s.values == [1.25]


def test_series_to_arrow():
    s = Series([1.5, MISSING])
    array = s.to_arrow()
    assert array.type == pa.float64()
    assert array.to_pylist() == [1.5, None]


def test_series_missing():
    s = Series([1.0, MISSING, MISSING])
    assert s.missing_count() == 2
    assert s.has_missing()
    assert not Series([1, 2]).has_missing()


def test_series_loc():
    idx = Index.from_label_columns([["a", "b", "a"]], ["letter"])
    s = Series([1, 2, 3], name="n", index=idx)

    assert s.loc("a").values == [1, 3]
    assert s.loc("a").index.ids == [0, 2]
    assert s.loc("b", "a").values == [2, 1, 3]
    assert s.loc_items("b") == [2]

    with pytest.raises(LabelNotFoundError):
        s.loc("z")


def test_series_arithmetic():
    s = Series([1.0, MISSING, -4.0], name="x")
    assert s.add(1).values == [2.0, MISSING, -3.0]
    assert s.sub(1).values == [0.0, MISSING, -5.0]
    assert s.mul(2).values == [2.0, MISSING, -8.0]
    assert s.div(2).values == [0.5, MISSING, -2.0]
    assert s.mod(3).values == [1.0, MISSING, -1.0]
    assert (s + 1).values == [2.0, MISSING, -3.0]
    # the original series is untouched
    assert s.values == [1.0, MISSING, -4.0]


def test_series_comparisons():
    s = Series([1.0, MISSING, 3.0])
    gt = s.gt(2)
    assert gt.dtype is DType.BOOL
    assert gt.values == [False, MISSING, True]
    assert s.lt(2).values == [True, MISSING, False]
    assert s.eq(3).values == [False, MISSING, True]
    assert (s > 2).values == [False, MISSING, True]


@pytest.mark.parametrize("values", [[1, 2], ["a", "b"], [True, False]])
def test_series_arithmetic_requires_floats(values):
    with pytest.raises(TypeMismatchError):
        Series(values).add(1)


@pytest.mark.parametrize("value", ["1", True, None])
def test_series_arithmetic_requires_numbers(value):
    with pytest.raises(TypeMismatchError):
        Series([1.0]).mul(value)


def test_series_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        Series([1.0]).div(0)


def test_series_sort_by_values():
    s = Series([3.0, MISSING, 1.0, 3.0], name="x")

    ascending = s.sort_by_values()
    assert ascending.values == [1.0, 3.0, 3.0, MISSING]
    assert ascending.index.ids == [2, 0, 3, 1]

    descending = s.sort_by_values(ascending=False)
    assert descending.values == [3.0, 3.0, 1.0, MISSING]
    assert descending.index.ids == [0, 3, 2, 1]


def test_series_sort_by_index():
    idx = Index.from_label_columns([["c", "a", "b"]], ["letter"])
    s = Series([1, 2, 3], index=idx)
    assert s.sort_by_index().values == [2, 3, 1]
    assert s.sort_by_index(ascending=False).values == [1, 3, 2]


def test_series_reorder_by():
    letters = Series(["c", "a", "b"], name="letter")
    numbers = Series([1, 2, 3], name="n")

    ordered = numbers.reorder_by(letters.sort_by_values().index)
    assert ordered.values == [2, 3, 1]
    assert ordered.index.ids == [1, 2, 0]

    with pytest.raises(DimensionMismatchError):
        numbers.reorder_by(Index.range_index(2))

    with pytest.raises(LabelNotFoundError):
        numbers.reorder_by(Index.range_index(3).take([0, 1, 1]))


def test_series_aggregate():
    assert Series([1, 2, 3, 4]).aggregate(mean).result == 2.5


def test_series_equals():
    assert Series([1, 2], name="a").equals(Series([1, 2], name="a"))
    assert not Series([1, 2], name="a").equals(Series([1.0, 2.0], name="a"))
    assert not Series([1, 2], name="a").equals(Series([1, 2], name="b"))

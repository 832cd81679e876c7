import math
import pickle

import pytest

from frameground.cells import (
    MISSING,
    DType,
    Missing,
    classify,
    coerce,
    format_cell,
    is_missing,
    make_key,
    normalize_cell,
    sort_key,
)
from frameground.errors import InvalidColumnTypeError


@pytest.mark.parametrize("value", [None, float("nan"), "", MISSING])
def test_normalize_missing(value):
    assert normalize_cell(value) is MISSING


@pytest.mark.parametrize("value", [True, 0, -3, 2.5, "hello"])
def test_normalize_keeps_values(value):
    assert normalize_cell(value) == value
    assert type(normalize_cell(value)) is type(value)


def test_normalize_refuses_unknown_types():
    with pytest.raises(InvalidColumnTypeError):
        normalize_cell(object())

    with pytest.raises(InvalidColumnTypeError):
        normalize_cell([1, 2])


def test_missing_is_a_singleton():
    assert Missing() is MISSING
    assert pickle.loads(pickle.dumps(MISSING)) is MISSING
    assert repr(MISSING) == "MISSING"
    assert not MISSING


def test_is_missing():
    assert is_missing(MISSING)
    assert is_missing(None)
    assert is_missing(math.nan)
    assert not is_missing(0.0)
    assert not is_missing("")


def test_classify():
    assert classify(True) is DType.BOOL
    assert classify(1) is DType.INT
    assert classify(1.0) is DType.FLOAT
    assert classify("1") is DType.STRING
    assert classify(MISSING) is None


def test_coerce():
    assert coerce(1, DType.FLOAT) == 1.0
    assert isinstance(coerce(1, DType.FLOAT), float)
    assert coerce(2.5, DType.STRING) == "2.5"
    assert coerce(MISSING, DType.FLOAT) is MISSING


@pytest.mark.parametrize(
    "cell,dtype",
    [(MISSING, DType.INT), (True, DType.INT), ("a", DType.FLOAT), (1.5, DType.INT)],
)
def test_coerce_refused(cell, dtype):
    with pytest.raises(InvalidColumnTypeError):
        coerce(cell, dtype)


def test_keys():
    assert make_key((1, "a")) == make_key((1.0, "a"))
    assert make_key((True,)) != make_key((1,))
    assert make_key(("1",)) != make_key((1,))
    assert make_key((MISSING,)) == make_key((None,))
    assert hash(make_key((2, MISSING))) == hash(make_key((2.0, MISSING)))


@pytest.mark.parametrize(
    "cell,text",
    [
        (True, "true"),
        (False, "false"),
        (10, "10"),
        (10.0, "10"),
        (0.1, "0.1"),
        (1.5e20, "1.5e+20"),
        (0.1 + 0.2, "0.30000000000000004"),
        ("Rome", "Rome"),
        (MISSING, "NaN"),
    ],
)
def test_format_cell(cell, text):
    assert format_cell(cell) == text


def test_sort_key_orders_types():
    cells = ["b", MISSING, 2.5, True, 1, "a"]
    assert sorted(cells, key=sort_key) == [True, 1, 2.5, "a", "b", MISSING]

import pytest

from frameground import DataFrame
from frameground.cells import MISSING, DType
from frameground.compute import count, maximum, mean, median, std
from frameground.errors import (
    ColumnNotFoundError,
    DuplicateColumnError,
    LabelNotFoundError,
    TypeMismatchError,
)

TEST_DATA = DataFrame(
    [
        ["New York", "New York", "Los Angeles", "Los Angeles", "New York"],
        ["Shop A", "Shop B", "Shop A", "Shop A2", "Shop B"],
        [10, 15, 8, 12, 20],
        [2.5, None, 4.0, 1.0, 3.5],
    ],
    ["city", "shop", "n_employees", "rating"],
)


def test_groups():
    grouped = TEST_DATA.group_by("city")
    assert len(grouped) == 2
    assert grouped.labels == ["city"]
    assert grouped.keys == [("New York",), ("Los Angeles",)]
    assert grouped.groups == {("New York",): [0, 1, 4], ("Los Angeles",): [2, 3]}


def test_groups_multiple_columns():
    grouped = TEST_DATA.group_by("city", "shop")
    assert grouped.keys == [
        ("New York", "Shop A"),
        ("New York", "Shop B"),
        ("Los Angeles", "Shop A"),
        ("Los Angeles", "Shop A2"),
    ]
    assert grouped.groups[("New York", "Shop B")] == [1, 4]


def test_groups_keep_ids():
    grouped = TEST_DATA.sort_by_values("n_employees").group_by("city")
    assert grouped.keys == [("Los Angeles",), ("New York",)]
    assert grouped.groups == {("Los Angeles",): [2, 3], ("New York",): [0, 1, 4]}


def test_groups_by_numeric_value():
    df = DataFrame([[1.0, 1.0, 2.0], ["a", "b", "c"]], ["k", "v"])
    assert df.group_by("k").groups == {(1.0,): [0, 1], (2.0,): [2]}
    assert df.group_by("k").get_group(1).column("v").values == ["a", "b"]


def test_get_group():
    grouped = TEST_DATA.group_by("city")
    group = grouped.get_group("Los Angeles")
    assert group.columns == TEST_DATA.columns
    assert group.column("shop").values == ["Shop A", "Shop A2"]
    assert group.index.ids == [2, 3]

    assert grouped.get_group(("New York",)).shape == (3, 4)

    with pytest.raises(LabelNotFoundError):
        grouped.get_group("Chicago")


def test_iterate_groups():
    groups = {key: df.column("n_employees").values for key, df in TEST_DATA.group_by("city")}
    assert groups == {("New York",): [10, 15, 20], ("Los Angeles",): [8, 12]}


def test_group_by_unknown_column():
    with pytest.raises(ColumnNotFoundError):
        TEST_DATA.group_by("country")

    with pytest.raises(ValueError):
        TEST_DATA.group_by()


@pytest.mark.parametrize("max_workers", [None, 3])
def test_aggregate(max_workers):
    result = TEST_DATA.group_by("city").aggregate(
        "n_employees", count, mean, maximum, max_workers=max_workers
    )
    assert result.columns == ["city", "Count", "Mean", "Max"]
    assert result.index.names == ["city"]
    assert result.dtypes["Mean"] is DType.FLOAT
    assert result.rows() == [
        ["New York", 3.0, 15.0, 20.0],
        ["Los Angeles", 2.0, 10.0, 12.0],
    ]
    assert result.select_rows("Los Angeles").column("Mean").values == [10.0]


def test_aggregate_missing_values():
    result = TEST_DATA.group_by("city", "shop").aggregate("rating", median, std)
    assert result.index.names == ["city", "shop"]
    assert result.rows() == [
        ["New York", "Shop A", 2.5, MISSING],
        ["New York", "Shop B", 3.5, MISSING],
        ["Los Angeles", "Shop A", 4.0, MISSING],
        ["Los Angeles", "Shop A2", 1.0, MISSING],
    ]


def test_aggregate_errors():
    grouped = TEST_DATA.group_by("city")

    with pytest.raises(ValueError):
        grouped.aggregate("n_employees")

    with pytest.raises(DuplicateColumnError):
        grouped.aggregate("n_employees", mean, mean)

    with pytest.raises(ColumnNotFoundError):
        grouped.aggregate("revenue", mean)

    with pytest.raises(TypeMismatchError):
        grouped.aggregate("shop", mean)

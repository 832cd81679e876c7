from frameground import DataFrame
from frameground.compute import mean
from frameground.utils.tabulate import format_value, tabulate


def test_tabulate_truncates_rows():
    df = DataFrame([list(range(25))], ["n"])
    lines = tabulate(df, max_rows=3).splitlines()
    assert lines == ["n", "-", "0", "1", "2", "... and 22 more rows"]


def test_tabulate_prints_index_levels():
    df = DataFrame(
        [["North", "South", "North"], ["TV", "TV", "Car"], [2.0, 4.0, 6.0]],
        ["Region", "Product", "Quantity"],
    )
    table = df.pivot_table("Region", "Product", "Quantity", mean)
    assert tabulate(table).splitlines() == [
        "Region | Car  | TV  ",
        "------ | ---- | ----",
        "North  | 6.00 | 2.00",
        "South  | NaN  | 4.00",
    ]


def test_tabulate_skips_range_index():
    df = DataFrame([[True, False]], ["flag"])
    assert tabulate(df).splitlines() == ["flag ", "-----", "true ", "false"]


def test_format_value():
    assert format_value(1.0 / 3) == "0.33"
    assert format_value(True) == "true"
    assert format_value(7) == "7"
    assert format_value("x" * 40) == "x" * 27 + "..."

import random
import statistics

import pytest

from frameground.cells import MISSING
from frameground.compute.aggregate import (
    AGGREGATIONS,
    QUICKSELECT_THRESHOLD,
    SUMMARY,
    StatsResult,
    aggregate_many,
    aggregate_or_missing,
    count,
    maximum,
    mean,
    median,
    minimum,
    q1,
    q2,
    q3,
    round_half_away,
    stats_name,
    std,
)
from frameground.errors import EmptyDatasetError, InsufficientDataError, TypeMismatchError


def test_mean():
    assert mean([1.0, 2.0, 3.0, 4.0]) == StatsResult("Mean", 2.5)
    assert mean([1, 2, 2]).result == 1.667


def test_median():
    assert median([1, 2, 3, 4]) == StatsResult("Median", 2.5)
    assert median([1, 2, 3]).result == 2
    assert median([9.0, -1.0, 3.5]).result == 3.5


def test_q2_is_median():
    assert q2([4, 1, 3, 2]) == StatsResult("Q2", 2.5)


def test_std():
    assert std([2, 4, 4, 4, 5, 5, 7, 9]) == StatsResult("Std", 2.138)
    assert std([1.0, 1.0]).result == 0.0

    with pytest.raises(InsufficientDataError):
        std([1.0])


def test_count():
    assert count([1.0, MISSING, 3.0]) == StatsResult("Count", 2.0)
    assert count(["a", "b", MISSING]).result == 2.0
    assert count([]).result == 0.0
    assert count([MISSING]).result == 0.0


def test_min_max():
    assert minimum([3.0, 1.0, 2.0]) == StatsResult("Min", 1.0)
    assert maximum([3.0, 1.0, 2.0]) == StatsResult("Max", 3.0)


def test_min_max_all_negatives():
    assert minimum([-5.0, -1.0, -9.0]).result == -9.0
    assert maximum([-5.0, -1.0, -9.0]).result == -1.0
    assert maximum([-5.0, -2.0, -9.0]).result == -2.0
    assert minimum([-5.0, -2.0, -9.0]).result == -9.0
    assert minimum([5.0, 7.0, 9.0]).result == 5.0


@pytest.mark.parametrize(
    "data,expected_q1,expected_q3",
    [
        ([1, 2, 3, 4], 1.5, 3.5),
        ([1, 2, 3, 4, 5], 1.5, 4.5),
        ([5, 1, 4, 2, 3, 6], 2, 5),
        ([7, 1], 1, 7),
    ],
)
def test_quartiles(data, expected_q1, expected_q3):
    assert q1(data) == StatsResult("Q1", expected_q1)
    assert q3(data) == StatsResult("Q3", expected_q3)


def test_quartiles_not_enough_values():
    with pytest.raises(InsufficientDataError):
        q1([1.0])

    with pytest.raises(InsufficientDataError):
        q3([1.0])


def test_missing_values_are_ignored():
    assert mean([1.0, MISSING, 3.0]).result == 2.0
    assert median([MISSING, 5.0, 1.0]).result == 3.0
    assert maximum([MISSING, -1.0]).result == -1.0


@pytest.mark.parametrize("func", [mean, std, minimum, maximum, median, q1, q3])
def test_empty_dataset(func):
    with pytest.raises(EmptyDatasetError):
        func([])

    with pytest.raises(EmptyDatasetError):
        func([MISSING, MISSING])


@pytest.mark.parametrize("func", [mean, median, maximum])
@pytest.mark.parametrize("dataset", [["a", "b"], [True, False]])
def test_only_numbers_can_be_aggregated(func, dataset):
    with pytest.raises(TypeMismatchError):
        func(dataset)


@pytest.mark.parametrize("func", [median, q1, q3])
def test_order_statistics_methods_agree(func):
    rnd = random.Random(7)
    for size in range(1, 61):
        data = [rnd.choice([rnd.randint(-20, 20), rnd.uniform(-100, 100)]) for _ in range(size)]
        try:
            expected = func(data, method="sort")
        except InsufficientDataError:
            with pytest.raises(InsufficientDataError):
                func(data, method="quickselect")
            continue
        assert func(data, method="quickselect") == expected
        assert func(data) == expected


def test_median_matches_statistics():
    rnd = random.Random(3)
    data = [rnd.uniform(0, 1000) for _ in range(QUICKSELECT_THRESHOLD * 4 + 1)]
    assert median(data).result == round_half_away(statistics.median(data))


def test_median_unknown_method():
    with pytest.raises(ValueError):
        median([1.0, 2.0], method="guess")


def test_aggregation_does_not_modify_input():
    data = [5.0, 3.0, 1.0, 4.0] * 50
    original = list(data)
    median(data, method="quickselect")
    q3(data, method="quickselect")
    assert data == original


@pytest.mark.parametrize(
    "value,expected",
    [
        (2.0625, 2.063),
        (2.0624, 2.062),
        (-0.0005, -0.001),
        (1.0, 1.0),
        (1e300, 1e300),
        (float("inf"), float("inf")),
    ],
)
def test_round_half_away(value, expected):
    assert round_half_away(value) == expected


def test_aggregate_or_missing():
    assert aggregate_or_missing(mean, [1.0, 2.0]) == 1.5
    assert aggregate_or_missing(mean, []) is MISSING
    assert aggregate_or_missing(std, [1.0]) is MISSING

    with pytest.raises(TypeMismatchError):
        aggregate_or_missing(mean, ["a"])


@pytest.mark.parametrize("max_workers", [None, 1, 4])
def test_aggregate_many(max_workers):
    datasets = [[1.0, 2.0], [], [5.0], [MISSING, 3.0, 4.0]]
    assert aggregate_many(mean, datasets, max_workers=max_workers) == [
        1.5,
        MISSING,
        5.0,
        3.5,
    ]


def test_aggregate_many_preserves_order():
    datasets = [[float(i)] * (i + 1) for i in range(200)]
    assert aggregate_many(maximum, datasets, max_workers=8) == [float(i) for i in range(200)]


def test_custom_aggregation():
    def total(dataset):
        return StatsResult("Total", float(sum(v for v in dataset if v is not MISSING)))

    assert stats_name(total) == "total"
    assert stats_name(mean) == "Mean"
    assert aggregate_many(total, [[1, 2], [MISSING]]) == [3.0, 0.0]


def test_registries():
    assert [stats_name(f) for f in SUMMARY] == [
        "Count",
        "Mean",
        "Std",
        "Min",
        "Q1",
        "Median",
        "Q3",
        "Max",
    ]
    assert sorted(AGGREGATIONS) == [
        "count",
        "max",
        "mean",
        "median",
        "min",
        "q1",
        "q2",
        "q3",
        "std",
    ]
    assert str(q3) == "QuartileAggregation(upper=True)"
    assert str(mean) == "MeanAggregation()"

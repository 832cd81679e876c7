"""Aggregations computing statistics over a column of data.

Frequently when analysing data is necessary
to compute statistics like the min, max, average, etc...
of the values stored in a column, or of the values of
a column within a group of rows.

Every aggregation is a callable that accepts a sequence of cells
and returns a :class:`StatsResult` with the name of the statistic
and its value:

>>> mean([1.0, 2.0, 3.0, 4.0])
StatsResult(name='Mean', result=2.5)

Missing values are always discarded before computing the statistic:

>>> from frameground.cells import MISSING
>>> median([1, MISSING, 3, 2])
StatsResult(name='Median', result=2.0)

When no value is left to aggregate :class:`EmptyDatasetError` is raised,
except by :data:`count` which just counts zero values. Aggregating
text or booleans raises :class:`TypeMismatchError`.

The provided aggregations are:

* :data:`count`: number of non missing values.
* :data:`mean`: arithmetic mean, rounded to 3 decimals.
* :data:`std`: sample standard deviation (``n - 1`` denominator), rounded to 3 decimals.
* :data:`minimum` and :data:`maximum`
* :data:`median` (also available as :data:`q2`), rounded to 3 decimals.
* :data:`q1` and :data:`q3`: lower and upper quartiles.

Median and quartiles are order statistics, they can be computed by
sorting the data or in linear time using quickselect
(see :mod:`frameground.compute.selection`). The two methods
always return the very same values.
By default quickselect is used for datasets with at least
:data:`QUICKSELECT_THRESHOLD` values, as for small ones
sorting is faster in Python.
"""

import abc
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Iterable, NamedTuple, Sequence

from ..cells import MISSING, is_missing
from ..errors import EmptyDatasetError, InsufficientDataError, TypeMismatchError
from .selection import order_statistics

__all__ = (
    "StatsResult",
    "Aggregation",
    "CountAggregation",
    "MeanAggregation",
    "StdAggregation",
    "MinAggregation",
    "MaxAggregation",
    "OrderStatisticAggregation",
    "MedianAggregation",
    "QuartileAggregation",
    "count",
    "mean",
    "std",
    "minimum",
    "maximum",
    "median",
    "q1",
    "q2",
    "q3",
    "SUMMARY",
    "AGGREGATIONS",
    "stats_name",
    "aggregate_or_missing",
    "aggregate_many",
)

QUICKSELECT_THRESHOLD = 64
"""Minimum number of values for which ``method="auto"`` uses quickselect."""

log = logging.getLogger(__name__)


class StatsResult(NamedTuple):
    """Outcome of an aggregation: the statistic name and its value."""

    name: str
    result: float


StatsFunc = Callable[[Sequence[Any]], StatsResult]


class Aggregation(abc.ABC):
    """Base class for aggregations.

    Subclasses provide the ``name`` of the statistic and
    implement :meth:`_aggregate`, which receives the values
    already cleaned from missing cells and converted to ``float``.
    """

    name: str = ""

    def __str__(self) -> str:
        return f"{self.__class__.__name__}()"

    __repr__ = __str__

    def __call__(self, dataset: Sequence[Any]) -> StatsResult:
        data = numeric_values(dataset)
        if not data:
            raise EmptyDatasetError(f"{self.name}: no values left to aggregate")
        return StatsResult(self.name, self._aggregate(data))

    @abc.abstractmethod
    def _aggregate(self, data: list[float]) -> float: ...


class CountAggregation(Aggregation):
    """Count the non missing values, whatever their type."""

    name = "Count"

    def __call__(self, dataset: Sequence[Any]) -> StatsResult:
        retained = sum(1 for v in dataset if not is_missing(v))
        return StatsResult(self.name, float(retained))

    def _aggregate(self, data: list[float]) -> float:
        return float(len(data))


class MeanAggregation(Aggregation):
    """Compute the mean of the values, rounded to 3 decimals."""

    name = "Mean"

    def _aggregate(self, data: list[float]) -> float:
        return round_half_away(math.fsum(data) / len(data))


class StdAggregation(Aggregation):
    """Compute the sample standard deviation of the values.

    The deviation is computed with Bessel's correction,
    dividing by ``n - 1``, so it is undefined for less than
    two values and :class:`InsufficientDataError` is raised.
    """

    name = "Std"

    def _aggregate(self, data: list[float]) -> float:
        if len(data) < 2:
            raise InsufficientDataError(
                f"{self.name}: at least 2 values are required, got {len(data)}"
            )
        avg = math.fsum(data) / len(data)
        variance = math.fsum((v - avg) ** 2 for v in data) / (len(data) - 1)
        return round_half_away(math.sqrt(variance))


class MinAggregation(Aggregation):
    """Compute the smallest value."""

    name = "Min"

    def _aggregate(self, data: list[float]) -> float:
        # Seeded from the first value, not from a sentinel.
        smallest = data[0]
        for v in data[1:]:
            if v < smallest:
                smallest = v
        return smallest


class MaxAggregation(Aggregation):
    """Compute the biggest value."""

    name = "Max"

    def _aggregate(self, data: list[float]) -> float:
        biggest = data[0]
        for v in data[1:]:
            if v > biggest:
                biggest = v
        return biggest


class OrderStatisticAggregation(Aggregation):
    """Base class for aggregations that depend on the sorted values.

    The values are looked up by their rank in the sorted dataset,
    either sorting the data or through quickselect, depending
    on the ``method`` provided when calling the aggregation:

    * ``"sort"``: always sort the data.
    * ``"quickselect"``: always use quickselect.
    * ``"auto"``: use quickselect when there are at least
      :data:`QUICKSELECT_THRESHOLD` values.
    """

    def __call__(self, dataset: Sequence[Any], method: str = "auto") -> StatsResult:
        data = numeric_values(dataset)
        if not data:
            raise EmptyDatasetError(f"{self.name}: no values left to aggregate")
        return StatsResult(self.name, self._aggregate(data, method))

    @abc.abstractmethod
    def _aggregate(self, data: list[float], method: str = "auto") -> float: ...

    def _median_of_slice(
        self, data: list[float], offset: int, size: int, method: str
    ) -> float:
        """Median of the ``size`` values starting at rank ``offset``.

        Any contiguous slice of the sorted data is identified
        by the ranks of its values in the whole dataset,
        so the median of a slice is an order statistic of the whole data.
        """
        if size == 0:
            raise InsufficientDataError(
                f"{self.name}: not enough values, got {len(data)}"
            )
        if size % 2 == 0:
            ranks = [offset + size // 2 - 1, offset + size // 2]
        else:
            ranks = [offset + size // 2]

        values = self._values_at(data, ranks, method)
        if len(values) == 2:
            return (values[0] + values[1]) / 2
        return values[0]

    def _values_at(
        self, data: list[float], ranks: list[int], method: str
    ) -> list[float]:
        if method == "auto":
            method = "quickselect" if len(data) >= QUICKSELECT_THRESHOLD else "sort"
            log.debug("%s of %d values computed with %s", self.name, len(data), method)

        if method == "sort":
            ordered = sorted(data)
            return [ordered[r] for r in ranks]
        elif method == "quickselect":
            return order_statistics(data, ranks)
        raise ValueError(f"Unknown order statistic method: {method}")


class MedianAggregation(OrderStatisticAggregation):
    """Compute the median of the values, rounded to 3 decimals.

    For an even number of values it's the average
    of the two middle ones.
    """

    def __init__(self, name: str = "Median") -> None:
        self.name = name

    def _aggregate(self, data: list[float], method: str = "auto") -> float:
        return round_half_away(self._median_of_slice(data, 0, len(data), method))


class QuartileAggregation(OrderStatisticAggregation):
    """Compute the lower or upper quartile of the values.

    Quartiles are the median of the lower and upper half of the data,
    when the number of values is odd the median value is excluded
    from both halves. For example with ``[1, 2, 3, 4, 5]``
    the lower half is ``[1, 2]`` and the upper half is ``[4, 5]``.
    """

    def __init__(self, upper: bool) -> None:
        self.upper = upper
        self.name = "Q3" if upper else "Q1"

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(upper={self.upper})"

    __repr__ = __str__

    def _aggregate(self, data: list[float], method: str = "auto") -> float:
        half = len(data) // 2
        offset = len(data) - half if self.upper else 0
        return self._median_of_slice(data, offset, half, method)


count = CountAggregation()
mean = MeanAggregation()
std = StdAggregation()
minimum = MinAggregation()
maximum = MaxAggregation()
median = MedianAggregation()
q1 = QuartileAggregation(upper=False)
q2 = MedianAggregation("Q2")
q3 = QuartileAggregation(upper=True)

SUMMARY = (count, mean, std, minimum, q1, median, q3, maximum)
"""The aggregations computed by :meth:`frameground.DataFrame.describe`."""

AGGREGATIONS = {
    f.name.lower(): f for f in (count, mean, std, minimum, maximum, median, q1, q2, q3)
}
"""All the provided aggregations, by lowercase name."""


def numeric_values(dataset: Iterable[Any]) -> list[float]:
    """The non missing values of ``dataset`` as floats.

    Raises :class:`TypeMismatchError` when a value is not a number.
    """
    data = []
    for v in dataset:
        if is_missing(v):
            continue
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise TypeMismatchError(f"can only aggregate numbers, got {v!r}")
        data.append(float(v))
    return data


def round_half_away(value: float, digits: int = 3) -> float:
    """Round to ``digits`` decimals, halves are rounded away from zero.

    >>> round_half_away(2.0625), round_half_away(-0.0005)
    (2.063, -0.001)
    """
    if not math.isfinite(value) or abs(value) >= 1e15:
        # No decimals left to round.
        return value
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def stats_name(func: StatsFunc) -> str:
    """The name of the statistic computed by ``func``.

    Plain functions can be used as aggregations too,
    in that case the name of the function is used.
    """
    return getattr(func, "name", None) or getattr(func, "__name__", str(func))


def aggregate_or_missing(func: StatsFunc, dataset: Sequence[Any]) -> Any:
    """Run ``func`` on ``dataset`` returning only the resulting value.

    When there are not enough values to compute the statistic
    the result is :data:`frameground.cells.MISSING`. Any other
    failure is raised to the caller.
    """
    try:
        return func(dataset).result
    except (EmptyDatasetError, InsufficientDataError):
        return MISSING


def aggregate_many(
    func: StatsFunc,
    datasets: Iterable[Sequence[Any]],
    max_workers: int | None = None,
) -> list[Any]:
    """Apply :func:`aggregate_or_missing` to each dataset.

    The results are returned in the same order of the datasets.
    When ``max_workers`` is provided the datasets are aggregated
    concurrently in a thread pool. Each dataset is frozen to a tuple
    before being submitted, so that no task can see changes
    made to the data while the aggregation is running.
    """
    snapshots = [tuple(d) for d in datasets]
    if not max_workers:
        return [aggregate_or_missing(func, d) for d in snapshots]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(aggregate_or_missing, func, d) for d in snapshots]
        return [f.result() for f in futures]

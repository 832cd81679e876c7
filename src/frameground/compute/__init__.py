"""The FrameGround compute primitives.

The compute package holds the algorithms that the
data structures rely on, independently from the
data structures themselves:

* :mod:`frameground.compute.aggregate` the statistics
  that can be computed over a column or a group of rows.
* :mod:`frameground.compute.selection` quickselect, to find
  order statistics like the median in linear time.
* :mod:`frameground.compute.sorting` the deterministic ordering
  used to sort indices, series and dataframes.

All the functions work on plain sequences of cells,
so they can be used directly on the values of a Series:

>>> from frameground.compute import median, quickselect
>>> median([5.0, 1.0, 4.0, 2.0])
StatsResult(name='Median', result=3.0)
>>> quickselect([5.0, 1.0, 4.0, 2.0], 0)
1.0
"""

from .aggregate import (
    AGGREGATIONS,
    SUMMARY,
    Aggregation,
    CountAggregation,
    MaxAggregation,
    MeanAggregation,
    MedianAggregation,
    MinAggregation,
    QuartileAggregation,
    StatsResult,
    StdAggregation,
    count,
    maximum,
    mean,
    median,
    minimum,
    q1,
    q2,
    q3,
    std,
)
from .selection import hoare_partition, order_statistics, quickselect
from .sorting import stable_order, value_order

__all__ = (
    "StatsResult",
    "Aggregation",
    "CountAggregation",
    "MeanAggregation",
    "StdAggregation",
    "MinAggregation",
    "MaxAggregation",
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
    "quickselect",
    "hoare_partition",
    "order_statistics",
    "stable_order",
    "value_order",
)

"""Dataframe library built on top of the frameground compute primitives.

A dataframe library is a tool designed to handle and manipulate structured data,
typically in the form of tables (i.e., rows and columns).
It allows users to load data, explore it, apply transformations, and analyze it.

In FrameGround a :class:`DataFrame` is made of typed columns
(:class:`frameground.series.Series`) that share the same
row labels (:class:`frameground.index.Index`). All the data is
kept in memory and each operation is executed immediately::

    >>> from frameground.dataframe import DataFrame
    >>> df = DataFrame(
    ...     [["Rome", "Rome", "Milan"], ["Jan", "Feb", "Jan"], [8.0, 10.0, 4.0]],
    ...     ["city", "month", "temp"],
    ...     index_columns=["city"],
    ... )
    >>> df.pivot("month", "temp").rows()
    [[8.0, 10.0], [4.0, MISSING]]

Rows can be grouped to compute statistics per group, see :class:`GroupBy`,
and the summary statistics of all numeric columns can be computed
at once through :meth:`DataFrame.describe`.
"""

from .dataframe import ColumnData, DataFrame
from .groupby import GroupBy

__all__ = ("DataFrame", "ColumnData", "GroupBy")

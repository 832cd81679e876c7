"""FrameGround

An in memory dataframe engine built from scratch for learning and teaching purposes.

The engine is constituted by multiple components, each isolated within its own
module and each self documented in literate programming style.

The primary components are:

* The cell model (:mod:`frameground.cells`), the values a column can hold
  and how they are compared, grouped and printed.
* The Index (:mod:`frameground.index`), the labels of the rows.
* The Series (:mod:`frameground.series`), a typed column of data.
* The Dataframe API (:mod:`frameground.dataframe`), tables made of Series.
* The Compute primitives (:mod:`frameground.compute`), the statistics and the
  selection and sorting algorithms used by all the others.

For the user guide and code documentation of each component, refer to the
component itself.

>>> import frameground
>>> df = frameground.DataFrame([[3, 1, 2]], ["n"])
>>> df.sort_by_values("n").rows()
[[1], [2], [3]]
"""

from . import compute, errors
from .cells import MISSING, DType
from .dataframe import DataFrame, GroupBy
from .index import Index, RowLabel
from .series import Series

__all__ = (
    "compute",
    "errors",
    "MISSING",
    "DType",
    "DataFrame",
    "GroupBy",
    "Index",
    "RowLabel",
    "Series",
)

"""Exceptions raised by FrameGround.

Every failure of a core operation is reported to the immediate
caller by raising one of the exceptions below. The core never logs,
retries or silences them: what to do about a failure is a decision
that belongs to the calling code.

All exceptions inherit from :class:`FrameError`, so a caller can
handle every FrameGround failure in one place::

    try:
        df = df.merge_vertical(other)
    except FrameError as e:
        print(f"Unable to merge: {e}")

Each exception is also a subclass of the builtin exception that
best describes it (``ValueError``, ``TypeError``, ``LookupError``),
so code that only knows about builtins still catches them.
"""


class FrameError(Exception):
    """Base class for all FrameGround errors."""

    pass


class DimensionMismatchError(FrameError, ValueError):
    """Sequences that must share a length do not."""

    pass


class InvalidColumnTypeError(FrameError, TypeError):
    """Cells of a column can't be resolved to a single dtype."""

    pass


class ColumnNotFoundError(FrameError, LookupError):
    """A column name does not exist in the DataFrame."""

    pass


class LabelNotFoundError(FrameError, LookupError):
    """No row matches the requested index labels."""

    pass


class TypeMismatchError(FrameError, TypeError):
    """The operation is not supported for the dtype of the data."""

    pass


class SchemaMismatchError(FrameError, ValueError):
    """Two DataFrames do not have the same columns and dtypes."""

    pass


class InvalidAxisError(FrameError, ValueError):
    """The axis is neither 0 (rows) nor 1 (columns)."""

    pass


class AmbiguousPivotError(FrameError, ValueError):
    """More than one value would land in the same pivoted cell."""

    pass


class EmptyDatasetError(FrameError, ValueError):
    """No values are left to aggregate once missing ones are removed."""

    pass


class InsufficientDataError(FrameError, ValueError):
    """Too few values are left to compute the statistic."""

    pass


class DuplicateColumnError(FrameError, ValueError):
    """A column name would appear more than once in the DataFrame."""

    pass

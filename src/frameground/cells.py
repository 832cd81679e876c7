"""Cell values and the rules to compare, hash and print them.

A cell is one datum of a column. FrameGround supports a closed set
of cell types:

* ``bool``
* ``int``
* ``float``
* ``str``
* :data:`MISSING`, the marker for an absent value.

``MISSING`` is a first class value, it is not ``None`` and it is not
``float("nan")``: it is distinct from any real float and all missing
cells are equal to each other. When data enters the engine ``None``,
``NaN`` and the empty string are all turned into ``MISSING``:

>>> normalize_cell(None) is MISSING
True
>>> normalize_cell(float("nan")) is MISSING
True
>>> normalize_cell("")
MISSING

When rows have to be grouped or looked up by their values,
cells are converted to structural keys. Numbers compare by their
numeric value, but they never collide with booleans or strings:

>>> make_key((1, "a")) == make_key((1.0, "a"))
True
>>> make_key((True,)) == make_key((1,))
False

When a cell has to become text (for example when the distinct
values of a column become the columns of a pivot table) it is
formatted with a fixed rule per type:

>>> [format_cell(v) for v in (True, 3, 10.0, 0.1, "x", MISSING)]
['true', '3', '10', '0.1', 'x', 'NaN']
"""

import enum
import math
import numbers
from typing import Any, Iterable

from .errors import InvalidColumnTypeError

__all__ = (
    "MISSING",
    "Missing",
    "DType",
    "normalize_cell",
    "is_missing",
    "classify",
    "coerce",
    "cell_key",
    "make_key",
    "format_cell",
    "sort_key",
)


class Missing:
    """The type of the :data:`MISSING` marker.

    There is only one instance of this class,
    creating a new one returns the existing marker.
    """

    _instance = None

    def __new__(cls) -> "Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING = Missing()


class DType(enum.Enum):
    """The type of the values stored in a column."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"

    def __str__(self) -> str:
        return self.value


def normalize_cell(value: Any) -> Any:
    """Convert an incoming Python value to a cell.

    ``None``, ``NaN`` and ``""`` become :data:`MISSING`,
    integral and real numbers from other libraries (like numpy scalars)
    become plain ``int`` and ``float``.
    Anything else is not a valid cell and is refused.
    """
    if value is MISSING or value is None:
        return MISSING
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value if value != "" else MISSING
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return MISSING if math.isnan(value) else value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        value = float(value)
        return MISSING if math.isnan(value) else value
    raise InvalidColumnTypeError(
        f"unsupported cell value {value!r} of type {type(value).__name__}"
    )


def is_missing(cell: Any) -> bool:
    """Tell if a cell is missing, tolerating ``None`` and ``NaN``."""
    if cell is MISSING or cell is None:
        return True
    return isinstance(cell, float) and math.isnan(cell)


def classify(cell: Any) -> DType | None:
    """Return the dtype of a single cell, ``None`` for missing cells."""
    if cell is MISSING:
        return None
    # bool must be checked first, as it's a subclass of int.
    if isinstance(cell, bool):
        return DType.BOOL
    if isinstance(cell, int):
        return DType.INT
    if isinstance(cell, float):
        return DType.FLOAT
    if isinstance(cell, str):
        return DType.STRING
    raise InvalidColumnTypeError(f"unsupported cell value {cell!r}")


def coerce(cell: Any, dtype: DType) -> Any:
    """Convert a normalized cell so that it fits a column of ``dtype``.

    Integers fit float columns and numbers fit string columns
    (they are formatted with :func:`format_cell`). Booleans only
    fit boolean columns.
    """
    if cell is MISSING:
        if dtype is DType.INT:
            raise InvalidColumnTypeError("int columns can't hold missing values")
        return cell

    kind = classify(cell)
    if kind is dtype:
        return cell
    if dtype is DType.FLOAT and kind is DType.INT:
        return float(cell)
    if dtype is DType.STRING and kind in (DType.INT, DType.FLOAT):
        return format_cell(cell)
    raise InvalidColumnTypeError(f"value {cell!r} does not fit a {dtype} column")


def cell_key(cell: Any) -> tuple:
    """Structural key of a single cell, see :func:`make_key`."""
    if is_missing(cell):
        return ("missing",)
    if isinstance(cell, bool):
        return ("bool", cell)
    if isinstance(cell, (int, float)):
        return ("num", cell)
    if isinstance(cell, str):
        return ("str", cell)
    raise InvalidColumnTypeError(f"unsupported cell value {cell!r}")


def make_key(cells: Iterable[Any]) -> tuple:
    """Build the composite key of a tuple of cells.

    The key is a tuple of ``(kind, value)`` pairs, where kind is
    ``"bool"``, ``"num"``, ``"str"`` or ``"missing"``. Two keys are
    equal only when every cell is of the same kind and has the same value,
    ``int`` and ``float`` share the ``"num"`` kind so that a label
    still matches after a column was promoted from int to float.
    """
    return tuple(cell_key(c) for c in cells)


def format_cell(cell: Any) -> str:
    """Format a cell as text.

    * booleans become ``"true"`` or ``"false"``
    * floats use their shortest text that reads back as the same float,
      without a trailing ``.0`` (``"10"`` for ``10.0``)
    * missing values become ``"NaN"``
    """
    if is_missing(cell):
        return "NaN"
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if isinstance(cell, float):
        text = repr(cell)
        return text[:-2] if text.endswith(".0") else text
    return str(cell)


def sort_key(cell: Any) -> tuple:
    """Ordering key for a cell.

    Values of the same type sort naturally, values of
    different types sort as ``bool < numbers < str`` and missing
    values always come last.
    """
    if is_missing(cell):
        return (3, 0)
    if isinstance(cell, bool):
        return (0, cell)
    if isinstance(cell, (int, float)):
        return (1, cell)
    return (2, cell)

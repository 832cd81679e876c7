"""Format tabular data into a text table for print.

the `tabulate` function takes a DataFrame and formats it into a text table.
It will truncate long strings, format floats to 2 decimal places, and limit the number of rows to display.
The function is used to print DataFrames and by the ``frameground-describe`` command.

Example:

    >>> from frameground import DataFrame
    >>> df = DataFrame(
    ...     [["Videogame", "Laptop", "Laptop"], [8, 8, None], [66.5, 38.72, 77.46]],
    ...     ["Product", "Quantity", "Price"],
    ... )
    >>> print(tabulate(df))
    Product   | Quantity | Price
    --------- | -------- | -----
    Videogame | 8.00     | 66.50
    Laptop    | 8.00     | 38.72
    Laptop    | NaN      | 77.46
"""

from typing import TYPE_CHECKING, Any

from ..cells import format_cell, is_missing

if TYPE_CHECKING:
    from ..dataframe import DataFrame

MAX_ROWS = 20
"""Number of rows printed when not specified otherwise."""


def tabulate(dataframe: "DataFrame", max_rows: int = MAX_ROWS) -> str:
    """Format a DataFrame into a text table.

    Will produce a string like::

        Product   | Quantity | Price | Total
        --------- | -------- | ----- | ------
        Videogame | 8        | 66.50 | 532.00
        Laptop    | 8        | 38.72 | 309.76
        Laptop    | 7        | 77.46 | 542.22

    Levels of the index that are not columns of the DataFrame,
    like the rows of a pivot table, are printed as the first columns.
    """
    head = dataframe.head(max_rows)
    # Named index levels that are not also columns are printed first.
    levels = [
        pos
        for pos, name in enumerate(head.index.names)
        if name is not None and name not in head.columns
    ]
    cols = [head.index.names[pos] for pos in levels] + head.columns
    rows = [
        [format_value(row.labels[pos]) for pos in levels] + [format_value(v) for v in values]
        for row, values in zip(head.index, head.rows())
    ]

    colsizes = compute_max_colsize(cols, rows)
    header = [maketablerow(cols, colsizes=colsizes)]
    separator = [maketablerow(["-"] * len(cols), colsizes=colsizes, fillvalue="-")]
    textrows = [maketablerow(row, colsizes=colsizes) for row in rows]

    table = "\n".join(header + separator + textrows)
    if len(dataframe) > max_rows:
        table += f"\n... and {len(dataframe) - max_rows} more rows"
    return table


def compute_max_colsize(cols: list[str], rows: list[list[str]]) -> list[int]:
    """Compute the maximum size of each column in a table."""
    return [
        max([len(row[colidx]) for row in rows] + [len(cols[colidx])])
        for colidx, _ in enumerate(cols)
    ]


def maketablerow(cols: list[str], colsizes: list[int], fillvalue: str = " ") -> str:
    """Make a table row with the given column sizes."""
    return " | ".join(
        [col.ljust(colsizes[idx], fillvalue) for idx, col in enumerate(cols)]
    )


def format_value(v: Any) -> str:
    """Format a cell to be printed in the table.

    This function will format floats to 2 decimal places,
    and truncate long strings. Other cells are formatted
    with :func:`frameground.cells.format_cell`.
    """
    if isinstance(v, float) and not is_missing(v):
        return f"{v:.2f}"

    v = format_cell(v)
    if len(v) > 30:
        v = v[:27] + "..."
    return v

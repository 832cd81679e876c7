"""Command line interface for computing summary statistics of CSV files.

This module provides a command line interface that loads a CSV file
into a :class:`frameground.DataFrame` and prints the result of
:meth:`frameground.DataFrame.describe` or, when requested,
of :meth:`frameground.DataFrame.pivot_table`.

The results are printed to the console in a tabular format
using the :mod:`frameground.utils.tabulate` module.
"""

import argparse
import logging

import pyarrow as pa
import pyarrow.csv

from frameground import DataFrame
from frameground.compute import AGGREGATIONS
from frameground.errors import FrameError
from frameground.utils import tabulate

log = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Parse the command line arguments and print the statistics."""
    parser = argparse.ArgumentParser(
        description="Print summary statistics of a CSV file."
    )
    parser.add_argument("filename", type=str, help="The CSV file to load.")
    parser.add_argument(
        "-i",
        "--index",
        action="append",
        help="Use a column as the index. Can be provided multiple times.",
    )
    parser.add_argument(
        "--pivot-table",
        nargs=3,
        metavar=("INDEX", "COLUMN", "VALUE"),
        help="Print a pivot table instead of the summary statistics.",
    )
    parser.add_argument(
        "--agg",
        default="mean",
        choices=sorted(AGGREGATIONS),
        help="The aggregation used by --pivot-table.",
    )
    parser.add_argument(
        "--max-rows", type=int, default=tabulate.MAX_ROWS, help="Rows to print."
    )
    parser.add_argument(
        "--workers", type=int, default=None, help="Aggregate using N threads."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        table = pa.csv.read_csv(args.filename)
    except (OSError, pa.ArrowInvalid) as e:
        parser.exit(1, f"Unable to read {args.filename}: {e}\n")
    log.debug("loaded %d rows and %d columns from %s", table.num_rows, table.num_columns, args.filename)

    try:
        df = DataFrame.from_arrow(table, index_columns=args.index)
        if args.pivot_table:
            index, column, value = args.pivot_table
            result = df.pivot_table(
                index, column, value, AGGREGATIONS[args.agg], max_workers=args.workers
            )
        else:
            result = df.describe(max_workers=args.workers)
    except FrameError as e:
        parser.exit(1, f"{e.__class__.__name__}: {e}\n")

    print(tabulate.tabulate(result, max_rows=args.max_rows))


if __name__ == "__main__":
    main()

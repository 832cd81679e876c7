"""Shell commands exposing FrameGround functionalities.

This module contains the shell commands that can be used to interact with FrameGround.

Describe
========

``frameground-describe`` prints the summary statistics of the numeric columns of a CSV file::

    frameground-describe examples/data/sales.csv

It can also print a pivot table, aggregating the values with
any of the aggregations in :data:`frameground.compute.AGGREGATIONS`::

    frameground-describe examples/data/sales.csv --pivot-table Region Product Quantity --agg median

"""

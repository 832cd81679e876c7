import pyarrow.csv

from frameground import DataFrame
from frameground.compute import mean, median, q3

df = DataFrame.from_arrow(pyarrow.csv.read_csv("data/sales.csv"))

print(df.describe())
print(df.group_by("Region", "Product").aggregate("Price", mean, median, q3, max_workers=4))
print(df.pivot_table("Region", "Product", "Quantity", mean))

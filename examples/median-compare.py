import random
import sys
import time

import pandas
import psutil

from frameground.compute import median

try:
    method = sys.argv[1]
except IndexError:
    method = None

random.seed(42)
data = [random.uniform(0, 1000) for _ in range(2_000_000)]

if method in ("sort", "quickselect"):
    def compute():
        return median(data, method=method).result
elif method == "pandas":
    def compute():
        return round(pandas.Series(data).median(), 3)
else:
    print("Method must be sort, quickselect or pandas")
    sys.exit(1)

proc = psutil.Process()
start = time.time()
result = compute()
end = time.time()

print(
    "MEDIAN:",
    result,
    "TIME:",
    round(end - start, 1),
    "MEMORY:",
    proc.memory_full_info().rss // (1024 * 1024),
)

"""Microbenchmark: QueryString construction and single operations.

1. QueryString.of construction (10K iterations).
2. One replace, remove and add per fresh instance (10K iterations each).
3. stdlib parse_qsl + urlencode round trip for comparison.
"""

import time
import statistics


def _make_query_strings(n):
    return [
        f"page={i % 10}&limit=20&sort=name&order=asc&sort=stars,desc&q=search+term+{i}"
        for i in range(n)
    ]


def _time(func, items, rounds=5):
    for item in items[:100]:
        func(item)

    timings = []
    for _ in range(rounds):
        start = time.perf_counter()
        for item in items:
            func(item)
        timings.append(time.perf_counter() - start)
    return timings


def _result(name, n, timings):
    return {
        "name": name,
        "n": n,
        "min_s": min(timings),
        "median_s": statistics.median(timings),
        "mean_s": statistics.mean(timings),
        "ops_per_sec": n / statistics.median(timings),
    }


def bench_construction(n=10_000):
    """Benchmark validating and indexing a query string."""
    from qshelper import QueryString

    timings = _time(QueryString.of, _make_query_strings(n))
    return _result("QueryString.of", n, timings)


def bench_operation(operation, *args, n=10_000):
    """Benchmark one operation on a freshly built QueryString."""
    from qshelper import QueryString

    def run(qs):
        return getattr(QueryString.of(qs), operation)(*args)

    timings = _time(run, _make_query_strings(n))
    return _result(operation, n, timings)


def bench_stdlib_round_trip(n=10_000):
    """Benchmark stdlib parse_qsl + urlencode for comparison."""
    from urllib.parse import parse_qsl, urlencode

    def run(qs):
        return urlencode(parse_qsl(qs))

    timings = _time(run, _make_query_strings(n))
    return _result("stdlib parse_qsl+urlencode", n, timings)


def print_result(result):
    """Pretty-print a benchmark result dict."""
    print(f"  {result['name']:>30s}: "
          f"median={result['median_s']:.4f}s  "
          f"min={result['min_s']:.4f}s  "
          f"({result['ops_per_sec']:,.0f} ops/sec)")


def main():
    n = 10_000

    print(f"QueryString benchmarks ({n} iterations, 5 rounds each)")
    print("-" * 70)
    print_result(bench_construction(n))
    print_result(bench_operation("replace_nth", {"sort": {1: "address,desc"}}, n=n))
    print_result(bench_operation("remove_first", "sort", n=n))
    print_result(bench_operation("add", "filter", "active", n=n))
    print_result(bench_stdlib_round_trip(n))


if __name__ == "__main__":
    main()

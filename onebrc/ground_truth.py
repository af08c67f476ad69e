"""Check the engine against an independent polars computation.

USAGE: ``python -m onebrc.ground_truth measurements.txt``
"""

import argparse
import itertools as it
import sys
from timeit import default_timer as timer

from onebrc.aggregate import round1
from onebrc.engine import calculate_station_values
from onebrc.output import format_entry


def make_ground_truth(measurements_file):
    import polars as pl

    df = pl.scan_csv(
        measurements_file,
        separator=";",
        has_header=False,
        quote_char=None,
        schema={"station_name": pl.Utf8, "measurement": pl.Float64},
    )

    grouped = (
        df.group_by("station_name")
        .agg(
            pl.col("measurement").min().alias("min_measurement"),
            pl.col("measurement").mean().alias("mean_measurement"),
            pl.col("measurement").max().alias("max_measurement"),
        )
        .sort("station_name")
        .collect()
    )
    result = []
    for name, min_val, mean_val, max_val in grouped.iter_rows():
        result.append(f"{name}={round1(min_val):.1f}/{round1(mean_val):.1f}/{round1(max_val):.1f}")
    return result


def engine_lines(measurements_file, config=None):
    result = calculate_station_values(measurements_file, config)
    return [format_entry(name, summary) for name, summary in result.items()]


def compare(ground_truth, result):
    """Yield ``expected  !=  actual`` for every line that differs in name or value."""
    for l, r in it.zip_longest(ground_truth, result):
        if l == r:
            continue
        if l is None or r is None:
            yield f"{l}  !=  {r}"
            continue
        l_city, _, l_measurements = l.rpartition("=")
        r_city, _, r_measurements = r.rpartition("=")
        l_values = [float(v) for v in l_measurements.split("/")]
        r_values = [float(v) for v in r_measurements.split("/")]
        if l_city != r_city or l_values != r_values:
            yield f"{l}  !=  {r}"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compare onebrc output with a polars ground truth.")
    parser.add_argument("filename", type=str, help="measurements.txt file")
    args = parser.parse_args(argv)

    tic = timer()
    ground_truth = make_ground_truth(args.filename)
    toc = timer()
    print(f"ground truth took {toc - tic:.2f} seconds", file=sys.stderr)

    tic = timer()
    result = engine_lines(args.filename)
    toc = timer()
    print(f"onebrc took {toc - tic:.2f} seconds", file=sys.stderr)

    diff = list(compare(ground_truth, result))
    for diff_entry in diff[:10]:
        print(diff_entry)
    if diff:
        print(f"{len(diff)} of {len(ground_truth)} stations differ")
        return 1
    print(f"all {len(ground_truth)} stations match")
    return 0


if __name__ == "__main__":
    sys.exit(main())

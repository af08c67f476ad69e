"""Per-station statistics, the per-worker update and the final merge."""

import math
from typing import Dict, Iterable, NamedTuple

from onebrc.parser import iter_records


class StationSummary(NamedTuple):
    min: float
    mean: float
    max: float


class StationStats:
    """Running min/max/sum/count of one station's values."""

    __slots__ = ("min", "max", "sum", "count")

    def __init__(self, minimum, maximum, total, count):
        self.min = minimum
        self.max = maximum
        self.sum = total
        self.count = count

    @classmethod
    def from_value(cls, value):
        return cls(value, value, value, 1)

    def add(self, value):
        if value < self.min:
            self.min = value
        if value > self.max:
            self.max = value
        self.sum += value
        self.count += 1

    def merge(self, other):
        if other.min < self.min:
            self.min = other.min
        if other.max > self.max:
            self.max = other.max
        self.sum += other.sum
        self.count += other.count

    def copy(self):
        return StationStats(self.min, self.max, self.sum, self.count)

    def summarize(self):
        return StationSummary(round1(self.min), round1(self.sum / self.count), round1(self.max))

    def __eq__(self, other):
        if not isinstance(other, StationStats):
            return NotImplemented
        return (self.min, self.max, self.sum, self.count) == (other.min, other.max, other.sum, other.count)

    def __repr__(self):
        return f"StationStats(min={self.min}, max={self.max}, sum={self.sum}, count={self.count})"


# station name -> running stats, private to one worker
WorkerAggregate = Dict[bytes, StationStats]


def round1(value):
    """Round to one decimal digit, halves away from zero."""
    if not math.isfinite(value):
        return value
    scaled = abs(value) * 10.0
    whole = math.floor(scaled)
    if scaled - whole >= 0.5:
        whole += 1
    rounded = whole / 10.0
    if rounded == 0.0:
        return 0.0
    return math.copysign(rounded, value)


def aggregate_chunk(chunk, aggregate: WorkerAggregate) -> WorkerAggregate:
    get = aggregate.get
    for name, value in iter_records(chunk):
        stats = get(name)
        if stats is None:
            aggregate[name] = StationStats.from_value(value)
        else:
            stats.add(value)
    return aggregate


def merge_results(aggregates: Iterable[WorkerAggregate]) -> WorkerAggregate:
    """Combine worker aggregates into one; the inputs are left untouched.

    Sums and counts are added rather than means averaged, so the result does
    not depend on how records were spread over workers or on merge order.
    """
    result: WorkerAggregate = {}
    for aggregate in aggregates:
        for name, stats in aggregate.items():
            existing = result.get(name)
            if existing is None:
                result[name] = stats.copy()
            else:
                existing.merge(stats)
    return result


def finalize(result: WorkerAggregate) -> Dict[bytes, StationSummary]:
    """Derive rounded min/mean/max per station, in byte order of the names."""
    return {name: result[name].summarize() for name in sorted(result)}

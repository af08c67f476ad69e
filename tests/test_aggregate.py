import itertools
import pickle

import pytest

from onebrc.aggregate import (
    StationStats,
    StationSummary,
    aggregate_chunk,
    finalize,
    merge_results,
    round1,
)


def test_aggregate_chunk_updates_running_stats():
    aggregate = aggregate_chunk(b"Tokyo;15.2\nTokyo;18.4\nLagos;30.1\nTokyo;-3.0\n", {})
    assert aggregate[b"Tokyo"] == StationStats(-3.0, 18.4, 15.2 + 18.4 - 3.0, 3)
    assert aggregate[b"Lagos"] == StationStats.from_value(30.1)


def test_aggregate_chunk_accumulates_across_chunks():
    aggregate = {}
    aggregate_chunk(b"Oslo;1.0\n", aggregate)
    aggregate_chunk(b"Oslo;3.0\n", aggregate)
    assert aggregate[b"Oslo"] == StationStats(1.0, 3.0, 4.0, 2)


def test_station_stats_add_and_merge():
    stats = StationStats.from_value(5.0)
    stats.add(-2.0)
    stats.add(7.5)
    assert stats == StationStats(-2.0, 7.5, 10.5, 3)

    stats.merge(StationStats(-4.0, 1.0, -3.0, 2))
    assert stats == StationStats(-4.0, 7.5, 7.5, 5)


def test_station_stats_pickles():
    stats = StationStats(1.0, 2.0, 3.0, 2)
    assert pickle.loads(pickle.dumps(stats)) == stats


def _partials():
    return [
        {b"Tokyo": StationStats(15.2, 15.2, 15.2, 1), b"Lagos": StationStats(29.9, 30.1, 60.0, 2)},
        {b"Tokyo": StationStats(18.4, 18.4, 18.4, 1)},
        {b"Lagos": StationStats(30.0, 30.0, 30.0, 1), b"Oslo": StationStats(5.5, 5.5, 5.5, 1)},
        {},
    ]


def test_merge_is_order_independent():
    expected = finalize(merge_results(_partials()))
    for order in itertools.permutations(_partials()):
        assert finalize(merge_results(order)) == expected


def test_merge_combines_counts_and_sums():
    merged = merge_results(_partials())
    assert merged[b"Lagos"] == StationStats(29.9, 30.1, 90.0, 3)
    assert merged[b"Tokyo"].count == 2
    assert merged[b"Oslo"].count == 1


def test_merge_leaves_inputs_untouched():
    partials = _partials()
    merge_results(partials)
    assert partials == _partials()


def test_mean_comes_from_sums_not_partial_means():
    # averaging the two partial means would give 5.5
    partials = [{b"A": StationStats(1.0, 1.0, 1.0, 1)}, {b"A": StationStats(10.0, 10.0, 30.0, 3)}]
    assert finalize(merge_results(partials))[b"A"] == StationSummary(1.0, 7.8, 10.0)


def test_finalize_sorts_by_name_bytes():
    merged = merge_results(_partials())
    result = finalize(merged)
    assert list(result) == [b"Lagos", b"Oslo", b"Tokyo"]
    assert result[b"Tokyo"] == StationSummary(15.2, 16.8, 18.4)
    assert result[b"Lagos"] == StationSummary(29.9, 30.0, 30.1)


@pytest.mark.parametrize(
    "value, expected",
    [
        (16.8, 16.8),
        (0.25, 0.3),
        (-0.25, -0.3),
        (1.04, 1.0),
        (-1.06, -1.1),
        (-0.04, 0.0),
        (99.95000001, 100.0),
        (0.0, 0.0),
        (0.049999999999999996, 0.0),
        (-0.049999999999999996, 0.0),
        (0.15000000000000002, 0.2),
    ],
)
def test_round1(value, expected):
    assert round1(value) == expected


def test_round1_never_returns_negative_zero():
    assert str(round1(-0.04)) == "0.0"


def test_round1_is_idempotent():
    values = [i / 100 for i in range(-1000, 1001)] + [i / 7 for i in range(-300, 300)]
    for value in values:
        assert round1(round1(value)) == round1(value)


def test_round1_passes_non_finite_values():
    assert round1(float("inf")) == float("inf")

"""Tests for mock series generation and comparison derivation."""

from __future__ import annotations

import asyncio

import numpy as np
import pytest

from core.errors import InvalidInput
from core.generator import COMPARISON_LABEL, ComparisonDeriver, MockSeriesSource, SeriesGenerator
from core.series import Dataset, Series, SeriesPoint, TimeRange


def test_generate_default_point_count(generator: SeriesGenerator) -> None:
    series = generator.generate()
    assert len(series) == 50
    assert series.labels == list(range(1, 51))


def test_generate_value_ranges(generator: SeriesGenerator) -> None:
    series = generator.generate(500)
    assert all(60000.0 <= price < 65000.0 for price in series.prices)
    assert all(0.0 <= volume < 500000.0 for volume in series.volumes)


def test_generate_zero_points_and_negative(generator: SeriesGenerator) -> None:
    assert len(generator.generate(0)) == 0
    with pytest.raises(InvalidInput):
        generator.generate(-1)


def test_generate_is_reproducible_with_seed() -> None:
    first = SeriesGenerator(7).generate(10)
    second = SeriesGenerator(np.random.default_rng(7)).generate(10)
    assert first == second


def test_derive_preserves_length_and_bounds(deriver: ComparisonDeriver, generator: SeriesGenerator) -> None:
    base = generator.generate(200)
    comparison = deriver.derive(base)

    assert len(comparison) == len(base)
    assert comparison.label == COMPARISON_LABEL
    for original, derived in zip(base, comparison):
        assert derived.index == original.index
        assert 0.8 * original.price <= derived.price < 1.2 * original.price


def test_derive_drops_volume(deriver: ComparisonDeriver, base_series: Series) -> None:
    comparison = deriver.derive(base_series)
    assert not comparison.has_volume
    assert all(volume is None for volume in comparison.volumes)


def test_derive_rejects_empty_base(deriver: ComparisonDeriver) -> None:
    with pytest.raises(InvalidInput):
        deriver.derive(Series(points=()))


def test_derive_factors_are_independent(deriver: ComparisonDeriver) -> None:
    flat = Series(points=tuple(SeriesPoint(index=i + 1, price=100.0) for i in range(20)))
    comparison = deriver.derive(flat)
    assert len(set(comparison.prices)) > 1


def test_dataset_rejects_mismatched_lengths(base_series: Series) -> None:
    short = Series(points=base_series.points[:2])
    with pytest.raises(InvalidInput):
        Dataset(base=base_series, comparison=short)


def test_series_frame_columns(base_series: Series) -> None:
    frame = base_series.to_frame()
    assert list(frame.columns) == ["Index", "Price", "Volume"]
    assert frame["Price"].iloc[2] == 62500.0


def test_mock_source_fetch_is_range_agnostic(generator: SeriesGenerator) -> None:
    source = MockSeriesSource(generator)
    series = asyncio.run(source.fetch(TimeRange.ONE_YEAR, 12))
    assert len(series) == 12


@pytest.mark.parametrize("label", ["1d", "3d", "1w", "1m", "6m", "1y", "max", "MAX", " 1D "])
def test_time_range_parse(label: str) -> None:
    assert TimeRange.parse(label).value == label.strip().lower()


def test_time_range_parse_rejects_unknown() -> None:
    with pytest.raises(InvalidInput):
        TimeRange.parse("2w")

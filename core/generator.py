"""Mock price/volume generation and comparison-series derivation."""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np

from config.settings import (
    COMPARISON_FACTOR_MAX,
    COMPARISON_FACTOR_MIN,
    POINT_COUNT,
    PRICE_MIN,
    PRICE_SPAN,
    VOLUME_MAX,
)
from core.errors import InvalidInput
from core.series import Series, SeriesPoint, TimeRange

LOGGER = logging.getLogger("pricepanel.generator")

COMPARISON_LABEL = "Comparison Price (USD)"


def _make_rng(rng: np.random.Generator | int | None) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


class SeriesGenerator:
    """Produce a synthetic price/volume series; range-agnostic by design."""

    def __init__(self, rng: np.random.Generator | int | None = None) -> None:
        self._rng = _make_rng(rng)

    def generate(self, point_count: int = POINT_COUNT) -> Series:
        """Draw uniform prices in [60000, 65000) and volumes in [0, 500000)."""
        if point_count < 0:
            raise InvalidInput(f"point_count must be non-negative, got {point_count}")

        prices = self._rng.uniform(PRICE_MIN, PRICE_MIN + PRICE_SPAN, size=point_count)
        volumes = self._rng.uniform(0.0, VOLUME_MAX, size=point_count)
        points = tuple(
            SeriesPoint(index=position + 1, price=float(price), volume=float(volume))
            for position, (price, volume) in enumerate(zip(prices, volumes))
        )
        return Series(points=points)


class ComparisonDeriver:
    """Derive a price-only overlay by perturbing each base price independently."""

    def __init__(self, rng: np.random.Generator | int | None = None) -> None:
        self._rng = _make_rng(rng)

    def derive(self, base: Series) -> Series:
        if len(base) == 0:
            raise InvalidInput("Cannot derive a comparison series from an empty base series")

        factors = self._rng.uniform(COMPARISON_FACTOR_MIN, COMPARISON_FACTOR_MAX, size=len(base))
        points = tuple(
            SeriesPoint(index=point.index, price=point.price * float(factor))
            for point, factor in zip(base, factors)
        )
        return Series(points=points, label=COMPARISON_LABEL)


class SeriesSource(Protocol):
    """Anything that can (possibly asynchronously) supply a base series for a range."""

    async def fetch(self, time_range: TimeRange, point_count: int = POINT_COUNT) -> Series:
        ...


class MockSeriesSource:
    """Async wrapper over SeriesGenerator; ignores the range."""

    def __init__(self, generator: SeriesGenerator | None = None) -> None:
        self.generator = generator or SeriesGenerator()

    async def fetch(self, time_range: TimeRange, point_count: int = POINT_COUNT) -> Series:
        LOGGER.debug("Generating %s mock points for range %s", point_count, time_range.value)
        return self.generator.generate(point_count)

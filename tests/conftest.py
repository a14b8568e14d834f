"""Shared fixtures for the price panel test suite."""

from __future__ import annotations

import numpy as np
import pytest

from core.fullscreen import BrowserFullscreenBridge, FullscreenController
from core.generator import ComparisonDeriver, SeriesGenerator
from core.series import Series, SeriesPoint
from core.view_state import ChartViewState
from ui.panel import ChartPanel


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def generator(rng: np.random.Generator) -> SeriesGenerator:
    return SeriesGenerator(rng)


@pytest.fixture
def deriver(rng: np.random.Generator) -> ComparisonDeriver:
    return ComparisonDeriver(rng)


@pytest.fixture
def base_series() -> Series:
    """Small hand-built series with round prices."""
    return Series(
        points=tuple(
            SeriesPoint(index=i + 1, price=price, volume=1000.0 * (i + 1))
            for i, price in enumerate([60000.0, 61000.0, 62500.0, 64000.0, 63000.0])
        )
    )


@pytest.fixture
def bridge() -> BrowserFullscreenBridge:
    return BrowserFullscreenBridge()


@pytest.fixture
def controller(bridge: BrowserFullscreenBridge):
    ctrl = FullscreenController(bridge)
    ctrl.attach()
    yield ctrl
    ctrl.detach()


@pytest.fixture
def view_state(generator: SeriesGenerator, deriver: ComparisonDeriver, controller: FullscreenController) -> ChartViewState:
    return ChartViewState(generator, deriver, controller)


@pytest.fixture
def panel(bridge: BrowserFullscreenBridge):
    chart_panel = ChartPanel(bridge, rng=42)
    chart_panel.mount()
    yield chart_panel
    chart_panel.unmount()


class FailingGenerator(SeriesGenerator):
    """Generator whose data source is down."""

    def generate(self, point_count: int = 50) -> Series:
        raise RuntimeError("data source unavailable")


class EmptyGenerator(SeriesGenerator):
    """Generator that returns no points, which the deriver must reject."""

    def generate(self, point_count: int = 50) -> Series:
        return Series(points=())

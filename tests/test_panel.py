"""Tests for the chart panel composition root."""

from __future__ import annotations

import pytest

from core.errors import InvalidInput
from core.fullscreen import BrowserFullscreenBridge
from core.series import TimeRange
from ui.panel import EMPTY_TEXT, FULLSCREEN_PADDING, LOADING_TEXT, WINDOWED_PADDING, ChartPanel

from conftest import FailingGenerator


def test_unmounted_panel_shows_loading(bridge: BrowserFullscreenBridge) -> None:
    view = ChartPanel(bridge, rng=1).render()
    assert view.body == "loading"
    assert view.placeholder == LOADING_TEXT
    assert view.price_text is None
    assert view.figure is None


def test_mount_loads_default_range(panel: ChartPanel) -> None:
    view = panel.render()
    assert panel.mounted
    assert view.body == "chart"
    assert view.state.time_range is TimeRange.ONE_WEEK
    assert view.price_text == "$63179.71"
    assert view.container_padding == WINDOWED_PADDING
    assert [button.key for button in view.time_range_buttons] == ["1d", "3d", "1w", "1m", "6m", "1y", "max"]
    assert [button.key for button in view.time_range_buttons if button.active] == ["1w"]


def test_scenario_default_to_1d_and_comparison(panel: ChartPanel) -> None:
    assert panel.select_time_range("1d") is True
    view = panel.render()
    assert view.state.time_range is TimeRange.ONE_DAY
    assert view.comparison_button.label == "Compare"

    assert panel.toggle_comparison() is True
    dataset = panel.state.dataset
    selection = panel.selection()
    assert panel.state.show_comparison is True
    assert selection.kind == "comparison"
    assert selection.series is dataset.comparison
    view = panel.render()
    assert view.comparison_button.label == "Hide Comparison"
    assert len(view.figure.data) == 3

    assert panel.toggle_comparison() is True
    assert panel.state.show_comparison is False
    assert panel.selection().series is dataset.base
    assert len(panel.render().figure.data) == 2


def test_toggle_comparison_without_data_reports_notice(bridge: BrowserFullscreenBridge) -> None:
    chart_panel = ChartPanel(bridge, generator=FailingGenerator())
    with chart_panel:
        view = chart_panel.render()
        assert view.body == "empty"
        assert view.placeholder == EMPTY_TEXT
        assert view.price_text == "$63179.71"

        assert chart_panel.toggle_comparison() is False
        assert chart_panel.notice == "Chart data is not available"
        assert chart_panel.state.show_comparison is False
        assert chart_panel.render().notice == "Chart data is not available"


def test_fullscreen_round_trip(panel: ChartPanel, bridge: BrowserFullscreenBridge) -> None:
    assert panel.toggle_fullscreen() is True
    view = panel.render()
    assert view.commands == [{"action": "requestFullscreen", "element": "chart-container"}]
    assert view.state.is_fullscreen is False

    panel.dispatch_platform_event("mozfullscreenchange", "chart-container")
    view = panel.render()
    assert view.state.is_fullscreen is True
    assert view.container_padding == FULLSCREEN_PADDING
    assert view.fullscreen_button.icon == "compress-arrows-alt"

    assert panel.toggle_fullscreen() is True
    assert panel.render().commands == [{"action": "exitFullscreen"}]
    panel.dispatch_platform_event("MSFullscreenChange", None)
    assert panel.state.is_fullscreen is False


def test_double_click_queues_one_request(panel: ChartPanel) -> None:
    assert panel.toggle_fullscreen() is True
    assert panel.toggle_fullscreen() is False
    view = panel.render()
    assert view.commands == [{"action": "requestFullscreen", "element": "chart-container"}]
    assert view.notice is None


def test_escape_exit_is_reflected(panel: ChartPanel) -> None:
    panel.toggle_fullscreen()
    panel.dispatch_platform_event("fullscreenchange", "chart-container")
    panel.dispatch_platform_event("webkitfullscreenchange", None)
    assert panel.render().container_padding == WINDOWED_PADDING


def test_fullscreen_denied_leaves_notice() -> None:
    with ChartPanel(BrowserFullscreenBridge(enabled=False), rng=5) as chart_panel:
        assert chart_panel.toggle_fullscreen() is False
        view = chart_panel.render()
        assert view.state.is_fullscreen is False
        assert view.notice == "Fullscreen is not available"
        assert view.commands == []


def test_async_platform_rejection_leaves_notice(panel: ChartPanel) -> None:
    panel.toggle_fullscreen()
    panel.dispatch_platform_event("webkitfullscreenerror")
    view = panel.render()
    assert view.state.is_fullscreen is False
    assert "webkitfullscreenerror" in view.notice


def test_hover_draws_crosshair(panel: ChartPanel) -> None:
    panel.hover(10)
    assert len(panel.render().figure.layout.shapes) == 2
    panel.hover(None)
    assert len(panel.render().figure.layout.shapes) == 0


def test_tick_updates_indicator(panel: ChartPanel) -> None:
    panel.tick(64123.456)
    assert panel.render().price_text == "$64123.46"
    with pytest.raises(InvalidInput):
        panel.tick(-5)
    assert panel.render().price_text == "$64123.46"


def test_unmount_releases_listeners(bridge: BrowserFullscreenBridge) -> None:
    with pytest.raises(RuntimeError):
        with ChartPanel(bridge, rng=3):
            assert bridge.listener_count() == 8
            raise RuntimeError("shell tore down")
    assert bridge.listener_count() == 0


def test_mount_is_idempotent(panel: ChartPanel, bridge: BrowserFullscreenBridge) -> None:
    dataset = panel.state.dataset
    panel.mount()
    assert panel.state.dataset is dataset
    assert bridge.listener_count() == 8


def test_dispatch_requires_browser_bridge() -> None:
    class _Platform:
        fullscreen_element = None

        def request_fullscreen(self, element): ...
        def exit_fullscreen(self): ...
        def add_event_listener(self, event_name, handler): ...
        def remove_event_listener(self, event_name, handler): ...

    chart_panel = ChartPanel(_Platform(), rng=1)
    with pytest.raises(TypeError):
        chart_panel.dispatch_platform_event("fullscreenchange", None)

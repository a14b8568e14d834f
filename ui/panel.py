"""Chart panel composition root: wires state, fullscreen, overlay and renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import threading
from typing import Any

import numpy as np
import plotly.graph_objects as go

from core.crosshair import CrosshairOverlay
from core.errors import PreconditionFailed
from core.fullscreen import DEFAULT_CONTAINER_ID, BrowserFullscreenBridge, FullscreenController, FullscreenPlatform
from core.generator import ComparisonDeriver, SeriesGenerator
from core.series import TimeRange
from core.view_state import ChartViewState, ViewState
from ui.charts import PlotlyChartRenderer, RenderRequest, SeriesSelection, chart_options_for

LOGGER = logging.getLogger("pricepanel.panel")

LOADING_TEXT = "Loading..."
EMPTY_TEXT = "No data available"
FULLSCREEN_PADDING = "60px 20px"
WINDOWED_PADDING = "0px"


@dataclass(frozen=True)
class ControlButton:
    key: str
    label: str
    active: bool = False
    icon: str | None = None


@dataclass
class PanelView:
    """Everything the page needs to draw the panel once."""

    state: ViewState
    time_range_buttons: list[ControlButton]
    fullscreen_button: ControlButton
    comparison_button: ControlButton
    body: str
    placeholder: str | None = None
    figure: go.Figure | None = None
    price_text: str | None = None
    container_padding: str = WINDOWED_PADDING
    notice: str | None = None
    commands: list[dict[str, Any]] = field(default_factory=list)


class ChartPanel:
    """
    Self-contained price chart panel.

    All operations take the panel lock, so each transition runs to completion
    before the next one starts even when the web shell serves from threads.
    """

    def __init__(
        self,
        platform: FullscreenPlatform | None = None,
        *,
        rng: np.random.Generator | int | None = None,
        generator: SeriesGenerator | None = None,
        deriver: ComparisonDeriver | None = None,
        renderer: PlotlyChartRenderer | None = None,
        overlay: CrosshairOverlay | None = None,
        element: str = DEFAULT_CONTAINER_ID,
    ) -> None:
        shared_rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
        self.platform = platform if platform is not None else BrowserFullscreenBridge()
        self.fullscreen = FullscreenController(self.platform, element=element)
        self.state = ChartViewState(
            generator or SeriesGenerator(shared_rng),
            deriver or ComparisonDeriver(shared_rng),
            self.fullscreen,
        )
        self.renderer = renderer or PlotlyChartRenderer()
        self.overlay = overlay or CrosshairOverlay()
        self.lock = threading.RLock()
        self._mounted = False
        self._notice: str | None = None

        self.fullscreen.failed.connect(self._on_fullscreen_failed, sender=self.fullscreen)

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def notice(self) -> str | None:
        return self._notice

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        with self.lock:
            if self._mounted:
                return
            self.fullscreen.attach()
            self._mounted = True
            LOGGER.info("Chart panel mounted (range=%s)", self.state.time_range.value)
            self.state.load()

    def unmount(self) -> None:
        with self.lock:
            try:
                if self._mounted:
                    LOGGER.info("Chart panel unmounted")
            finally:
                self.fullscreen.detach()
                self._mounted = False

    def __enter__(self) -> "ChartPanel":
        self.mount()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unmount()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def select_time_range(self, label: TimeRange | str) -> bool:
        with self.lock:
            self._notice = None
            return self.state.set_time_range(label)

    def toggle_comparison(self) -> bool:
        """Returns False (and leaves an inline notice) when there is nothing to compare."""
        with self.lock:
            try:
                self.state.toggle_comparison()
            except PreconditionFailed as exc:
                self._notice = str(exc)
                return False
            self._notice = None
            return True

    def toggle_fullscreen(self) -> bool:
        with self.lock:
            if self.fullscreen.request_pending:
                LOGGER.debug("Fullscreen toggle ignored; platform has not answered the last request")
                return False
            if self.platform.fullscreen_element is None:
                applied = self.state.request_fullscreen()
                if not applied:
                    self._notice = "Fullscreen is not available"
            else:
                applied = self.state.exit_fullscreen()
            return applied

    def dispatch_platform_event(self, event_name: str, element: str | None = None) -> None:
        """Feed a raw page fullscreen event into the browser bridge."""
        with self.lock:
            if not isinstance(self.platform, BrowserFullscreenBridge):
                raise TypeError("Platform events can only be dispatched into a BrowserFullscreenBridge")
            self.platform.dispatch(event_name, element)

    def hover(self, value_index: int | None) -> None:
        with self.lock:
            self.renderer.set_hover(value_index)

    def tick(self, price: float) -> None:
        with self.lock:
            self.state.tick(price)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def selection(self) -> SeriesSelection | None:
        snapshot = self.state.snapshot()
        dataset = snapshot.dataset
        if snapshot.is_loading or dataset is None:
            return None
        comparison = dataset.comparison if snapshot.show_comparison else None
        return SeriesSelection(base=dataset.base, comparison=comparison)

    def _controls(self, snapshot: ViewState) -> tuple[list[ControlButton], ControlButton, ControlButton]:
        ranges = [
            ControlButton(key=item.value, label=item.label, active=item is snapshot.time_range)
            for item in TimeRange
        ]
        fullscreen = ControlButton(
            key="fullscreen",
            label="Fullscreen",
            active=snapshot.is_fullscreen,
            icon="compress-arrows-alt" if snapshot.is_fullscreen else "expand-arrows-alt",
        )
        comparison = ControlButton(
            key="comparison",
            label="Hide Comparison" if snapshot.show_comparison else "Compare",
            active=snapshot.show_comparison,
            icon="chart-line",
        )
        return ranges, fullscreen, comparison

    def render(self) -> PanelView:
        with self.lock:
            snapshot = self.state.snapshot()
            ranges, fullscreen, comparison = self._controls(snapshot)
            view = PanelView(
                state=snapshot,
                time_range_buttons=ranges,
                fullscreen_button=fullscreen,
                comparison_button=comparison,
                body="loading",
                container_padding=FULLSCREEN_PADDING if snapshot.is_fullscreen else WINDOWED_PADDING,
                notice=self._notice or snapshot.error,
            )
            self._notice = None

            if snapshot.is_loading:
                view.placeholder = LOADING_TEXT
            else:
                view.price_text = f"${snapshot.current_price:.2f}"
                selection = self.selection()
                if selection is None:
                    view.body = "empty"
                    view.placeholder = EMPTY_TEXT
                else:
                    view.body = "chart"
                    view.figure = self.renderer.render(
                        RenderRequest(
                            selection=selection,
                            options=chart_options_for(snapshot.show_comparison),
                            draw_hooks=(self.overlay,),
                        )
                    )

            if isinstance(self.platform, BrowserFullscreenBridge):
                view.commands = self.platform.drain_commands()
            return view

    def _on_fullscreen_failed(self, sender: Any, error: Exception) -> None:
        self._notice = str(error)

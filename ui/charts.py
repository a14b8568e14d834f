"""Plotly renderer for the price panel: traces, options, hover and draw hooks."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import Any, Callable, Sequence

import plotly.graph_objects as go
import plotly.io as pio
from plotly.offline import plot

from config.settings import (
    CHART_HEIGHT,
    CHART_MARGIN,
    CHART_WIDTH,
    COMPARISON_COLOR,
    COMPARISON_FILL,
    PRICE_COLOR,
    PRICE_FILL,
    VOLUME_AXIS_MAX,
    VOLUME_COLOR,
)
from core.crosshair import AxisBounds, HoverPoint, LineCommand
from core.errors import InvalidInput
from core.series import Series

LOGGER = logging.getLogger("pricepanel.charts")

DrawHook = Callable[[HoverPoint | None, AxisBounds], Sequence[LineCommand]]


@dataclass(frozen=True)
class SeriesSelection:
    """What the panel asks the renderer to draw: base alone, or base plus comparison."""

    base: Series
    comparison: Series | None = None

    @property
    def kind(self) -> str:
        return "base" if self.comparison is None else "comparison"

    @property
    def series(self) -> Series:
        """The series the visibility flag selected."""
        return self.base if self.comparison is None else self.comparison


@dataclass(frozen=True)
class ChartOptions:
    """Axis, legend and tooltip settings handed to the renderer."""

    show_legend: bool = False
    legend_position: str = "top"
    hover_mode: str = "index"
    show_ticks: bool = False
    volume_axis_max: float = VOLUME_AXIS_MAX


@dataclass(frozen=True)
class RenderRequest:
    selection: SeriesSelection
    options: ChartOptions = field(default_factory=ChartOptions)
    draw_hooks: tuple[DrawHook, ...] = ()


def format_price_tooltip(label: str, value: float) -> str:
    return f"{label}: ${value:.2f}"


def format_volume_tooltip(value: float) -> str:
    return f"Volume: {value:,.0f}"


def chart_options_for(show_comparison: bool) -> ChartOptions:
    """Legend is only useful once a second price line is on screen."""
    return ChartOptions(show_legend=show_comparison)


def _price_range(selection: SeriesSelection) -> tuple[float, float]:
    prices = list(selection.base.prices)
    if selection.comparison is not None:
        prices.extend(selection.comparison.prices)
    low, high = min(prices), max(prices)
    pad = (high - low) * 0.05 if high > low else max(abs(high) * 0.01, 1.0)
    return low - pad, high + pad


def _dash_pattern(dash: Sequence[int]) -> str:
    return ",".join(f"{segment}px" for segment in dash) if dash else "solid"


class PlotlyChartRenderer:
    """
    Black-box chart renderer built on plotly.

    The renderer is the only owner of hover state. Each render() resolves the
    current HoverPoint first and then runs the draw hooks with it.
    """

    def __init__(self, width: int = CHART_WIDTH, height: int = CHART_HEIGHT, margin: dict[str, int] | None = None) -> None:
        self.width = width
        self.height = height
        self.margin = dict(margin or CHART_MARGIN)
        self._hover_index: int | None = None

    @property
    def hover_index(self) -> int | None:
        return self._hover_index

    def set_hover(self, value_index: int | None) -> None:
        """Pointer moved onto a 1-based point index, or left the plot (None)."""
        if value_index is not None:
            value_index = int(value_index)
            if value_index < 1:
                raise InvalidInput(f"Hover index must be >= 1, got {value_index}")
        self._hover_index = value_index

    def axis_bounds(self) -> AxisBounds:
        return AxisBounds(
            left=float(self.margin["l"]),
            right=float(self.width - self.margin["r"]),
            top=float(self.margin["t"]),
            bottom=float(self.height - self.margin["b"]),
        )

    def hover_point(self, selection: SeriesSelection) -> HoverPoint | None:
        """Resolve the hovered index to pixels against the base price line."""
        index = self._hover_index
        count = len(selection.base)
        if index is None or count == 0 or index > count:
            return None

        bounds = self.axis_bounds()
        low, high = _price_range(selection)
        price = selection.base[index - 1].price
        pixel_x = bounds.left + (index - 0.5) / count * (bounds.right - bounds.left)
        pixel_y = bounds.bottom - (price - low) / (high - low) * (bounds.bottom - bounds.top)
        return HoverPoint(pixel_x=pixel_x, pixel_y=pixel_y, value_index=index)

    def _shape_for(self, command: LineCommand, bounds: AxisBounds) -> dict[str, Any]:
        span_x = bounds.right - bounds.left
        span_y = bounds.bottom - bounds.top
        return {
            "type": "line",
            "xref": "paper",
            "yref": "paper",
            "x0": (command.x0 - bounds.left) / span_x,
            "x1": (command.x1 - bounds.left) / span_x,
            "y0": (bounds.bottom - command.y0) / span_y,
            "y1": (bounds.bottom - command.y1) / span_y,
            "line": {"color": command.color, "width": command.width, "dash": _dash_pattern(command.dash)},
            "layer": "above",
        }

    def render(self, request: RenderRequest) -> go.Figure:
        selection = request.selection
        options = request.options
        base = selection.base
        if len(base) == 0:
            raise InvalidInput("Cannot render an empty series")

        frame = base.to_frame()
        figure = go.Figure()
        figure.add_trace(
            go.Scatter(
                x=frame["Index"],
                y=frame["Price"],
                mode="lines",
                name=base.label,
                line={"color": PRICE_COLOR, "width": 2},
                fill="tozeroy",
                fillcolor=PRICE_FILL,
                text=[format_price_tooltip(base.label, value) for value in frame["Price"]],
                hovertemplate="%{text}<extra></extra>",
                yaxis="y",
            )
        )
        figure.add_trace(
            go.Bar(
                x=frame["Index"],
                y=frame["Volume"],
                name="Volume",
                marker={"color": VOLUME_COLOR},
                width=0.4,
                text=[format_volume_tooltip(value) for value in frame["Volume"].fillna(0.0)],
                textposition="none",
                hovertemplate="%{text}<extra></extra>",
                yaxis="y2",
            )
        )

        if selection.comparison is not None:
            comparison = selection.comparison.to_frame()
            figure.add_trace(
                go.Scatter(
                    x=comparison["Index"],
                    y=comparison["Price"],
                    mode="lines",
                    name=selection.comparison.label,
                    line={"color": COMPARISON_COLOR, "width": 2},
                    fill="tozeroy",
                    fillcolor=COMPARISON_FILL,
                    text=[format_price_tooltip(selection.comparison.label, value) for value in comparison["Price"]],
                    hovertemplate="%{text}<extra></extra>",
                    yaxis="y",
                )
            )

        low, high = _price_range(selection)
        axis_common = {"showticklabels": options.show_ticks, "showline": True, "automargin": False, "zeroline": False}
        figure.update_layout(
            template="plotly_white",
            width=self.width,
            height=self.height,
            autosize=False,
            margin=self.margin,
            showlegend=options.show_legend,
            legend={"orientation": "h", "x": 0, "y": 1.0, "yanchor": "bottom"}
            if options.legend_position == "top"
            else {"orientation": "h"},
            hovermode="x" if options.hover_mode == "index" else "closest",
            plot_bgcolor="white",
            paper_bgcolor="white",
            xaxis={**axis_common, "range": [0.5, len(base) + 0.5], "showgrid": True},
            yaxis={**axis_common, "range": [low, high], "showgrid": False, "side": "left"},
            yaxis2={
                **axis_common,
                "range": [0, options.volume_axis_max],
                "showgrid": False,
                "side": "right",
                "overlaying": "y",
            },
        )

        bounds = self.axis_bounds()
        hover = self.hover_point(selection)
        for hook in request.draw_hooks:
            for command in hook(hover, bounds):
                figure.add_shape(**self._shape_for(command, bounds))

        return figure

    def to_html(self, figure: go.Figure) -> str:
        """Embeddable div; the page loads plotly.js separately."""
        return plot(
            figure,
            output_type="div",
            include_plotlyjs=False,
            config={"displaylogo": False, "responsive": False},
        )

    def to_json(self, figure: go.Figure) -> dict[str, Any]:
        return json.loads(pio.to_json(figure))

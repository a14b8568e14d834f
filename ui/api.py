"""Request parsing and JSON payload helpers for the chart panel API routes."""

from __future__ import annotations

from typing import Any

from core.errors import InvalidInput
from ui.charts import PlotlyChartRenderer
from ui.panel import ControlButton, PanelView


def parse_price(raw_value: Any) -> float:
    """Parse a numeric price from a JSON body value; range checks happen in tick()."""
    try:
        value = float(raw_value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Price must be numeric, got {raw_value!r}") from exc
    return value


def parse_hover_index(raw_value: Any) -> int | None:
    """Parse a 1-based hovered point index; null/empty means the pointer left the plot."""
    if raw_value is None or raw_value == "":
        return None
    if isinstance(raw_value, bool):
        raise InvalidInput("Hover index must be an integer")
    try:
        value = int(raw_value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Hover index must be an integer, got {raw_value!r}") from exc
    if value < 1:
        raise InvalidInput(f"Hover index must be >= 1, got {value}")
    return value


def _serialize_button(button: ControlButton) -> dict[str, Any]:
    return {"key": button.key, "label": button.label, "active": button.active, "icon": button.icon}


def serialize_view(view: PanelView, renderer: PlotlyChartRenderer) -> dict[str, Any]:
    """Convert a rendered panel view to the API payload."""
    state = view.state
    dataset = state.dataset
    return {
        "state": {
            "time_range": state.time_range.value,
            "phase": state.phase.value,
            "is_loading": state.is_loading,
            "is_fullscreen": state.is_fullscreen,
            "show_comparison": state.show_comparison,
            "current_price": round(state.current_price, 2),
            "points": len(dataset.base) if dataset is not None else 0,
            "error": state.error,
        },
        "controls": {
            "time_ranges": [_serialize_button(item) for item in view.time_range_buttons],
            "fullscreen": _serialize_button(view.fullscreen_button),
            "comparison": _serialize_button(view.comparison_button),
        },
        "body": view.body,
        "placeholder": view.placeholder,
        "figure": renderer.to_json(view.figure) if view.figure is not None else None,
        "price_text": view.price_text,
        "container_padding": view.container_padding,
        "notice": view.notice,
        "commands": view.commands,
    }

"""Crosshair overlay drawn after each chart render pass."""

from __future__ import annotations

from dataclasses import dataclass

from config.settings import CROSSHAIR_COLOR, CROSSHAIR_DASH


@dataclass(frozen=True)
class HoverPoint:
    """Renderer-reported active point, in pixels."""

    pixel_x: float
    pixel_y: float
    value_index: int


@dataclass(frozen=True)
class AxisBounds:
    """Pixel extent of the plot area (y grows downward)."""

    left: float
    right: float
    top: float
    bottom: float


@dataclass(frozen=True)
class LineCommand:
    """A single stroked line segment in pixel space."""

    x0: float
    y0: float
    x1: float
    y1: float
    width: float = 1.0
    color: str = CROSSHAIR_COLOR
    dash: tuple[int, ...] = CROSSHAIR_DASH


class CrosshairOverlay:
    """Dashed vertical + horizontal guides through the hovered point."""

    def __init__(self, color: str = CROSSHAIR_COLOR, width: float = 1.0, dash: tuple[int, ...] = CROSSHAIR_DASH) -> None:
        self.color = color
        self.width = width
        self.dash = tuple(dash)

    def __call__(self, hover: HoverPoint | None, bounds: AxisBounds) -> list[LineCommand]:
        return self.draw(hover, bounds)

    def draw(self, hover: HoverPoint | None, bounds: AxisBounds) -> list[LineCommand]:
        if hover is None:
            return []

        style = {"width": self.width, "color": self.color, "dash": self.dash}
        vertical = LineCommand(x0=hover.pixel_x, y0=bounds.top, x1=hover.pixel_x, y1=bounds.bottom, **style)
        horizontal = LineCommand(x0=bounds.left, y0=hover.pixel_y, x1=bounds.right, y1=hover.pixel_y, **style)
        return [vertical, horizontal]

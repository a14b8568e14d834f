"""Tests for the crosshair overlay geometry."""

from __future__ import annotations

from core.crosshair import AxisBounds, CrosshairOverlay, HoverPoint, LineCommand

BOUNDS = AxisBounds(left=40.0, right=800.0, top=30.0, bottom=380.0)


def test_no_hover_draws_nothing() -> None:
    assert CrosshairOverlay().draw(None, BOUNDS) == []


def test_hover_draws_vertical_and_horizontal_guides() -> None:
    vertical, horizontal = CrosshairOverlay()(HoverPoint(pixel_x=120.0, pixel_y=200.0, value_index=3), BOUNDS)

    assert (vertical.x0, vertical.y0, vertical.x1, vertical.y1) == (120.0, 30.0, 120.0, 380.0)
    assert (horizontal.x0, horizontal.y0, horizontal.x1, horizontal.y1) == (40.0, 200.0, 800.0, 200.0)
    for line in (vertical, horizontal):
        assert line.dash == (5, 5)
        assert line.width == 1.0
        assert line.color == "rgba(0, 0, 0, 0.2)"


def test_overlay_keeps_no_hover_state() -> None:
    overlay = CrosshairOverlay()
    overlay.draw(HoverPoint(pixel_x=100.0, pixel_y=100.0, value_index=1), BOUNDS)
    assert overlay.draw(None, BOUNDS) == []

    second = overlay.draw(HoverPoint(pixel_x=300.0, pixel_y=50.0, value_index=9), BOUNDS)
    assert second[0].x0 == 300.0
    assert second[1].y0 == 50.0


def test_custom_style_is_applied() -> None:
    overlay = CrosshairOverlay(color="#000", width=2.0, dash=[2, 3])
    lines = overlay.draw(HoverPoint(pixel_x=50.0, pixel_y=60.0, value_index=1), BOUNDS)
    assert lines == [
        LineCommand(x0=50.0, y0=30.0, x1=50.0, y1=380.0, width=2.0, color="#000", dash=(2, 3)),
        LineCommand(x0=40.0, y0=60.0, x1=800.0, y1=60.0, width=2.0, color="#000", dash=(2, 3)),
    ]

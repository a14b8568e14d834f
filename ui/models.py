"""UI data models for the dashboard shell around the chart panel."""

from __future__ import annotations

from dataclasses import dataclass

from config.settings import INITIAL_CHANGE, INITIAL_CHANGE_PCT, INITIAL_PRICE


TABS: list[tuple[str, str]] = [
    ("summary", "Summary"),
    ("chart", "Chart"),
    ("statistics", "Statistics"),
    ("analysis", "Analysis"),
    ("settings", "Settings"),
]
DEFAULT_TAB = "chart"

PLACEHOLDER_SECTIONS: dict[str, str] = {
    "summary": "Summary content",
    "statistics": "Statistics content",
    "analysis": "Analysis content",
    "settings": "Settings content",
}


@dataclass
class HeaderViewModel:
    """Headline price and change shown above the tabs."""

    price: float = INITIAL_PRICE
    change: float = INITIAL_CHANGE
    change_pct: float = INITIAL_CHANGE_PCT

    @property
    def is_positive(self) -> bool:
        return self.change > 0

    @property
    def price_text(self) -> str:
        return f"${self.price:.2f} USD"

    @property
    def change_text(self) -> str:
        sign = "+" if self.is_positive else ""
        return f"{sign}{self.change:.2f} ({self.change_pct:.2f}%)"


def resolve_tab(raw: str | None) -> str:
    """Map a requested tab key to a known one, falling back to the chart."""
    key = (raw or "").strip().lower()
    known = {item for item, _ in TABS}
    return key if key in known else DEFAULT_TAB

"""Time ranges and price/volume series containers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

import pandas as pd

from core.errors import InvalidInput


class TimeRange(str, Enum):
    """Selectable chart windows, in button order."""

    ONE_DAY = "1d"
    THREE_DAYS = "3d"
    ONE_WEEK = "1w"
    ONE_MONTH = "1m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    MAX = "max"

    @classmethod
    def parse(cls, raw: "TimeRange | str") -> "TimeRange":
        """Resolve a button label (case-insensitive) to a range."""
        if isinstance(raw, cls):
            return raw
        label = str(raw or "").strip().lower()
        for member in cls:
            if member.value == label:
                return member
        raise InvalidInput(f"Unknown time range: {raw!r}")

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class SeriesPoint:
    """One chart sample. Comparison points carry no volume."""

    index: int
    price: float
    volume: float | None = None


@dataclass(frozen=True)
class Series:
    """Immutable ordered run of points labelled by 1-based index."""

    points: tuple[SeriesPoint, ...]
    label: str = "Price (USD)"

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[SeriesPoint]:
        return iter(self.points)

    def __getitem__(self, position: int) -> SeriesPoint:
        return self.points[position]

    @property
    def labels(self) -> list[int]:
        return [point.index for point in self.points]

    @property
    def prices(self) -> list[float]:
        return [point.price for point in self.points]

    @property
    def volumes(self) -> list[float | None]:
        return [point.volume for point in self.points]

    @property
    def has_volume(self) -> bool:
        return any(point.volume is not None for point in self.points)

    def to_frame(self) -> pd.DataFrame:
        """Return the series as an Index/Price/Volume frame for plotting."""
        return pd.DataFrame(
            {
                "Index": self.labels,
                "Price": self.prices,
                "Volume": [float("nan") if value is None else value for value in self.volumes],
            }
        )


@dataclass(frozen=True)
class Dataset:
    """Base series plus its optional derived comparison."""

    base: Series
    comparison: Series | None = None

    def __post_init__(self) -> None:
        if self.comparison is not None and len(self.comparison) != len(self.base):
            raise InvalidInput(
                f"Comparison length {len(self.comparison)} does not match base length {len(self.base)}"
            )

"""Error taxonomy for the chart panel."""

from __future__ import annotations


class ChartError(Exception):
    """Base class for recoverable chart panel failures."""


class InvalidInput(ChartError, ValueError):
    """An argument cannot be used (empty series, unknown range label, bad price)."""


class GenerationFailure(ChartError):
    """The data source or comparison deriver could not produce a dataset."""

    def __init__(self, message: str, time_range: object = None) -> None:
        super().__init__(message)
        self.time_range = time_range


class PreconditionFailed(ChartError):
    """An operation was invoked in a state that does not allow it."""


class FullscreenRequestFailure(ChartError):
    """The platform refused to enter or leave fullscreen."""

"""Chart view state machine: range selection, data cycles, comparison and fullscreen flags."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
import asyncio
import itertools
import logging
import math
from typing import Any

from blinker import Signal

from config.settings import DEFAULT_TIME_RANGE, INITIAL_PRICE, POINT_COUNT
from core.errors import FullscreenRequestFailure, GenerationFailure, InvalidInput, PreconditionFailed
from core.fullscreen import FullscreenController
from core.generator import ComparisonDeriver, SeriesGenerator, SeriesSource
from core.series import Dataset, Series, TimeRange

LOGGER = logging.getLogger("pricepanel.view_state")


class Phase(str, Enum):
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class ViewState:
    """Immutable snapshot of everything the panel renders from."""

    time_range: TimeRange
    phase: Phase
    is_fullscreen: bool
    show_comparison: bool
    dataset: Dataset | None
    current_price: float
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.phase is Phase.LOADING


@dataclass(frozen=True)
class LoadRequest:
    """Identity of one generation cycle; only the latest one may be applied."""

    request_id: int
    time_range: TimeRange


class ChartViewState:
    """
    Owns the panel's ViewState and mediates every transition.

    Each load cycle is LOADING -> READY. A failed cycle still ends in READY,
    with no dataset and the error recorded. Results of superseded cycles are
    dropped by request id.
    """

    def __init__(
        self,
        generator: SeriesGenerator | None = None,
        deriver: ComparisonDeriver | None = None,
        fullscreen: FullscreenController | None = None,
        *,
        time_range: TimeRange | str = DEFAULT_TIME_RANGE,
        current_price: float = INITIAL_PRICE,
        point_count: int = POINT_COUNT,
    ) -> None:
        self.generator = generator or SeriesGenerator()
        self.deriver = deriver or ComparisonDeriver()
        self.fullscreen = fullscreen
        self.point_count = point_count

        self.changed = Signal("view-state-changed")
        self.generation_failed = Signal("generation-failed")
        self.precondition_failed = Signal("precondition-failed")

        initial_range = TimeRange.parse(time_range)
        self._state = ViewState(
            time_range=initial_range,
            phase=Phase.LOADING,
            is_fullscreen=bool(fullscreen and fullscreen.is_fullscreen),
            show_comparison=False,
            dataset=None,
            current_price=float(current_price),
        )
        self._request_ids = itertools.count(1)
        self._pending: LoadRequest | None = None
        self._last_request: LoadRequest | None = None

        if fullscreen is not None:
            fullscreen.changed.connect(self._on_fullscreen_changed, sender=fullscreen)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def snapshot(self) -> ViewState:
        return self._state

    @property
    def time_range(self) -> TimeRange:
        return self._state.time_range

    @property
    def requested_range(self) -> TimeRange:
        """Range of the most recent request (equals time_range once settled)."""
        if self._last_request is None:
            return self._state.time_range
        return self._last_request.time_range

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_fullscreen(self) -> bool:
        return self._state.is_fullscreen

    @property
    def show_comparison(self) -> bool:
        return self._state.show_comparison

    @property
    def dataset(self) -> Dataset | None:
        return self._state.dataset

    @property
    def current_price(self) -> float:
        return self._state.current_price

    @property
    def error(self) -> str | None:
        return self._state.error

    # ------------------------------------------------------------------
    # Time range / data cycle
    # ------------------------------------------------------------------

    def _is_noop(self, target: TimeRange) -> bool:
        last = self._last_request
        if last is None or last.time_range is not target:
            return False
        # A failed load may be retried by re-selecting the same range.
        return self._pending is not None or self._state.dataset is not None

    def set_time_range(self, time_range: TimeRange | str) -> bool:
        """Switch range and regenerate. Returns False when the range is already active."""
        return self.load(time_range)

    def load(self, time_range: TimeRange | str | None = None, force: bool = False) -> bool:
        """Run one synchronous generation cycle for the given (or requested) range."""
        target = self.requested_range if time_range is None else TimeRange.parse(time_range)
        if not force and self._is_noop(target):
            LOGGER.debug("Range %s already active; skipping regeneration", target.value)
            return False

        request = self.begin_load(target)
        try:
            base = self.generator.generate(self.point_count)
        except Exception as exc:
            self.fail_load(request, exc)
            return True
        self.complete_load(request, base)
        return True

    async def set_time_range_async(
        self,
        time_range: TimeRange | str,
        source: SeriesSource,
        force: bool = False,
    ) -> bool:
        """Like set_time_range, awaiting the source. Returns True only if this result was applied."""
        target = TimeRange.parse(time_range)
        if not force and self._is_noop(target):
            LOGGER.debug("Range %s already active; skipping fetch", target.value)
            return False

        request = self.begin_load(target)
        try:
            base = await source.fetch(target, self.point_count)
        except asyncio.CancelledError:
            self.fail_load(request, GenerationFailure("Load was cancelled", target))
            raise
        except Exception as exc:
            return self.fail_load(request, exc)
        return self.complete_load(request, base)

    def begin_load(self, time_range: TimeRange | str) -> LoadRequest:
        """Enter LOADING for a new request, superseding any in-flight one."""
        target = TimeRange.parse(time_range)
        request = LoadRequest(request_id=next(self._request_ids), time_range=target)
        if self._pending is not None:
            LOGGER.debug("Request %s superseded by %s", self._pending.request_id, request.request_id)
        self._pending = request
        self._last_request = request
        self._replace(phase=Phase.LOADING, dataset=None)
        return request

    def _is_current(self, request: LoadRequest) -> bool:
        if self._pending is None or self._pending.request_id != request.request_id:
            LOGGER.debug(
                "Discarding stale result for request %s (%s)",
                request.request_id,
                request.time_range.value,
            )
            return False
        return True

    def complete_load(self, request: LoadRequest, base: Series) -> bool:
        """Derive the comparison and settle into READY. Stale requests are ignored."""
        if not self._is_current(request):
            return False
        try:
            dataset = Dataset(base=base, comparison=self.deriver.derive(base))
        except Exception as exc:
            return self.fail_load(request, exc)

        self._pending = None
        self._replace(
            phase=Phase.READY,
            time_range=request.time_range,
            dataset=dataset,
            error=None,
        )
        LOGGER.info("Loaded %s points for range %s", len(base), request.time_range.value)
        return True

    def fail_load(self, request: LoadRequest, exc: BaseException) -> bool:
        """Settle a failed cycle into READY with no dataset."""
        if not self._is_current(request):
            return False

        failure = exc if isinstance(exc, GenerationFailure) else GenerationFailure(str(exc), request.time_range)
        if failure.time_range is None:
            failure.time_range = request.time_range

        self._pending = None
        self._replace(
            phase=Phase.READY,
            time_range=request.time_range,
            dataset=None,
            show_comparison=False,
            error=str(failure),
        )
        LOGGER.warning("Data generation failed for range %s: %s", request.time_range.value, failure)
        self.generation_failed.send(self, error=failure)
        return True

    # ------------------------------------------------------------------
    # Comparison / fullscreen / price
    # ------------------------------------------------------------------

    def toggle_comparison(self) -> bool:
        """Flip comparison visibility; raises PreconditionFailed with nothing to compare."""
        dataset = self._state.dataset
        if self._state.is_loading or dataset is None or dataset.comparison is None:
            error = PreconditionFailed("Chart data is not available")
            LOGGER.warning("Comparison toggle rejected: %s", error)
            self.precondition_failed.send(self, error=error)
            raise error

        show = not self._state.show_comparison
        self._replace(show_comparison=show)
        return show

    def request_fullscreen(self) -> bool:
        """Ask for fullscreen; the flag flips only when the platform confirms."""
        if self.fullscreen is None:
            LOGGER.warning("Fullscreen requested but no controller is bound")
            return False
        try:
            return self.fullscreen.enter()
        except FullscreenRequestFailure as exc:
            LOGGER.warning("Fullscreen request failed: %s", exc)
            return False

    def exit_fullscreen(self) -> bool:
        if self.fullscreen is None:
            return False
        try:
            return self.fullscreen.exit()
        except FullscreenRequestFailure as exc:
            LOGGER.warning("Fullscreen exit failed: %s", exc)
            return False

    def tick(self, price: float) -> None:
        try:
            value = float(price)
        except (TypeError, ValueError) as exc:
            raise InvalidInput(f"Price must be numeric, got {price!r}") from exc
        if not math.isfinite(value) or value < 0:
            raise InvalidInput(f"Price must be a finite non-negative number, got {price!r}")
        self._replace(current_price=value)

    def _on_fullscreen_changed(self, sender: Any, is_fullscreen: bool) -> None:
        self._replace(is_fullscreen=bool(is_fullscreen))

    def _replace(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        self.changed.send(self, state=self._state)

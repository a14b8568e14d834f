"""Fullscreen lifecycle: platform binding and the normalizing controller."""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

from blinker import Signal

from core.errors import FullscreenRequestFailure, InvalidInput

LOGGER = logging.getLogger("pricepanel.fullscreen")

FULLSCREEN_CHANGE_EVENTS = (
    "fullscreenchange",
    "webkitfullscreenchange",
    "mozfullscreenchange",
    "MSFullscreenChange",
)
FULLSCREEN_ERROR_EVENTS = (
    "fullscreenerror",
    "webkitfullscreenerror",
    "mozfullscreenerror",
    "MSFullscreenError",
)

DEFAULT_CONTAINER_ID = "chart-container"

EventHandler = Callable[[str], None]


class FullscreenPlatform(Protocol):
    """The document-level fullscreen API as seen by the controller."""

    @property
    def fullscreen_element(self) -> str | None:
        ...

    def request_fullscreen(self, element: str) -> None:
        ...

    def exit_fullscreen(self) -> None:
        ...

    def add_event_listener(self, event_name: str, handler: EventHandler) -> None:
        ...

    def remove_event_listener(self, event_name: str, handler: EventHandler) -> None:
        ...


class BrowserFullscreenBridge:
    """
    Server-side mirror of a browser document's fullscreen state.

    Requests are queued as commands for the page to execute; the page reports
    back every raw (possibly vendor-prefixed) fullscreen event via dispatch().
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._element: str | None = None
        self._listeners: dict[str, list[EventHandler]] = {}
        self._commands: list[dict[str, Any]] = []

    @property
    def fullscreen_element(self) -> str | None:
        return self._element

    def request_fullscreen(self, element: str) -> None:
        if not self.enabled:
            raise FullscreenRequestFailure("Fullscreen is not enabled for this document")
        if not element:
            raise FullscreenRequestFailure("No element available to present fullscreen")
        self._commands.append({"action": "requestFullscreen", "element": element})

    def exit_fullscreen(self) -> None:
        if self._element is None:
            raise FullscreenRequestFailure("Document is not in fullscreen mode")
        self._commands.append({"action": "exitFullscreen"})

    def add_event_listener(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._listeners.setdefault(event_name, [])
        if handler not in handlers:
            handlers.append(handler)

    def remove_event_listener(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._listeners.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self) -> int:
        return sum(len(handlers) for handlers in self._listeners.values())

    def drain_commands(self) -> list[dict[str, Any]]:
        """Return and clear the commands the page still has to run."""
        commands, self._commands = self._commands, []
        return commands

    def dispatch(self, event_name: str, element: str | None = None) -> None:
        """Deliver one raw page event; change events carry the new fullscreen element."""
        if event_name in FULLSCREEN_CHANGE_EVENTS:
            self._element = element or None
        elif event_name not in FULLSCREEN_ERROR_EVENTS:
            raise InvalidInput(f"Unknown fullscreen event: {event_name!r}")

        for handler in list(self._listeners.get(event_name, [])):
            handler(event_name)


class FullscreenController:
    """Collapse the vendor-specific fullscreen events into one changed(bool) signal."""

    def __init__(self, platform: FullscreenPlatform, element: str = DEFAULT_CONTAINER_ID) -> None:
        self.platform = platform
        self.element = element
        self.changed = Signal("fullscreen-changed")
        self.failed = Signal("fullscreen-failed")
        self._confirmed = platform.fullscreen_element is not None
        self._attached = False
        self._pending_action: str | None = None

    @property
    def is_fullscreen(self) -> bool:
        return self._confirmed

    @property
    def attached(self) -> bool:
        return self._attached

    @property
    def request_pending(self) -> bool:
        """A request or exit was sent and the platform has not answered yet."""
        return self._pending_action is not None

    def on_change(self, callback: Callable[[bool], None]) -> Callable[..., None]:
        """Subscribe a plain callback; returns the receiver for later disconnect."""

        def _receiver(sender: Any, is_fullscreen: bool) -> None:
            callback(is_fullscreen)

        self.changed.connect(_receiver, sender=self, weak=False)
        return _receiver

    def attach(self) -> None:
        if self._attached:
            return
        for event_name in FULLSCREEN_CHANGE_EVENTS:
            self.platform.add_event_listener(event_name, self._handle_change)
        for event_name in FULLSCREEN_ERROR_EVENTS:
            self.platform.add_event_listener(event_name, self._handle_error)
        self._attached = True
        LOGGER.debug("Fullscreen listeners attached for #%s", self.element)

    def detach(self) -> None:
        if not self._attached:
            return
        for event_name in FULLSCREEN_CHANGE_EVENTS:
            self.platform.remove_event_listener(event_name, self._handle_change)
        for event_name in FULLSCREEN_ERROR_EVENTS:
            self.platform.remove_event_listener(event_name, self._handle_error)
        self._attached = False
        self._pending_action = None
        LOGGER.debug("Fullscreen listeners detached for #%s", self.element)

    def __enter__(self) -> "FullscreenController":
        self.attach()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.detach()

    def enter(self) -> bool:
        """Ask the platform for fullscreen. Returns False when already fullscreen or a request is unanswered."""
        if self.platform.fullscreen_element is not None or self._pending_action == "enter":
            return False
        self.platform.request_fullscreen(self.element)
        self._pending_action = "enter"
        return True

    def exit(self) -> bool:
        """Ask the platform to leave fullscreen. Returns False when not fullscreen or an exit is unanswered."""
        if self.platform.fullscreen_element is None or self._pending_action == "exit":
            return False
        self.platform.exit_fullscreen()
        self._pending_action = "exit"
        return True

    def _handle_change(self, event_name: str) -> None:
        self._pending_action = None
        active = self.platform.fullscreen_element is not None
        if active == self._confirmed:
            LOGGER.debug("Ignoring %s: fullscreen already %s", event_name, active)
            return
        self._confirmed = active
        LOGGER.info("Fullscreen %s (via %s)", "entered" if active else "exited", event_name)
        self.changed.send(self, is_fullscreen=active)

    def _handle_error(self, event_name: str) -> None:
        self._pending_action = None
        failure = FullscreenRequestFailure(f"Platform rejected the fullscreen request ({event_name})")
        LOGGER.warning("%s", failure)
        self.failed.send(self, error=failure)

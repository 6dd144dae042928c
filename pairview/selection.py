"""Copy-on-select support for the rendered alignment region.

A :class:`SelectionCaptureBridge` owns both the event subscription and the
debounce timer, and releases them together on :meth:`detach`.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .layout import DisplayLine

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.8
COPY_SUCCESS_MESSAGE = "Copied to clipboard"

Anchor = Tuple[int, int]
SelectionListener = Callable[["Selection"], None]
ClipboardWriter = Callable[[str], Any]
Notifier = Callable[[str, str], None]


class Debouncer:
    """Run ``callback`` once a burst of :meth:`trigger` calls has gone quiet.

    Each trigger cancels the pending timer and starts a new one, so only the
    arguments of the last call in a burst reach ``callback``.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[..., None],
        timer_factory: Callable[..., Any] = threading.Timer,
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._delay = delay
        self._callback = callback
        self._timer_factory = timer_factory
        self._lock = threading.RLock()
        self._timer: Optional[Any] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = self._timer_factory(
                self._delay,
                self._fire,
                args=(self._generation, args, kwargs),
            )
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._generation += 1

    def _fire(self, generation: int, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> None:
        with self._lock:
            # superseded or cancelled timers must not run
            if generation != self._generation or self._timer is None:
                return
            self._timer = None
        self._callback(*args, **kwargs)


@dataclass(frozen=True)
class Selection:
    text: str
    start: Optional[Anchor]
    end: Optional[Anchor]


@dataclass(frozen=True)
class RenderedRegion:
    line_lengths: Tuple[int, ...]

    @classmethod
    def from_lines(cls, lines: Sequence[DisplayLine]) -> "RenderedRegion":
        return cls(tuple(len(line) for line in lines))

    def contains(self, anchor: Optional[Anchor]) -> bool:
        if anchor is None:
            return False
        try:
            line_idx, offset = anchor
        except (TypeError, ValueError):
            return False
        if not 0 <= line_idx < len(self.line_lengths):
            return False
        return 0 <= offset <= self.line_lengths[line_idx]


class SelectionEvents:
    """Subscription point for selection-change notifications."""

    def __init__(self) -> None:
        self._listeners: List[SelectionListener] = []
        self._lock = threading.RLock()

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def subscribe(self, listener: SelectionListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SelectionListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def emit(self, selection: Selection) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(selection)


def _ignore_notification(level: str, message: str) -> None:
    del level, message


class SelectionCaptureBridge:
    def __init__(
        self,
        events: SelectionEvents,
        region: RenderedRegion,
        clipboard: ClipboardWriter,
        notify: Optional[Notifier] = None,
        *,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: Callable[..., Any] = threading.Timer,
    ) -> None:
        self._events = events
        self._region = region
        self._clipboard = clipboard
        self._notify = notify or _ignore_notification
        self._debouncer = Debouncer(delay, self._handle_selection, timer_factory)
        self._lock = threading.RLock()
        self._attached = False

    @property
    def attached(self) -> bool:
        with self._lock:
            return self._attached

    @property
    def region(self) -> RenderedRegion:
        with self._lock:
            return self._region

    @region.setter
    def region(self, region: RenderedRegion) -> None:
        with self._lock:
            self._region = region

    def attach(self) -> "SelectionCaptureBridge":
        with self._lock:
            if not self._attached:
                self._events.subscribe(self._on_selection_change)
                self._attached = True
        return self

    def detach(self) -> None:
        with self._lock:
            if self._attached:
                self._events.unsubscribe(self._on_selection_change)
                self._attached = False
            self._debouncer.cancel()

    def __enter__(self) -> "SelectionCaptureBridge":
        return self.attach()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()

    def _on_selection_change(self, selection: Selection) -> None:
        with self._lock:
            if not self._attached:
                return
        self._debouncer.trigger(selection)

    def _handle_selection(self, selection: Selection) -> None:
        with self._lock:
            if not self._attached:
                return
            region = self._region
        if not selection.text:
            return
        if not (region.contains(selection.start) and region.contains(selection.end)):
            logger.debug("Ignoring selection outside the rendered alignment")
            return
        self._copy(selection.text)

    def _copy(self, text: str) -> None:
        try:
            outcome = self._clipboard(text)
        except Exception as exc:
            self._report_failure(exc)
            return
        if isinstance(outcome, Future):
            outcome.add_done_callback(self._on_write_done)
        else:
            self._report_success(text)

    def _on_write_done(self, future: Future) -> None:
        if future.cancelled():
            self._report_failure(RuntimeError("clipboard write was cancelled"))
            return
        exc = future.exception()
        if exc is not None:
            self._report_failure(exc)
        else:
            self._report_success(None)

    def _report_success(self, text: Optional[str]) -> None:
        if text is not None:
            logger.debug("Copied %d characters to clipboard", len(text))
        self._notify("success", COPY_SUCCESS_MESSAGE)

    def _report_failure(self, exc: BaseException) -> None:
        logger.warning("Clipboard write failed: %s", exc)
        try:
            self._notify("error", f"Copy to clipboard failed: {exc}")
        except Exception:
            logger.exception("Clipboard failure notification raised")

from __future__ import annotations

import threading
import unittest
from concurrent.futures import Future

from pairview.compute import compare
from pairview.layout import layout
from pairview.selection import (
    COPY_SUCCESS_MESSAGE,
    Debouncer,
    RenderedRegion,
    Selection,
    SelectionCaptureBridge,
    SelectionEvents,
)


class FakeTimer:
    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args, kwargs)
        self.timers.append(timer)
        return timer


def _region():
    return RenderedRegion.from_lines(layout(compare("ARNDC", "ARNEC"), 3))


class DebouncerTests(unittest.TestCase):
    def test_last_trigger_wins(self):
        calls = []
        factory = FakeTimerFactory()
        debouncer = Debouncer(0.8, calls.append, timer_factory=factory)

        debouncer.trigger("first")
        debouncer.trigger("second")

        self.assertEqual(len(factory.timers), 2)
        self.assertTrue(factory.timers[0].cancelled)
        self.assertEqual(factory.timers[1].interval, 0.8)
        self.assertTrue(factory.timers[1].daemon)

        # a superseded timer that still fires does nothing
        factory.timers[0].fire()
        self.assertEqual(calls, [])

        factory.timers[1].fire()
        self.assertEqual(calls, ["second"])
        self.assertFalse(debouncer.pending)

    def test_cancel_suppresses_pending_call(self):
        calls = []
        factory = FakeTimerFactory()
        debouncer = Debouncer(0.8, calls.append, timer_factory=factory)
        debouncer.trigger("x")
        self.assertTrue(debouncer.pending)
        debouncer.cancel()
        self.assertTrue(factory.timers[0].cancelled)
        factory.timers[0].fire()
        self.assertEqual(calls, [])

    def test_real_timer_fires_once(self):
        done = threading.Event()
        calls = []

        def record(value):
            calls.append(value)
            done.set()

        debouncer = Debouncer(0.05, record)
        debouncer.trigger(1)
        debouncer.trigger(2)
        self.assertTrue(done.wait(2.0))
        self.assertEqual(calls, [2])

    def test_negative_delay_rejected(self):
        with self.assertRaises(ValueError):
            Debouncer(-1, lambda: None)


class RenderedRegionTests(unittest.TestCase):
    def test_contains(self):
        region = _region()
        self.assertEqual(region.line_lengths, (3, 3, 2, 2))
        self.assertTrue(region.contains((0, 0)))
        self.assertTrue(region.contains((3, 2)))
        self.assertFalse(region.contains((3, 3)))
        self.assertFalse(region.contains((4, 0)))
        self.assertFalse(region.contains((-1, 0)))
        self.assertFalse(region.contains(None))
        self.assertFalse(region.contains("outside"))


class SelectionBridgeTests(unittest.TestCase):
    def setUp(self):
        self.events = SelectionEvents()
        self.factory = FakeTimerFactory()
        self.copied = []
        self.notifications = []

    def _bridge(self, clipboard=None):
        return SelectionCaptureBridge(
            self.events,
            _region(),
            clipboard or self.copied.append,
            lambda level, message: self.notifications.append((level, message)),
            timer_factory=self.factory,
        )

    def test_burst_copies_only_last_selection(self):
        bridge = self._bridge().attach()
        self.addCleanup(bridge.detach)

        self.events.emit(Selection("ARN", (0, 0), (0, 3)))
        # second selection arrives 300ms later, inside the quiet window
        self.events.emit(Selection("DC", (2, 0), (2, 2)))
        for timer in self.factory.timers:
            if not timer.cancelled:
                timer.fire()

        self.assertEqual(self.copied, ["DC"])
        self.assertEqual(self.notifications, [("success", COPY_SUCCESS_MESSAGE)])

    def test_selection_outside_region_is_ignored(self):
        bridge = self._bridge().attach()
        self.addCleanup(bridge.detach)

        self.events.emit(Selection("header text", (0, 0), (9, 1)))
        self.factory.timers[-1].fire()
        self.events.emit(Selection("menu", None, None))
        self.factory.timers[-1].fire()

        self.assertEqual(self.copied, [])
        self.assertEqual(self.notifications, [])

    def test_empty_selection_is_ignored(self):
        bridge = self._bridge().attach()
        self.addCleanup(bridge.detach)
        self.events.emit(Selection("", (0, 0), (0, 0)))
        self.factory.timers[-1].fire()
        self.assertEqual(self.copied, [])

    def test_detach_unsubscribes_and_cancels_timer(self):
        bridge = self._bridge().attach()
        self.assertEqual(self.events.listener_count, 1)
        self.events.emit(Selection("ARN", (0, 0), (0, 3)))
        pending = self.factory.timers[-1]

        bridge.detach()

        self.assertFalse(bridge.attached)
        self.assertEqual(self.events.listener_count, 0)
        self.assertTrue(pending.cancelled)
        pending.fire()
        self.events.emit(Selection("ARN", (0, 0), (0, 3)))
        self.assertEqual(self.copied, [])
        self.assertEqual(len(self.factory.timers), 1)

    def test_attach_is_idempotent_and_context_managed(self):
        with self._bridge() as bridge:
            bridge.attach()
            self.assertEqual(self.events.listener_count, 1)
        self.assertEqual(self.events.listener_count, 0)

    def test_clipboard_exception_is_logged_and_reported(self):
        def broken(text):
            raise RuntimeError("clipboard unavailable")

        bridge = self._bridge(clipboard=broken).attach()
        self.addCleanup(bridge.detach)
        self.events.emit(Selection("ARN", (0, 0), (0, 3)))
        with self.assertLogs("pairview.selection", level="WARNING") as logs:
            self.factory.timers[-1].fire()

        self.assertIn("clipboard unavailable", logs.output[0])
        self.assertEqual(self.notifications[0][0], "error")
        self.assertTrue(bridge.attached)

        # the bridge keeps working after a failure
        bridge._clipboard = self.copied.append
        self.events.emit(Selection("DC", (2, 0), (2, 2)))
        self.factory.timers[-1].fire()
        self.assertEqual(self.copied, ["DC"])

    def test_async_clipboard_success_notifies_on_completion(self):
        pending = Future()
        bridge = self._bridge(clipboard=lambda text: pending).attach()
        self.addCleanup(bridge.detach)
        self.events.emit(Selection("ARN", (0, 0), (0, 3)))
        self.factory.timers[-1].fire()
        self.assertEqual(self.notifications, [])

        pending.set_result(None)
        self.assertEqual(self.notifications, [("success", COPY_SUCCESS_MESSAGE)])

    def test_async_clipboard_failure_is_reported(self):
        failed = Future()
        failed.set_exception(OSError("permission denied"))
        bridge = self._bridge(clipboard=lambda text: failed).attach()
        self.addCleanup(bridge.detach)
        self.events.emit(Selection("ARN", (0, 0), (0, 3)))
        with self.assertLogs("pairview.selection", level="WARNING"):
            self.factory.timers[-1].fire()
        self.assertEqual(self.notifications[0][0], "error")
        self.assertIn("permission denied", self.notifications[0][1])


if __name__ == "__main__":
    unittest.main()

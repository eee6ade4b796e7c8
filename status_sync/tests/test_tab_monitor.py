"""Tests for the browser tab monitor poll algorithm."""

import threading
import unittest
from unittest.mock import patch

from status_sync.exceptions import InspectionError
from status_sync.monitoring import BrowserKind, BrowserTabMonitor
from status_sync.tests.fakes import (
    CHROME, FINDER, SAFARI, DeferredExecutor, FakeClock, FakeInspector,
    FrontmostSequence, InlineExecutor, inline_dispatch, tab,
)


class MonitorTestCase(unittest.TestCase):

    def setUp(self):
        patcher = patch("builtins.print")
        patcher.start()
        self.addCleanup(patcher.stop)

    def make_monitor(self, app=CHROME, results=None, executor=None, inspector=None, **kwargs):
        self.clock = FakeClock()
        self.frontmost = FrontmostSequence(app)
        self.inspector = inspector or FakeInspector(results)
        self.executor = executor or InlineExecutor()
        self.emitted = []
        self.monitor = BrowserTabMonitor(
            on_tab_changed=self.emitted.append,
            inspector=self.inspector,
            frontmost_provider=self.frontmost,
            dispatch=inline_dispatch,
            executor=self.executor,
            clock=self.clock,
            **kwargs
        )
        return self.monitor

    def tick(self, advance=1.0):
        self.clock.advance(advance)
        self.monitor.on_poll_tick()


class TestDedup(MonitorTestCase):

    def test_first_tick_inspects_synchronously_and_emits(self):
        snapshot = tab()
        self.make_monitor(results={BrowserKind.CHROME: snapshot})

        self.monitor.on_poll_tick()

        self.assertEqual(self.emitted, [snapshot])
        self.assertEqual(self.executor.submitted, 0)
        state = self.monitor.state
        self.assertEqual(state.last_browser, BrowserKind.CHROME)
        self.assertEqual(state.last_snapshot, snapshot)
        self.assertEqual(state.last_identity, "com.google.Chrome")

    def test_identical_snapshots_emit_once(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})

        self.monitor.on_poll_tick()
        # Equal but distinct instance
        self.inspector.results[BrowserKind.CHROME] = tab()
        self.tick()
        self.tick()

        self.assertEqual(len(self.emitted), 1)
        self.assertEqual(self.executor.submitted, 2)

    def test_changed_tab_is_emitted(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()

        updated = tab(title="Pull requests", url="https://github.com/pulls", index=2)
        self.inspector.results[BrowserKind.CHROME] = updated
        self.tick()

        self.assertEqual(self.emitted, [tab(), updated])

    def test_tab_index_change_alone_is_a_change(self):
        self.make_monitor(results={BrowserKind.CHROME: tab(index=1)})
        self.monitor.on_poll_tick()

        self.inspector.results[BrowserKind.CHROME] = tab(index=3)
        self.tick()

        self.assertEqual(self.emitted, [tab(index=1), tab(index=3)])


class TestThrottle(MonitorTestCase):

    def test_tick_before_min_interval_is_noop(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()

        self.tick(advance=0.5)

        self.assertEqual(len(self.inspector.calls), 1)
        self.assertEqual(self.frontmost.calls, 1)

    def test_poll_time_recorded_after_slow_inspection(self):
        monitor = self.make_monitor()
        self.inspector.clock = self.clock
        self.inspector.duration = 0.5
        self.inspector.results[BrowserKind.CHROME] = tab()

        monitor.on_poll_tick()
        self.assertEqual(monitor.state.last_poll_time, 100.5)

        # 0.6s after completion, 1.1s after the tick started
        self.tick(advance=0.6)
        self.assertEqual(len(self.inspector.calls), 1)


class TestClearTransitions(MonitorTestCase):

    def test_unrecognized_app_clears_once(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()

        self.frontmost.app = FINDER
        self.tick()
        self.tick()

        self.assertEqual(self.emitted, [tab(), None])
        state = self.monitor.state
        self.assertIsNone(state.last_browser)
        self.assertIsNone(state.last_snapshot)
        self.assertEqual(state.last_identity, "com.apple.finder")

    def test_no_frontmost_app_clears(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()

        self.frontmost.app = None
        self.tick()

        self.assertEqual(self.emitted, [tab(), None])
        self.assertIsNone(self.monitor.state.last_browser)
        self.assertIsNone(self.monitor.state.last_identity)

    def test_non_browser_from_start_emits_nothing(self):
        self.make_monitor(app=FINDER)
        self.monitor.on_poll_tick()
        self.tick()

        self.assertEqual(self.emitted, [])
        self.assertEqual(self.inspector.calls, [])

    def test_inspection_failure_clears(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()

        self.inspector.results[BrowserKind.CHROME] = InspectionError("not frontmost")
        self.tick()

        self.assertEqual(self.emitted, [tab(), None])
        self.assertIsNone(self.monitor.state.last_snapshot)

    def test_unexpected_inspector_error_is_not_fatal(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()

        self.inspector.results[BrowserKind.CHROME] = RuntimeError("boom")
        self.tick()

        self.assertEqual(self.emitted, [tab(), None])

    def test_repeated_failures_emit_none_once(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()

        self.inspector.results[BrowserKind.CHROME] = InspectionError("no window")
        for _ in range(4):
            self.tick()

        self.assertEqual(self.emitted, [tab(), None])

    def test_recovers_after_failure(self):
        self.make_monitor(results={BrowserKind.CHROME: InspectionError("no window")})
        self.monitor.on_poll_tick()

        self.inspector.results[BrowserKind.CHROME] = tab()
        self.tick()

        self.assertEqual(self.emitted, [tab()])


class TestValidityBoundary(MonitorTestCase):

    def test_invalid_snapshots_are_treated_as_no_tab(self):
        for invalid in (tab(index=0), tab(title=""), tab(url="")):
            with self.subTest(invalid=invalid):
                self.make_monitor(results={BrowserKind.CHROME: tab()})
                self.monitor.on_poll_tick()

                self.inspector.results[BrowserKind.CHROME] = invalid
                self.tick()

                self.assertEqual(self.emitted, [tab(), None])
                self.assertIsNone(self.monitor.state.last_snapshot)

    def test_invalid_first_result_is_never_emitted(self):
        self.make_monitor(results={BrowserKind.CHROME: tab(index=0)})
        self.monitor.on_poll_tick()

        self.assertEqual(self.emitted, [])


class TestBrowserSwitch(MonitorTestCase):

    def test_switch_inspects_new_browser_in_same_tick(self):
        safari_tab = tab(title="Apple", url="https://apple.com", kind=BrowserKind.SAFARI, index=2)
        self.make_monitor(results={BrowserKind.CHROME: tab(), BrowserKind.SAFARI: safari_tab})
        self.monitor.on_poll_tick()

        self.frontmost.app = SAFARI
        # Throttled without a frontmost notification
        self.monitor.on_poll_tick()
        self.assertEqual(self.emitted, [tab()])

        self.monitor.notify_frontmost_changed()

        self.assertEqual(self.emitted, [tab(), safari_tab])
        self.assertEqual(self.inspector.calls, [BrowserKind.CHROME, BrowserKind.SAFARI])
        self.assertEqual(self.executor.submitted, 0)
        self.assertEqual(self.monitor.state.last_browser, BrowserKind.SAFARI)

    def test_switch_resets_snapshot_even_if_inspection_fails(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()

        self.frontmost.app = SAFARI
        self.tick()

        self.assertEqual(self.emitted, [tab(), None])
        self.assertIsNone(self.monitor.state.last_snapshot)

    def test_snapshot_always_matches_browser(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()
        for app in (SAFARI, CHROME, FINDER, CHROME):
            self.frontmost.app = app
            self.tick()
            state = self.monitor.state
            if state.last_snapshot is not None:
                self.assertEqual(state.last_snapshot.browser_kind, state.last_browser)


class TestOverlap(MonitorTestCase):

    def test_tick_skipped_while_inspection_outstanding(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()}, executor=DeferredExecutor())
        self.monitor.on_poll_tick()
        self.tick()
        self.assertEqual(self.executor.submitted, 1)

        self.tick()
        self.tick()
        self.assertEqual(self.frontmost.calls, 2)
        self.assertEqual(len(self.inspector.calls), 1)

        self.executor.run_all()
        self.assertEqual(len(self.inspector.calls), 2)
        self.assertEqual(self.monitor.state.last_poll_time, self.clock.now)

        self.tick()
        self.assertEqual(self.executor.submitted, 2)

    def test_async_failure_clears(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()}, executor=DeferredExecutor())
        self.monitor.on_poll_tick()
        self.tick()

        self.inspector.results[BrowserKind.CHROME] = InspectionError("closed")
        self.executor.run_all()

        self.assertEqual(self.emitted, [tab(), None])

    def test_shut_down_executor_does_not_wedge_monitor(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()
        self.executor.shutdown()

        self.tick()
        self.executor.is_shut_down = False
        self.tick()

        self.assertEqual(self.executor.submitted, 1)


class TestLifecycle(MonitorTestCase):

    def test_start_and_stop_are_idempotent(self):
        monitor = self.make_monitor(interval=60)
        monitor.start()
        monitor.start()
        self.assertTrue(monitor._scheduler.running)

        monitor.stop()
        monitor.stop()
        self.assertFalse(monitor._scheduler.running)

    def test_context_manager_stops(self):
        monitor = self.make_monitor(interval=60)
        with monitor:
            self.assertTrue(monitor._scheduler.running)
        self.assertFalse(monitor._scheduler.running)

    def test_owned_executor_released_on_stop(self):
        monitor = BrowserTabMonitor(
            inspector=FakeInspector(),
            frontmost_provider=FrontmostSequence(FINDER),
            dispatch=inline_dispatch,
            interval=60
        )
        monitor.start()
        monitor.stop()
        self.assertIsNone(monitor._executor)

        monitor.start()
        self.assertIsNotNone(monitor._executor)
        monitor.stop()

    def test_frontmost_change_triggers_tick_while_running(self):
        seen = threading.Event()
        monitor = BrowserTabMonitor(
            on_tab_changed=lambda snapshot: seen.set(),
            inspector=FakeInspector({BrowserKind.CHROME: tab()}),
            frontmost_provider=FrontmostSequence(CHROME),
            dispatch=inline_dispatch,
            executor=InlineExecutor(),
            interval=60
        )
        with monitor:
            monitor.notify_frontmost_changed()
            self.assertTrue(seen.wait(2.0))

    def test_state_is_a_copy(self):
        self.make_monitor(results={BrowserKind.CHROME: tab()})
        self.monitor.on_poll_tick()

        state = self.monitor.state
        state.last_snapshot = None

        self.assertEqual(self.monitor.state.last_snapshot, tab())


if __name__ == "__main__":
    unittest.main()

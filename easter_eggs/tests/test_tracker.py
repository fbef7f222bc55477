import unittest

from easter_eggs.models import EasterEgg, default_eggs
from easter_eggs.notifications import ToastQueue
from easter_eggs.timers import ManualScheduler
from easter_eggs.tracker import (
    CLICK_WINDOW_SECONDS,
    MATRIX_MODE_SECONDS,
    ClickCounter,
    EasterEggTracker,
)


class ClickCounterTests(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        self.triggers = []
        self.counter = ClickCounter(self.scheduler, lambda: self.triggers.append(1))

    def test_three_quick_clicks_trigger_and_reset(self):
        self.assertFalse(self.counter.click())
        self.scheduler.advance(0.2)
        self.assertFalse(self.counter.click())
        self.scheduler.advance(0.2)
        self.assertTrue(self.counter.click())
        self.assertEqual(self.triggers, [1])
        self.assertEqual(self.counter.count, 0)
        self.assertEqual(self.counter.state, "idle")
        self.assertEqual(self.scheduler.pending, [])

    def test_each_click_restarts_the_window(self):
        self.counter.click()
        self.scheduler.advance(0.4)
        self.counter.click()
        self.scheduler.advance(0.4)
        self.assertEqual(self.counter.count, 2)
        self.assertEqual(len(self.scheduler.pending), 1)

    def test_pause_resets_counter(self):
        self.counter.click()
        self.counter.click()
        self.scheduler.advance(CLICK_WINDOW_SECONDS + 0.01)
        self.assertEqual(self.counter.count, 0)
        self.assertFalse(self.counter.click())
        self.assertEqual(self.triggers, [])


class EasterEggTrackerTests(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        self.toasts = ToastQueue()
        self.tracker = EasterEggTracker(self.scheduler, notify=self.toasts)

    def _triple_click(self):
        for _ in range(3):
            self.tracker.click()
            self.scheduler.advance(0.1)

    def test_triple_click_unlocks_once(self):
        self.assertFalse(self.tracker.is_unlocked("triple_click"))
        self._triple_click()
        self.assertTrue(self.tracker.is_unlocked("triple_click"))
        self.assertTrue(self.tracker.matrix_mode)
        self.assertEqual(self.tracker.unlocked_count, 1)
        self.assertEqual(self.toasts.latest.title, "🎉 Easter egg unlocked!")
        self.assertEqual(self.toasts.latest.duration, 5.0)

        for _ in range(3):
            self._triple_click()
        self.assertTrue(self.tracker.is_unlocked("triple_click"))
        unlocked = [t for t in self.toasts.toasts if "unlocked" in t.title]
        self.assertEqual(len(unlocked), 1)
        self.assertEqual(len(self.toasts.toasts), 4)

    def test_slow_clicks_do_not_unlock(self):
        self.tracker.click()
        self.tracker.click()
        self.scheduler.advance(0.6)
        self.tracker.click()
        self.assertFalse(self.tracker.is_unlocked("triple_click"))
        self.assertFalse(self.tracker.matrix_mode)
        self.assertIsNone(self.toasts.latest)

    def test_matrix_mode_expires_after_first_unlock(self):
        self._triple_click()
        self.scheduler.advance(MATRIX_MODE_SECONDS - 1)
        self.assertTrue(self.tracker.matrix_mode)
        self.scheduler.advance(1)
        self.assertFalse(self.tracker.matrix_mode)
        self.assertTrue(self.tracker.is_unlocked("triple_click"))

    def test_later_triggers_toggle_matrix_mode(self):
        self.tracker.handle_triple_click()
        toast = self.tracker.handle_triple_click()
        self.assertFalse(self.tracker.matrix_mode)
        self.assertEqual(toast.title, "Matrix mode deactivated")
        self.assertEqual(toast.duration, 2.0)

        toast = self.tracker.handle_triple_click()
        self.assertTrue(self.tracker.matrix_mode)
        self.assertEqual(toast.title, "Matrix mode activated")

    def test_auto_disable_fires_even_after_toggles(self):
        self.tracker.handle_triple_click()
        self.tracker.handle_triple_click()
        self.tracker.handle_triple_click()
        self.assertTrue(self.tracker.matrix_mode)
        self.scheduler.advance(MATRIX_MODE_SECONDS)
        self.assertFalse(self.tracker.matrix_mode)

    def test_unknown_trigger_and_egg_are_noops(self):
        self.assertFalse(self.tracker.click("konami"))
        self.assertIsNone(self.tracker.handle_triple_click("missing"))
        self.assertIsNone(self.toasts.latest)

    def test_eggs_are_returned_as_copies(self):
        egg = self.tracker.get("triple_click")
        egg.unlocked = True
        self.assertFalse(self.tracker.is_unlocked("triple_click"))
        self.assertEqual(self.tracker.total_count, 1)
        self.assertEqual([e.id for e in self.tracker.eggs], ["triple_click"])

    def test_catalogue_is_not_shared_between_trackers(self):
        self.tracker.handle_triple_click()
        other = EasterEggTracker(ManualScheduler())
        self.assertFalse(other.is_unlocked("triple_click"))
        self.assertFalse(default_eggs()[0].unlocked)

    def test_duplicate_egg_ids_are_rejected(self):
        egg = EasterEgg(
            id="dup", name="Dup", description="", trigger="logo", icon="*"
        )
        with self.assertRaises(ValueError):
            EasterEggTracker(ManualScheduler(), eggs=[egg, egg])


if __name__ == "__main__":
    unittest.main()

import subprocess
import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from board.auth import Principal
from easter_eggs.session import UISession
from easter_eggs.timers import ManualScheduler, ThreadingScheduler

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class UISessionTests(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        self.session = UISession.create(self.scheduler)

    def test_tracker_reports_to_session_toasts(self):
        for _ in range(3):
            self.session.tracker.click()
        self.assertTrue(self.session.tracker.is_unlocked("triple_click"))
        self.assertEqual(len(self.session.toasts.toasts), 1)

    def test_sign_in_and_out(self):
        self.assertFalse(self.session.is_authenticated)
        self.session.sign_in(Principal("u1", "u1@example.com"), "token")
        self.assertTrue(self.session.is_authenticated)
        self.session.sign_out()
        self.assertFalse(self.session.is_authenticated)
        self.assertIsNone(self.session.token)

    def test_sign_in_with_client(self):
        client = MagicMock()
        client.sign_in.return_value = Principal("u1", "u1@example.com")
        principal = self.session.sign_in_with(client, "id-token")
        client.sign_in.assert_called_once_with("id-token")
        self.assertEqual(self.session.principal, principal)
        self.assertEqual(self.session.token, "id-token")

    def test_close_cancels_pending_timers(self):
        self.session.tracker.click()
        self.session.tracker.handle_triple_click()
        self.assertTrue(self.scheduler.pending)
        self.session.close()
        self.assertEqual(self.scheduler.pending, [])
        self.assertEqual(self.session.tracker.counter().count, 0)

    def test_default_scheduler_is_threaded(self):
        session = UISession.create()
        self.addCleanup(session.close)
        self.assertIsInstance(session.scheduler, ThreadingScheduler)

    def test_package_does_not_import_backend(self):
        code = (
            "import sys, easter_eggs.session; "
            "sys.exit(any(name.split('.')[0] in ('board', 'firebase_admin', 'sqlalchemy') "
            "for name in sys.modules))"
        )
        result = subprocess.run(
            [sys.executable, "-c", code], capture_output=True, cwd=PROJECT_ROOT
        )
        self.assertEqual(result.returncode, 0, result.stderr.decode())

    def test_sessions_are_independent(self):
        other = UISession.create(ManualScheduler())
        self.session.tracker.handle_triple_click()
        self.assertFalse(other.tracker.is_unlocked("triple_click"))


if __name__ == "__main__":
    unittest.main()

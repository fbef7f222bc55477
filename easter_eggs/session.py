from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from easter_eggs.notifications import ToastQueue
from easter_eggs.timers import Scheduler, ThreadingScheduler
from easter_eggs.tracker import EasterEggTracker


class Principal(Protocol):
    """Signed-in identity as returned by the API."""

    uid: str
    email: Optional[str]


class SignInClient(Protocol):
    def sign_in(self, id_token: str) -> Principal:
        ...


@dataclass
class UISession:
    """
    State for one UI session, built once and passed to whatever needs it.

    Holds the signed-in principal with its bearer token, the easter egg
    tracker and the toast queue the tracker reports to.
    """

    scheduler: Scheduler
    toasts: ToastQueue
    tracker: EasterEggTracker
    principal: Optional[Principal] = None
    token: Optional[str] = field(default=None, repr=False)

    @classmethod
    def create(cls, scheduler: Optional[Scheduler] = None) -> "UISession":
        scheduler = scheduler or ThreadingScheduler()
        toasts = ToastQueue()
        tracker = EasterEggTracker(scheduler, notify=toasts)
        return cls(scheduler=scheduler, toasts=toasts, tracker=tracker)

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None and bool(self.token)

    def sign_in(self, principal: Principal, token: str) -> None:
        self.principal = principal
        self.token = token

    def sign_in_with(self, client: SignInClient, id_token: str) -> Principal:
        """Exchange `id_token` through the API and keep the result."""
        principal = client.sign_in(id_token)
        self.sign_in(principal, id_token)
        return principal

    def sign_out(self) -> None:
        self.principal = None
        self.token = None

    def close(self) -> None:
        """End the session, cancelling any timers still pending."""
        self.tracker.reset_counters()
        self.scheduler.cancel_all()
        self.sign_out()

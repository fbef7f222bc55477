from dataclasses import dataclass


TRIPLE_CLICK_EGG_ID = "triple_click"
TRIPLE_CLICK_LOGO_TRIGGER = "triple_click_logo"


@dataclass
class EasterEgg:
    """A named achievement that unlocks once and stays unlocked."""

    id: str
    name: str
    description: str
    trigger: str
    icon: str
    unlocked: bool = False


@dataclass(frozen=True)
class Notification:
    """Toast payload shown to the user."""

    title: str
    description: str
    duration: float  # seconds


def default_eggs() -> list[EasterEgg]:
    """Return a fresh copy of the egg catalogue, all locked."""
    return [
        EasterEgg(
            id=TRIPLE_CLICK_EGG_ID,
            name="Triple Click Master",
            description="Click the NXT.ai logo 3 times quickly",
            trigger=TRIPLE_CLICK_LOGO_TRIGGER,
            icon="🖱️",
        )
    ]

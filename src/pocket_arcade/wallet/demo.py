"""Demo-mode context.

Demo mode lets a visitor try the arcade without an account. It is an
explicit object owned by the host and handed to each game session; it is
switched on by a user action and off again on exit or logout.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class DemoUser:
    """Canned account shown while demo mode is on."""

    id: str = "demo-user-123"
    email: str = "demo@pocketbounty.com"
    first_name: str = "Alex"
    last_name: str = "Demo"
    handle: str = "@alexdemo"
    points: int = 1250
    level: int = 8


@dataclass
class DemoContext:
    """Demo toggle plus sample data."""

    enabled: bool = False
    user: DemoUser = field(default_factory=DemoUser)

    def enable(self, user: Optional[DemoUser] = None) -> None:
        self.enabled = True
        self.user = user or DemoUser()
        logger.info(f"Demo mode enabled for {self.user.handle}")

    def disable(self) -> None:
        if self.enabled:
            logger.info("Demo mode disabled")
        self.enabled = False
        self.user = DemoUser()

    def credit(self, amount: int) -> int:
        """Add points to the demo balance. Returns the new balance."""
        self.user.points += max(0, amount)
        return self.user.points

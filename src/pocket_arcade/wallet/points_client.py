"""Points service for crediting arcade rewards to a user's wallet.

Talks to the marketplace API's ``POST /api/user/points`` endpoint, which
adds the points to the signed-in user and records a ``points_earned``
activity entry. The endpoint only answers ``{"success": true}``, so the new
balance is read back from ``GET /api/auth/user``.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import aiohttp

from pocket_arcade.config.settings import Settings
from pocket_arcade.wallet.demo import DemoContext

logger = logging.getLogger(__name__)


@dataclass
class AwardResult:
    """Result of a points award."""
    success: bool
    amount: int = 0
    reason: str = ""
    balance: Optional[int] = None
    error: Optional[str] = None


class PointsService(Protocol):
    async def award_points(self, amount: int, reason: str) -> AwardResult: ...

    async def close(self) -> None: ...


class PointsClient:
    """HTTP client for the wallet API.

    No retries: a failed award is reported once and then dropped.
    """

    def __init__(
        self,
        points_url: str,
        session_cookie: str = "",
        timeout: float = 10.0,
        user_url: Optional[str] = None,
    ):
        """Initialize points client.

        Args:
            points_url: Full URL of the award endpoint
            session_cookie: Raw ``Cookie`` header value for the signed-in user
            timeout: Total request timeout in seconds
            user_url: User endpoint re-read for the balance after an award
        """
        self._points_url = points_url
        self._session_cookie = session_cookie
        self._timeout = timeout
        self._user_url = user_url
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "PointsClient":
        return cls(
            points_url=settings.points_url,
            session_cookie=settings.wallet.session_cookie,
            timeout=settings.wallet.timeout,
            user_url=settings.user_url,
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            headers = {"Content-Type": "application/json"}
            if self._session_cookie:
                headers["Cookie"] = self._session_cookie
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers=headers,
            )
        return self._session

    async def award_points(self, amount: int, reason: str) -> AwardResult:
        """Credit ``amount`` points to the signed-in user.

        Returns:
            AwardResult, never raises
        """
        try:
            session = await self._get_session()
            payload = {"points": amount, "reason": reason}

            async with session.post(self._points_url, json=payload) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    data = None
                if not isinstance(data, dict):
                    data = {}

                if response.status != 200 or not data.get("success"):
                    error = data.get("message") or f"HTTP {response.status}"
                    logger.error(f"Failed to award points: {error}")
                    return AwardResult(success=False, amount=amount, reason=reason, error=error)

            logger.info(f"Awarded {amount} points ({reason})")
            balance = data.get("points")
            if balance is None:
                balance = await self.fetch_balance()
            return AwardResult(success=True, amount=amount, reason=reason, balance=balance)

        except asyncio.TimeoutError:
            logger.error("Timeout awarding points")
            return AwardResult(success=False, amount=amount, reason=reason, error="TIMEOUT")
        except aiohttp.ClientError as e:
            logger.error(f"Network error awarding points: {e}")
            return AwardResult(success=False, amount=amount, reason=reason, error="NETWORK_ERROR")
        except Exception as e:
            logger.exception(f"Unexpected error awarding points: {e}")
            return AwardResult(success=False, amount=amount, reason=reason, error=str(e))

    async def fetch_balance(self) -> Optional[int]:
        """Read the signed-in user's point balance.

        Returns:
            The ``points`` field of the user, or None when it cannot be read
        """
        if not self._user_url:
            return None
        try:
            session = await self._get_session()
            async with session.get(self._user_url) as response:
                if response.status != 200:
                    logger.warning(f"Balance refresh failed: HTTP {response.status}")
                    return None
                data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            logger.warning("Timeout refreshing balance")
            return None
        except (aiohttp.ClientError, ValueError) as e:
            logger.warning(f"Balance refresh failed: {e}")
            return None

        points = data.get("points") if isinstance(data, dict) else None
        if isinstance(points, bool) or not isinstance(points, int):
            return None
        return points

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None


class DemoPointsService:
    """Credits the demo account locally; nothing leaves the device."""

    def __init__(self, demo: DemoContext):
        self._demo = demo

    async def award_points(self, amount: int, reason: str) -> AwardResult:
        balance = self._demo.credit(amount)
        logger.info(f"Demo award {amount} points ({reason}), balance {balance}")
        return AwardResult(success=True, amount=amount, reason=reason, balance=balance)

    async def close(self) -> None:
        pass


def build_points_service(settings: Settings, demo: DemoContext) -> PointsService:
    """Pick the wallet backend for the current session."""
    if demo.enabled:
        return DemoPointsService(demo)
    return PointsClient.from_settings(settings)

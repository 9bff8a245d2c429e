"""Shared fixtures: scripted randomness, in-memory wallet and game contexts."""

from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from pocket_arcade.core.events import EventBus
from pocket_arcade.games.base import GameContext
from pocket_arcade.wallet.awards import AwardDispatcher
from pocket_arcade.wallet.best_scores import BestScoreStore
from pocket_arcade.wallet.points_client import AwardResult


class ScriptedRandom:
    """Random source replaying a fixed sequence, cycling when exhausted."""

    def __init__(self, values: Sequence[float] = (0.0,)) -> None:
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


class RecordingAwards:
    """Stands in for the dispatcher and keeps every request."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def award(self, amount: int, reason: str, source: str = "arcade") -> bool:
        self.calls.append((amount, reason, source))
        return True


class FakePointsService:
    def __init__(self, fail_with: Optional[str] = None, raises: bool = False) -> None:
        self.fail_with = fail_with
        self.raises = raises
        self.calls: List[tuple] = []
        self.closed = False

    async def award_points(self, amount: int, reason: str) -> AwardResult:
        self.calls.append((amount, reason))
        if self.raises:
            raise RuntimeError("wallet exploded")
        if self.fail_with:
            return AwardResult(success=False, amount=amount, reason=reason, error=self.fail_with)
        return AwardResult(success=True, amount=amount, reason=reason, balance=100 + amount)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus(history_limit=1000)


@pytest.fixture
def score_store() -> BestScoreStore:
    return BestScoreStore()


@pytest.fixture
def awards() -> RecordingAwards:
    return RecordingAwards()


@pytest.fixture
def make_context(event_bus, score_store, awards) -> Callable[..., GameContext]:
    def factory(values: Sequence[float] = (0.0,), **overrides) -> GameContext:
        fields = dict(
            event_bus=event_bus,
            rng=ScriptedRandom(values),
            awards=awards,
            best_scores=score_store,
        )
        fields.update(overrides)
        return GameContext(**fields)

    return factory


@pytest.fixture
def make_dispatcher(event_bus) -> Callable[..., Tuple[AwardDispatcher, FakePointsService]]:
    def factory(**service_options) -> Tuple[AwardDispatcher, FakePointsService]:
        service = FakePointsService(**service_options)
        return AwardDispatcher(service, event_bus), service

    return factory


@pytest.fixture
def make_rng() -> Callable[..., ScriptedRandom]:
    return ScriptedRandom

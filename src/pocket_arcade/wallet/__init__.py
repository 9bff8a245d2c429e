"""Wallet collaborator: point awards, best scores and demo mode."""

from .awards import AwardDispatcher
from .best_scores import BestScoreStore
from .demo import DemoContext, DemoUser
from .points_client import (
    AwardResult,
    DemoPointsService,
    PointsClient,
    PointsService,
    build_points_service,
)

__all__ = [
    "AwardDispatcher",
    "AwardResult",
    "BestScoreStore",
    "DemoContext",
    "DemoPointsService",
    "DemoUser",
    "PointsClient",
    "PointsService",
    "build_points_service",
]

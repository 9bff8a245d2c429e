"""Arcade mini-games."""

from pocket_arcade.games.base import BaseGame, GameContext, GameResult
from pocket_arcade.games.breakout import BreakoutGame
from pocket_arcade.games.connect_four import ConnectFourGame
from pocket_arcade.games.game_2048 import Game2048
from pocket_arcade.games.manager import ArcadeManager, GameInfo, ManagerState
from pocket_arcade.games.memory_match import MemoryMatchGame
from pocket_arcade.games.simon_says import SimonSaysGame
from pocket_arcade.games.snake import SnakeGame
from pocket_arcade.games.space_invaders import SpaceInvadersGame
from pocket_arcade.games.whack_a_mole import WhackAMoleGame

# Arcade order
GAME_REGISTRY = [
    SnakeGame,
    Game2048,
    BreakoutGame,
    ConnectFourGame,
    MemoryMatchGame,
    SimonSaysGame,
    WhackAMoleGame,
    SpaceInvadersGame,
]


def create_manager(context: GameContext, subscribe: bool = True) -> ArcadeManager:
    """Manager with every arcade game registered."""
    manager = ArcadeManager(context, subscribe=subscribe)
    for game_cls in GAME_REGISTRY:
        manager.register_game(game_cls)
    return manager


__all__ = [
    "ArcadeManager",
    "BaseGame",
    "BreakoutGame",
    "ConnectFourGame",
    "GAME_REGISTRY",
    "Game2048",
    "GameContext",
    "GameInfo",
    "GameResult",
    "ManagerState",
    "MemoryMatchGame",
    "SimonSaysGame",
    "SnakeGame",
    "SpaceInvadersGame",
    "WhackAMoleGame",
    "create_manager",
]

"""Desktop host for the arcade."""

from pocket_arcade.simulator.window import ArcadeWindow, WindowConfig

__all__ = ["ArcadeWindow", "WindowConfig"]

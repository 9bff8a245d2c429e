"""Pocket Arcade - reward mini-games for the Pocket Bounty wallet."""

__version__ = "0.3.0"

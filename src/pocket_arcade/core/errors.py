"""Exception types raised by the arcade."""


class ArcadeError(Exception):
    """Base class for arcade errors."""


class UnknownGameError(ArcadeError, KeyError):
    """Raised when a game key is not registered with the manager."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown game: {self.key!r}"


class InvalidTransitionError(ArcadeError):
    """Raised by ``SessionStateMachine.require_transition`` on an illegal move."""

    def __init__(self, from_state, to_state) -> None:
        super().__init__(f"Invalid transition: {from_state.name} -> {to_state.name}")
        self.from_state = from_state
        self.to_state = to_state

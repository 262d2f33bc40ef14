from __future__ import annotations


class HoldemError(Exception):
    """Base class for every error raised by the engine."""


class ValidationError(HoldemError, ValueError):
    """The action is illegal for the current table state."""


class NotFoundError(HoldemError, LookupError):
    """No player with the given id is seated at the table."""

    def __init__(self, player_id: int) -> None:
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id


class ResourceExhaustionError(HoldemError, RuntimeError):
    """Internal consistency violation: the engine ran out of something it must never run out of."""


class EmptyDeckError(ResourceExhaustionError):
    pass


class InsufficientCardsError(ResourceExhaustionError):
    def __init__(self, needed: int, remaining: int) -> None:
        super().__init__(f"Not enough cards left in deck: need {needed}, have {remaining}")
        self.needed = needed
        self.remaining = remaining

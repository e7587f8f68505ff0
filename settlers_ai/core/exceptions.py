"""Custom exception classes for the Settlers engine and search."""

from __future__ import annotations


class SettlersError(Exception):
    """Base exception for all Settlers AI errors."""


class InvalidMoveError(SettlersError):
    """Raised when a move is not legal on the current board."""

    def __init__(self, move: object, reason: str = "") -> None:
        self.move = move
        self.reason = reason
        message = f"Illegal move {move}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidBoardStateError(SettlersError):
    """Raised when a search is started on a board that is no longer running."""

    def __init__(self, turns: int) -> None:
        self.turns = turns
        super().__init__(f"Cannot search a finished game (turn {turns})")


class NoLegalMoveError(SettlersError):
    """Raised when a search ends without a single expanded root move."""

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        super().__init__(f"Search produced no candidate move after {iterations} iterations")


class CloneFailureError(SettlersError):
    """Raised when a board snapshot cannot be deep-copied for a rollout."""


__all__ = [
    "CloneFailureError",
    "InvalidBoardStateError",
    "InvalidMoveError",
    "NoLegalMoveError",
    "SettlersError",
]

"""
Settlers AI Core Package

This package contains the game logic for Settlers, including:
- Board model (fields, intersections) and the Board interface searched by MCTS
- Game rules and move generation
- Players and moves
- Constants, enums and exceptions

All core components can be imported directly from this package.
"""

# Constants
from settlers_ai.core.constants import (
    Resource, MoveType,
    TRADABLE_RESOURCES, VICTORY_POINTS, MAX_TURNS
)

# Exceptions
from settlers_ai.core.exceptions import (
    SettlersError, InvalidMoveError, InvalidBoardStateError,
    NoLegalMoveError, CloneFailureError
)

# Moves and players
from settlers_ai.core.moves import Move
from settlers_ai.core.player import Player

# Board model
from settlers_ai.core.board import Board, Field, Intersection, initial_move_score

# Rules
from settlers_ai.core.game import (
    SettlersBoard, build_grid, create_board, simulate_random_game
)

__all__ = [
    # Constants
    'Resource', 'MoveType',
    'TRADABLE_RESOURCES', 'VICTORY_POINTS', 'MAX_TURNS',

    # Exceptions
    'SettlersError', 'InvalidMoveError', 'InvalidBoardStateError',
    'NoLegalMoveError', 'CloneFailureError',

    # Moves and players
    'Move', 'Player',

    # Board
    'Board', 'Field', 'Intersection', 'initial_move_score',

    # Game
    'SettlersBoard', 'build_grid', 'create_board', 'simulate_random_game',
]

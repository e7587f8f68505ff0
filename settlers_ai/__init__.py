"""
Settlers AI - Monte Carlo Tree Search for a resource-trading board game.

This package provides a compact Settlers rule engine and an MCTS agent that
picks moves under a fixed time budget.
"""

__version__ = "0.1.0"
__author__ = "Settlers AI Team"

# Make key components available at package level
from settlers_ai.core.game import SettlersBoard, create_board
from settlers_ai.core.moves import Move
from settlers_ai.core.exceptions import (
    SettlersError, InvalidBoardStateError, NoLegalMoveError, CloneFailureError
)
from settlers_ai.mcts.config import MCTSConfig
from settlers_ai.mcts.search import find_next_move, mcts_search
from settlers_ai.mcts.agent import MCTSAgent

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

# Default configuration
DEFAULT_CONFIG = {
    "num_players": 2,
    "victory_points": 10,
    "board_width": 6,
    "board_height": 5
}

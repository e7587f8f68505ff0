"""
Monte Carlo Tree Search (MCTS) implementation for Settlers.

This package provides a time-bounded MCTS agent for the Settlers board game.
Each search works in four phases:

1. Selection: Starting from the root, follow the child with the highest UCT value
   until reaching a node without children.
2. Expansion: Create one child for every legal successor of that leaf.
3. Simulation: From a random new child, play a few random moves on a copy of the
   board and score the result with the scoring heuristics.
4. Backpropagation: Add the score and one visit to every node up to the root.

The move of the most visited root child is played. Opening placements skip the
search and use the board's best initial move.
"""

from settlers_ai.mcts.config import MCTSConfig
from settlers_ai.mcts.node import Node, State, Tree
from settlers_ai.mcts.scoring import (
    raw_score,
    move_score,
    initial_move_score
)
from settlers_ai.mcts.search import (
    mcts_search,
    find_next_move,
    select_node,
    expand_node,
    simulate_game,
    backpropagate
)
from settlers_ai.mcts.agent import MCTSAgent, MCTSAgentFactory

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    time_limit=1.0,                # Seconds per search
    max_iterations=None,           # No iteration cap
    exploration_weight=1.41,       # UCT exploration parameter (sqrt(2))
    rollout_depth=6,               # Random moves per rollout
    opening_move_threshold=4       # Turns played from the opening heuristic
)

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'MCTSConfig',
    'Node',
    'State',
    'Tree',
    'mcts_search',
    'find_next_move',
    'select_node',
    'expand_node',
    'simulate_game',
    'backpropagate',
    'raw_score',
    'move_score',
    'initial_move_score',
    'DEFAULT_CONFIG'
]

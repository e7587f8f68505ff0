"""
Monte Carlo Tree Search (MCTS) algorithm for Settlers.

This module implements the time-bounded MCTS driver with the four standard phases:
1. Selection: Descend the tree by UCT to a leaf
2. Expansion: Create one child per legal successor of the leaf
3. Simulation: Run a short random rollout from one new child
4. Backpropagation: Update statistics from that child up to the root

Early in the game the search is skipped and the board's best opening
placement is played directly.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Tuple
import random
import time

import numpy as np

from settlers_ai.core.board import Board
from settlers_ai.core.exceptions import (
    CloneFailureError, InvalidBoardStateError, NoLegalMoveError
)
from settlers_ai.core.moves import Move
from settlers_ai.logging_config import get_logger
from settlers_ai.mcts.config import MCTSConfig
from settlers_ai.mcts.node import Node, State, Tree
from settlers_ai.mcts.scoring import raw_score, move_score

logger = get_logger(__name__)

Clock = Callable[[], float]


def mcts_search(
    board: Board,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None,
    clock: Clock = time.monotonic
) -> Tuple[Move, Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best move.

    The search optimizes for the player to move on the given board. It
    repeats selection, expansion, simulation and backpropagation until the
    time limit elapses (or max_iterations is reached) and returns the move
    of the most visited root child.

    Args:
        board: Board to search; it is never modified
        config: MCTS configuration parameters
        rng: Random generator for expansion choices and rollouts
        clock: Time source in seconds

    Returns:
        Tuple of (best move, search statistics)

    Raises:
        InvalidBoardStateError: If the game on the board is already over
        NoLegalMoveError: If no iteration completed on a root move within the budget
    """
    if config is None:
        config = MCTSConfig()
    if rng is None:
        rng = random.Random()

    if not board.is_running():
        raise InvalidBoardStateError(board.turns)

    start_time = clock()
    player_id = board.current_player_index

    stats: Dict[str, Any] = {
        "iterations": 0,
        "failed_iterations": 0,
        "max_depth": 0,
        "total_simulation_steps": 0,
        "time_elapsed": 0.0,
        "node_count": 0,
        "opening_bypass": False,
        "action_visits": {},
        "action_rewards": {},
        "principal_variation": [],
        "visit_distribution": np.zeros(0),
    }

    # Opening placements are nearly symmetric, so skip the search
    if board.turns < config.opening_move_threshold:
        move = board.best_initial_move()
        stats["opening_bypass"] = True
        stats["time_elapsed"] = clock() - start_time
        logger.debug("Turn %d below opening threshold, playing %s", board.turns, move)
        return move, stats

    tree = Tree(board, config)
    deadline = None if config.time_limit is None else start_time + config.time_limit

    while _has_budget(stats, config, deadline, clock):
        try:
            node, steps = run_iteration(tree, player_id, config, rng)
        except CloneFailureError as e:
            if not config.isolate_clone_failures:
                raise
            stats["failed_iterations"] += 1
            logger.warning("Dropping iteration %d: %s", stats["iterations"] + stats["failed_iterations"], e)
            continue

        stats["iterations"] += 1
        stats["total_simulation_steps"] += steps
        stats["max_depth"] = max(stats["max_depth"], tree.depth(node))

    stats["node_count"] = len(tree)
    stats["action_visits"], stats["action_rewards"] = _root_statistics(tree)
    stats["principal_variation"] = [(str(m), v) for m, v in get_principal_variation(tree)]
    stats["visit_distribution"] = visit_distribution(tree)

    stats["time_elapsed"] = clock() - start_time
    stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
    stats["average_simulation_steps"] = stats["total_simulation_steps"] / max(1, stats["iterations"])

    best = tree.child_with_max_visits(tree.root)
    # Expanded children carry no evidence until an iteration completes
    if best is None or best.visits == 0:
        raise NoLegalMoveError(stats["iterations"])

    logger.debug(
        "Searched %d iterations (%d dropped), %d nodes in %.3fs, best move %s",
        stats["iterations"], stats["failed_iterations"], stats["node_count"],
        stats["time_elapsed"], best.move
    )
    return best.move, stats


def find_next_move(
    board: Board,
    config: Optional[MCTSConfig] = None,
    rng: Optional[random.Random] = None,
    clock: Clock = time.monotonic
) -> Move:
    """Search the board and return only the chosen move."""
    move, _ = mcts_search(board, config, rng, clock)
    return move


def _has_budget(
    stats: Dict[str, Any],
    config: MCTSConfig,
    deadline: Optional[float],
    clock: Clock
) -> bool:
    if config.max_iterations is not None:
        if stats["iterations"] + stats["failed_iterations"] >= config.max_iterations:
            return False
    return deadline is None or clock() < deadline


def run_iteration(
    tree: Tree,
    player_id: int,
    config: MCTSConfig,
    rng: random.Random
) -> Tuple[Node, int]:
    """
    Run one select, expand, simulate and backpropagate cycle.

    Args:
        tree: Search tree
        player_id: Perspective player of the search
        config: MCTS configuration parameters
        rng: Random generator

    Returns:
        Tuple of (node the rollout started from, rollout steps)
    """
    leaf = select_node(tree)

    if not leaf.state.is_terminal():
        children = expand_node(tree, leaf)
        # A running root without successors has nothing to search
        if not children and leaf is tree.root:
            raise NoLegalMoveError(tree.root.visits)

    node = leaf
    if leaf.children:
        node = tree.random_child(leaf, rng)

    score, steps = simulate_game(node.state, player_id, config, rng)
    backpropagate(tree, node, score)
    return node, steps


def select_node(tree: Tree) -> Node:
    """
    Select a leaf for expansion or simulation.

    Unvisited children are always tried before visited siblings.

    Args:
        tree: Search tree

    Returns:
        Leaf node reached by UCT descent (the root if it has no children)
    """
    return tree.select_leaf()


def expand_node(tree: Tree, node: Node) -> List[Node]:
    """
    Expand a leaf with one child per legal successor state.

    Args:
        tree: Search tree
        node: Leaf to expand; must not have been expanded before

    Returns:
        New child nodes, empty for terminal states
    """
    return tree.expand(node)


def simulate_game(
    state: State,
    player_id: int,
    config: MCTSConfig,
    rng: random.Random
) -> Tuple[float, int]:
    """
    Run a short random rollout from a state.

    The rollout plays on a deep copy of the state. Starting from the points
    and move bonus of the state itself, it adds the perspective player's
    points and move bonus after every random move that player makes, for at
    most rollout_depth moves or until the game ends.

    The sum is divided by rollout_depth even when the game ended earlier,
    unless divide_by_rounds_played is set.

    Args:
        state: State to roll out from
        player_id: Perspective player
        config: MCTS configuration parameters
        rng: Random generator for move choices

    Returns:
        Tuple of (rollout score, moves played)

    Raises:
        CloneFailureError: If the state cannot be copied
    """
    working = state.clone()
    board = working.board

    score = raw_score(board, player_id) + move_score(board, working.initial_move, working.mover)

    steps = 0
    for _ in range(config.rollout_depth):
        if not board.is_running():
            break

        move = board.random_move(rng)
        mover = board.current_player_index
        board.play_move(move)
        steps += 1

        if mover == player_id:
            score += raw_score(board, player_id) + move_score(board, move, mover)

    if config.normalize_by_max_score:
        score /= config.max_score

    divisor = max(1, steps) if config.divide_by_rounds_played else config.rollout_depth
    return score / divisor, steps


def backpropagate(tree: Tree, node: Node, score: float) -> None:
    """
    Update statistics from a node up to the root.

    Args:
        tree: Search tree
        node: Node the rollout started from
        score: Rollout score
    """
    tree.backpropagate(node, score)


def _root_statistics(tree: Tree) -> Tuple[Dict[str, int], Dict[str, float]]:
    visits = {}
    rewards = {}
    for child in tree.children(tree.root):
        move_str = str(child.move)
        visits[move_str] = child.visits
        if child.visits > 0:
            rewards[move_str] = child.total_score / child.visits
    return visits, rewards


def visit_distribution(tree: Tree) -> np.ndarray:
    """
    Normalized visit counts of the root children in expansion order.

    Returns:
        Array summing to 1, or all zeros if no child was visited
    """
    visits = np.array([c.visits for c in tree.children(tree.root)], dtype=np.float64)
    total = visits.sum()
    if total == 0:
        return visits
    return visits / total


def get_principal_variation(tree: Tree, max_depth: int = 10) -> List[Tuple[Move, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        tree: Search tree
        max_depth: Maximum depth to explore

    Returns:
        List of (move, average score) pairs along the principal variation
    """
    result = []
    current = tree.root

    while current.children and len(result) < max_depth:
        best_child = tree.child_with_max_visits(current)
        result.append((best_child.move, best_child.average_score))
        current = best_child

    return result


def get_action_statistics(tree: Tree) -> Dict[str, Dict[str, float]]:
    """
    Get statistics for all root moves.

    Args:
        tree: Search tree

    Returns:
        Dictionary mapping move strings to visits, total score, average
        score and UCT value
    """
    result = {}
    root = tree.root

    for child in tree.children(root):
        result[str(child.move)] = {
            "visits": child.visits,
            "reward": child.total_score,
            "value": child.average_score,
            "exploration": tree.uct_value(root, child),
        }

    return result

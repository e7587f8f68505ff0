"""
Scoring heuristics used to evaluate rollouts.

A rollout reward combines a player's raw points with a bonus for the move
just played, based on the weights of the fields around the position it
builds on. Roads count four times less than towns and upgrades.
"""
from __future__ import annotations
from typing import Iterable, Optional

from settlers_ai.core.board import Board, Field, initial_move_score
from settlers_ai.core.constants import (
    MoveType, TOWN_SCORE_DIVISOR, UPGRADE_SCORE_DIVISOR, ROAD_SCORE_DIVISOR
)
from settlers_ai.core.moves import Move

__all__ = ['raw_score', 'move_score', 'initial_move_score', 'max_move_score']


def raw_score(board: Board, player_id: int) -> float:
    """Current point total of a player."""
    return float(board.players[player_id].points)


def _weight_sum(fields: Iterable[Field]) -> float:
    return float(sum(f.weight for f in fields))


def move_score(board: Board, move: Optional[Move], player_id: Optional[int] = None) -> float:
    """
    Heuristic bonus for a move, evaluated on the board after it was played.

    - BUILD_TOWN: adjacent field weights of the acting player's position / 100
    - UPGRADE_TOWN: adjacent field weights of the target / 100
    - BUILD_ROAD: adjacent field weights of the target / 400
    - anything else (and no move at all): 0

    A move can end the turn, so the acting player is passed explicitly; the
    player to move is only assumed when player_id is None.

    Args:
        board: Board the move was applied to
        move: Move to score, None for the root state
        player_id: Player who played the move

    Returns:
        Non-negative heuristic bonus
    """
    if move is None:
        return 0.0

    if move.move_type == MoveType.BUILD_TOWN:
        if player_id is None:
            position = board.current_player_position()
        else:
            position = board.player_position(player_id)
        if position is None:
            return 0.0
        return _weight_sum(position.adjacent_fields) / TOWN_SCORE_DIVISOR

    if move.move_type == MoveType.UPGRADE_TOWN:
        target = board.intersections[move.index1]
        return _weight_sum(target.adjacent_fields) / UPGRADE_SCORE_DIVISOR

    if move.move_type == MoveType.BUILD_ROAD:
        target = board.intersections[move.index1]
        return _weight_sum(target.adjacent_fields) / ROAD_SCORE_DIVISOR

    return 0.0


def max_move_score(board: Board) -> float:
    """Largest bonus move_score can return on this board."""
    heaviest = max((_weight_sum(i.adjacent_fields) for i in board.intersections), default=0.0)
    return heaviest / min(TOWN_SCORE_DIVISOR, UPGRADE_SCORE_DIVISOR, ROAD_SCORE_DIVISOR)

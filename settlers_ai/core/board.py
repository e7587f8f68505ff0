"""
Board model and the interface the search engine consumes.

The search only talks to a board through the Board protocol below, so any
rule engine exposing these members can be searched. SettlersBoard in
settlers_ai.core.game is the reference implementation.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence
import random

from settlers_ai.core.constants import (
    Resource, OPENING_RESOURCE_MULTIPLIERS, OPENING_SCORE_SCALE
)
from settlers_ai.core.moves import Move
from settlers_ai.core.player import Player


@dataclass
class Field:
    """A resource-producing field; weight is its production likelihood."""
    id: int
    resource: Resource
    weight: int


@dataclass
class Intersection:
    """A buildable corner between fields."""
    index: int
    adjacent_fields: List[Field] = field(default_factory=list)
    neighbours: List[int] = field(default_factory=list)

    def field_weight(self) -> int:
        """Sum of the weights of the adjacent fields."""
        return sum(f.weight for f in self.adjacent_fields)


class Board(Protocol):
    """Rule-engine surface required by the MCTS engine."""

    @property
    def current_player_index(self) -> int: ...

    @property
    def turns(self) -> int: ...

    @property
    def players(self) -> Sequence[Player]: ...

    @property
    def intersections(self) -> Sequence[Intersection]: ...

    def current_player_position(self) -> Optional[Intersection]: ...

    def player_position(self, player_id: int) -> Optional[Intersection]: ...

    def best_initial_move(self) -> Move: ...

    def legal_moves(self) -> List[Move]: ...

    def is_running(self) -> bool: ...

    def random_move(self, rng: random.Random) -> Move: ...

    def play_move(self, move: Move) -> None: ...

    def clone(self) -> Board: ...


def initial_move_score(board: Board, move: Move) -> float:
    """
    Opening heuristic for a town placement.

    Wood and clay fields count four times their weight, wheat and sheep three
    times, everything else nothing; the sum is scaled by 100. Only used to
    pick opening moves without searching.
    """
    score = 0.0
    for f in board.intersections[move.index1].adjacent_fields:
        score += f.weight * OPENING_RESOURCE_MULTIPLIERS.get(f.resource, 0)
    return score * OPENING_SCORE_SCALE

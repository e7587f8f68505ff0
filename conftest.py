"""Shared fixtures: a scripted toy board and a mid-game Settlers board."""
from dataclasses import dataclass
from typing import Dict, List, Optional
import copy
import random

import pytest

from settlers_ai.core.board import Field, Intersection
from settlers_ai.core.constants import MoveType, Resource
from settlers_ai.core.game import SettlersBoard, create_board
from settlers_ai.core.moves import Move


@dataclass
class ScriptedPlayer:
    points: int = 0


class ScriptedBoard:
    """
    Toy board with a fixed move list.

    Every move hands the mover the points listed in `rewards` and passes the
    turn. The game stops after `moves_left` moves.
    """

    def __init__(
        self,
        moves: List[Move],
        rewards: Optional[Dict[Move, int]] = None,
        turns: int = 10,
        moves_left: int = 100,
        num_players: int = 2,
        intersections: Optional[List[Intersection]] = None,
        best_move: Optional[Move] = None
    ):
        self.moves = list(moves)
        self.rewards = rewards or {}
        self.turn_count = turns
        self.moves_left = moves_left
        self.players = [ScriptedPlayer() for _ in range(num_players)]
        self.current_player_idx = 0
        self.intersections = intersections or []
        self.positions: Dict[int, int] = {}
        self.best_move = best_move
        self.legal_moves_calls = 0

    @property
    def current_player_index(self) -> int:
        return self.current_player_idx

    @property
    def turns(self) -> int:
        return self.turn_count

    def current_player_position(self) -> Optional[Intersection]:
        return self.player_position(self.current_player_idx)

    def player_position(self, player_id: int) -> Optional[Intersection]:
        if player_id not in self.positions:
            return None
        return self.intersections[self.positions[player_id]]

    def best_initial_move(self) -> Move:
        return self.best_move

    def legal_moves(self) -> List[Move]:
        self.legal_moves_calls += 1
        return list(self.moves) if self.is_running() else []

    def is_running(self) -> bool:
        return self.moves_left > 0

    def random_move(self, rng: random.Random) -> Move:
        return rng.choice(self.legal_moves())

    def play_move(self, move: Move) -> None:
        self.players[self.current_player_idx].points += self.rewards.get(move, 0)
        if move.move_type == MoveType.BUILD_TOWN:
            self.positions[self.current_player_idx] = move.index1
        self.current_player_idx = (self.current_player_idx + 1) % len(self.players)
        self.turn_count += 1
        self.moves_left -= 1

    def clone(self) -> "ScriptedBoard":
        return copy.deepcopy(self)


def make_intersections() -> List[Intersection]:
    """Three intersections: weights 3+5, 2 and 1+1+4."""
    wood = Field(0, Resource.WOOD, 3)
    ore = Field(1, Resource.ORE, 5)
    wheat = Field(2, Resource.WHEAT, 2)
    clay = Field(3, Resource.CLAY, 1)
    sheep = Field(4, Resource.SHEEP, 1)
    desert = Field(5, Resource.DESERT, 4)
    return [
        Intersection(0, [wood, ore], [1]),
        Intersection(1, [wheat], [0, 2]),
        Intersection(2, [clay, sheep, desert], [1]),
    ]


@pytest.fixture
def scripted_board():
    """Factory for ScriptedBoard instances."""
    return ScriptedBoard


@pytest.fixture
def intersections():
    return make_intersections()


@pytest.fixture
def midgame_board() -> SettlersBoard:
    """A two-player Settlers board right after the opening, player 0 to move."""
    board = create_board(num_players=2, random_seed=3)
    while board.turns < 4:
        board.play_move(board.best_initial_move())
    board.players[0].add_resources({
        Resource.WOOD: 3,
        Resource.CLAY: 3,
        Resource.WHEAT: 4,
        Resource.SHEEP: 1,
        Resource.ORE: 3,
    })
    return board

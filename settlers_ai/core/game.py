"""
Game state and rules for the Settlers board game.

This module defines the reference rule engine searched by the MCTS agent:
- SettlersBoard: complete, mutable game state with move generation and rules
- Helper functions for board setup and random self-play

Rules in short: players open by placing free towns, then collect resources
from the fields around their buildings, trade with the bank and spend
resources on roads, towns and town upgrades. The first player to reach the
victory point threshold wins.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Any
import copy
import random

from settlers_ai.core.board import Field, Intersection, initial_move_score
from settlers_ai.core.constants import (
    Resource, MoveType, FIELD_RESOURCES, TRADABLE_RESOURCES,
    TOWN_COST, CITY_COST, ROAD_COST, BANK_TRADE_RATE,
    MIN_FIELD_WEIGHT, MAX_FIELD_WEIGHT, PRODUCTION_DIE_SIDES,
    MIN_PLAYERS, MAX_PLAYERS, OPENING_TOWNS_PER_PLAYER,
    VICTORY_POINTS, MAX_TURNS, DEFAULT_BOARD_WIDTH, DEFAULT_BOARD_HEIGHT
)
from settlers_ai.core.exceptions import InvalidMoveError
from settlers_ai.core.moves import Move
from settlers_ai.core.player import Player, roads_key, default_player_names


@dataclass
class SettlersBoard:
    """
    Complete representation of a Settlers game.

    The board owns its own random generator for resource production so that
    a deep copy continues the exact same game.
    """
    fields: List[Field] = field(default_factory=list)
    intersections: List[Intersection] = field(default_factory=list)
    players: List[Player] = field(default_factory=list)
    current_player_idx: int = 0

    turn_count: int = 0
    victory_points: int = VICTORY_POINTS
    max_turns: int = MAX_TURNS
    game_over: bool = False
    winner: Optional[int] = None
    moves_history: List[Tuple[int, Move]] = field(default_factory=list)

    rng: random.Random = field(default_factory=random.Random)

    @property
    def current_player_index(self) -> int:
        return self.current_player_idx

    @property
    def turns(self) -> int:
        """Number of completed turns."""
        return self.turn_count

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_idx]

    def current_player_position(self) -> Optional[Intersection]:
        """The intersection the current player last built on, if any."""
        return self.player_position(self.current_player_idx)

    def player_position(self, player_id: int) -> Optional[Intersection]:
        """The intersection a player last built on, if any."""
        index = self.players[player_id].current_intersection
        if index is None:
            return None
        return self.intersections[index]

    def in_opening(self) -> bool:
        return self.turn_count < OPENING_TOWNS_PER_PLAYER * self.num_players

    def is_running(self) -> bool:
        return not self.game_over

    def occupied(self) -> Dict[int, int]:
        """Map of occupied intersection index to owning player ID."""
        owners = {}
        for player in self.players:
            for index in player.buildings():
                owners[index] = player.id
        return owners

    def _free_for_town(self, index: int, owners: Dict[int, int]) -> bool:
        # Distance rule: the intersection and all its neighbours must be empty
        if index in owners:
            return False
        return all(n not in owners for n in self.intersections[index].neighbours)

    def _road_owned(self, key: Tuple[int, int]) -> bool:
        return any(key in player.roads for player in self.players)

    def legal_moves(self) -> List[Move]:
        """
        Get all legal moves for the current player.

        Returns:
            List of legal moves (empty once the game is over)
        """
        if self.game_over:
            return []

        player = self.current_player
        owners = self.occupied()

        if self.in_opening():
            moves = [
                Move.build_town(i.index) for i in self.intersections
                if self._free_for_town(i.index, owners)
            ]
            return moves or [Move.end_turn()]

        moves: List[Move] = []
        network = player.network()
        road_nodes = {n for road in player.roads for n in road}

        if player.can_afford(TOWN_COST):
            for index in sorted(road_nodes):
                if self._free_for_town(index, owners):
                    moves.append(Move.build_town(index))

        if player.can_afford(CITY_COST):
            for index in sorted(player.towns):
                moves.append(Move.upgrade_town(index))

        if player.can_afford(ROAD_COST):
            seen = set()
            for source in sorted(network):
                # Opponent buildings block road extension through them
                if owners.get(source, player.id) != player.id:
                    continue
                for target in self.intersections[source].neighbours:
                    key = roads_key(source, target)
                    if key in seen or self._road_owned(key):
                        continue
                    seen.add(key)
                    moves.append(Move.build_road(target, source))

        for give, give_resource in enumerate(TRADABLE_RESOURCES):
            if player.resources[give_resource] >= BANK_TRADE_RATE:
                for receive in range(len(TRADABLE_RESOURCES)):
                    if receive != give:
                        moves.append(Move.trade(give, receive))

        moves.append(Move.end_turn())
        return moves

    def random_move(self, rng: random.Random) -> Move:
        """
        Draw a uniformly random legal move.

        Args:
            rng: Random generator to draw from

        Returns:
            A legal move
        """
        moves = self.legal_moves()
        if not moves:
            raise ValueError("No legal moves available")
        return rng.choice(moves)

    def best_initial_move(self) -> Move:
        """
        Best opening placement according to the opening heuristic.

        Returns:
            The highest scoring town placement (first one on ties), or the
            first legal move if no placement is possible
        """
        moves = self.legal_moves()
        if not moves:
            raise ValueError("No legal moves available")
        placements = [m for m in moves if m.move_type == MoveType.BUILD_TOWN]
        if not placements:
            return moves[0]
        return max(placements, key=lambda m: initial_move_score(self, m))

    def play_move(self, move: Move) -> None:
        """
        Apply a move for the current player.

        Args:
            move: Move to apply

        Raises:
            InvalidMoveError: If the move is not legal on this board
        """
        if move not in self.legal_moves():
            raise InvalidMoveError(move, "not in legal moves")

        player = self.current_player
        self.moves_history.append((player.id, move))

        if move.move_type == MoveType.BUILD_TOWN:
            if not self.in_opening():
                player.remove_resources(TOWN_COST)
            player.towns.add(move.index1)
            player.current_intersection = move.index1
            player.recalculate_points()
        elif move.move_type == MoveType.UPGRADE_TOWN:
            player.remove_resources(CITY_COST)
            player.towns.discard(move.index1)
            player.cities.add(move.index1)
            player.current_intersection = move.index1
            player.recalculate_points()
        elif move.move_type == MoveType.BUILD_ROAD:
            player.remove_resources(ROAD_COST)
            player.roads.add(roads_key(move.index1, move.index2))
        elif move.move_type == MoveType.TRADE:
            player.remove_resources({TRADABLE_RESOURCES[move.index1]: BANK_TRADE_RATE})
            player.add_resources({TRADABLE_RESOURCES[move.index2]: 1})

        self._check_game_end(player)
        if self.game_over:
            return

        # Opening placements end the turn on their own
        if move.move_type == MoveType.END_TURN or self.in_opening():
            self._next_turn()

    def _check_game_end(self, player: Player) -> None:
        if player.points >= self.victory_points:
            self.game_over = True
            self.winner = player.id

    def _next_turn(self) -> None:
        self.current_player_idx = (self.current_player_idx + 1) % self.num_players
        self.turn_count += 1

        if self.turn_count >= self.max_turns:
            self.game_over = True
            return

        if not self.in_opening():
            self._produce()

    def _produce(self) -> None:
        """Each field produces with probability weight / PRODUCTION_DIE_SIDES."""
        field_intersections: Dict[int, List[int]] = {}
        for intersection in self.intersections:
            for f in intersection.adjacent_fields:
                field_intersections.setdefault(f.id, []).append(intersection.index)

        for f in self.fields:
            if f.resource == Resource.DESERT:
                continue
            if self.rng.randrange(PRODUCTION_DIE_SIDES) >= f.weight:
                continue
            for index in field_intersections.get(f.id, []):
                for player in self.players:
                    if index in player.towns:
                        player.add_resources({f.resource: 1})
                    elif index in player.cities:
                        player.add_resources({f.resource: 2})

    def clone(self) -> SettlersBoard:
        """
        Create a deep copy of the board.

        Returns:
            Copy sharing no mutable state with this board
        """
        return copy.deepcopy(self)

    def get_scores(self) -> List[int]:
        return [player.points for player in self.players]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the board to a dictionary for serialization.

        Returns:
            Dictionary representation of the board
        """
        return {
            "fields": [
                {"id": f.id, "resource": f.resource.name, "weight": f.weight}
                for f in self.fields
            ],
            "intersections": [
                {
                    "index": i.index,
                    "fields": [f.id for f in i.adjacent_fields],
                    "neighbours": list(i.neighbours),
                }
                for i in self.intersections
            ],
            "players": [player.to_dict() for player in self.players],
            "current_player": self.current_player_idx,
            "turn_count": self.turn_count,
            "game_over": self.game_over,
            "winner": self.winner,
        }

    def __str__(self) -> str:
        result = f"Turn {self.turn_count}, Player {self.current_player_idx}'s turn\n"
        for player in self.players:
            result += f"  {player}\n"
        if self.game_over:
            if self.winner is not None:
                result += f"Winner: {self.players[self.winner].name}\n"
            else:
                result += "Result: turn limit reached\n"
        return result


def build_grid(
    width: int,
    height: int,
    rng: random.Random
) -> Tuple[List[Field], List[Intersection]]:
    """
    Lay out a rectangular grid of intersections with fields between them.

    Intersection (x, y) has index y * width + x and is linked to its
    orthogonal neighbours. Every grid cell is a field touching its four
    corner intersections.

    Args:
        width: Intersections per row
        height: Intersections per column
        rng: Random generator for resources and weights

    Returns:
        Tuple of (fields, intersections)
    """
    if width < 2 or height < 2:
        raise ValueError("Board must be at least 2x2 intersections")

    intersections = [Intersection(index=i) for i in range(width * height)]
    for y in range(height):
        for x in range(width):
            index = y * width + x
            if x > 0:
                intersections[index].neighbours.append(index - 1)
            if x < width - 1:
                intersections[index].neighbours.append(index + 1)
            if y > 0:
                intersections[index].neighbours.append(index - width)
            if y < height - 1:
                intersections[index].neighbours.append(index + width)

    fields = []
    for cy in range(height - 1):
        for cx in range(width - 1):
            resource = rng.choice(FIELD_RESOURCES)
            weight = 0 if resource == Resource.DESERT else rng.randint(MIN_FIELD_WEIGHT, MAX_FIELD_WEIGHT)
            f = Field(id=len(fields), resource=resource, weight=weight)
            fields.append(f)
            corner = cy * width + cx
            for index in (corner, corner + 1, corner + width, corner + width + 1):
                intersections[index].adjacent_fields.append(f)

    return fields, intersections


def create_board(
    num_players: int = 2,
    player_names: Optional[List[str]] = None,
    width: int = DEFAULT_BOARD_WIDTH,
    height: int = DEFAULT_BOARD_HEIGHT,
    victory_points: int = VICTORY_POINTS,
    max_turns: int = MAX_TURNS,
    random_seed: Optional[int] = None
) -> SettlersBoard:
    """
    Create a new Settlers board.

    Args:
        num_players: Number of players (2-4)
        player_names: List of player names
        width: Intersections per row
        height: Intersections per column
        victory_points: Points needed to win
        max_turns: Turn limit after which the game stops
        random_seed: Random seed for the layout and resource production

    Returns:
        SettlersBoard object
    """
    if num_players < MIN_PLAYERS or num_players > MAX_PLAYERS:
        raise ValueError(f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")

    rng = random.Random(random_seed)
    fields, intersections = build_grid(width, height, rng)
    names = default_player_names(num_players, player_names)

    return SettlersBoard(
        fields=fields,
        intersections=intersections,
        players=[Player(id=i, name=names[i]) for i in range(num_players)],
        victory_points=victory_points,
        max_turns=max_turns,
        rng=rng,
    )


def simulate_random_game(
    num_players: int = 2,
    max_turns: int = 100,
    random_seed: Optional[int] = None
) -> Tuple[SettlersBoard, List[int]]:
    """
    Simulate a game where every player picks uniformly random moves.

    Args:
        num_players: Number of players
        max_turns: Maximum number of turns
        random_seed: Random seed for reproducibility

    Returns:
        Tuple of (final board, scores)
    """
    board = create_board(num_players=num_players, max_turns=max_turns, random_seed=random_seed)
    rng = random.Random(random_seed)

    while board.is_running():
        board.play_move(board.random_move(rng))

    return board, board.get_scores()

"""
Tests for the Settlers rule engine.

Checks board setup, the opening placements, move generation and application,
cloning, and runs short games between MCTS and random players to verify that
the engine and the search work together.
"""
import random
from typing import Any, Dict, Optional

import pytest

from settlers_ai.core.constants import (
    MoveType, Resource, TRADABLE_RESOURCES, CITY_POINTS, TOWN_POINTS
)
from settlers_ai.core.exceptions import InvalidMoveError
from settlers_ai.core.game import create_board, build_grid, simulate_random_game
from settlers_ai.core.moves import Move
from settlers_ai.core.player import roads_key
from settlers_ai.mcts.agent import MCTSAgent
from settlers_ai.mcts.config import MCTSConfig
from settlers_ai.mcts.node import Tree
from settlers_ai.mcts.scoring import initial_move_score, move_score


def run_test_game(
    max_turns: int = 12,
    agent_iterations: int = 20,
    random_seed: Optional[int] = None
) -> Dict[str, Any]:
    """
    Play a short game: an MCTS agent as player 0 against random moves.

    Args:
        max_turns: Turn limit of the game
        agent_iterations: MCTS iterations per move
        random_seed: Random seed for reproducibility

    Returns:
        Dictionary of game statistics
    """
    board = create_board(num_players=2, max_turns=max_turns, random_seed=random_seed)
    agent = MCTSAgent(
        config=MCTSConfig(time_limit=None, max_iterations=agent_iterations),
        name="MCTS Agent",
        seed=random_seed
    )
    rng = random.Random(random_seed)

    moves = 0
    while board.is_running():
        if board.current_player_index == 0:
            move = agent.select_action(board)
        else:
            move = board.random_move(rng)
        board.play_move(move)
        moves += 1

    return {
        "turns": board.turns,
        "moves": moves,
        "scores": board.get_scores(),
        "winner": board.winner,
        "searches": len(agent.action_history),
    }


def test_board_setup():
    board = create_board(num_players=3, width=4, height=3, random_seed=1)

    assert len(board.intersections) == 12
    assert len(board.fields) == 6
    assert len(board.players) == 3
    assert board.turns == 0
    assert board.current_player_index == 0
    assert board.is_running()
    assert board.in_opening()
    assert board.current_player_position() is None


def test_board_setup_validation():
    with pytest.raises(ValueError):
        create_board(num_players=1)
    with pytest.raises(ValueError):
        create_board(num_players=5)
    with pytest.raises(ValueError):
        build_grid(1, 4, random.Random(0))
    with pytest.raises(ValueError):
        create_board(player_names=["only one"])


def test_grid_layout():
    fields, intersections = build_grid(3, 3, random.Random(0))

    assert len(fields) == 4
    # Corner touches one field, edge two, centre four
    assert len(intersections[0].adjacent_fields) == 1
    assert len(intersections[1].adjacent_fields) == 2
    assert len(intersections[4].adjacent_fields) == 4
    assert sorted(intersections[4].neighbours) == [1, 3, 5, 7]
    for f in fields:
        if f.resource == Resource.DESERT:
            assert f.weight == 0
        else:
            assert 1 <= f.weight <= 5


def test_same_seed_same_layout():
    first = create_board(random_seed=9)
    second = create_board(random_seed=9)

    assert first.to_dict() == second.to_dict()


def test_opening_moves_are_free_placements():
    board = create_board(random_seed=2)
    moves = board.legal_moves()

    assert len(moves) == len(board.intersections)
    assert all(m.move_type == MoveType.BUILD_TOWN for m in moves)

    board.play_move(moves[0])

    assert board.turns == 1
    assert board.current_player_index == 1
    assert board.players[0].points == TOWN_POINTS
    assert board.players[0].current_intersection == moves[0].index1
    assert board.players[0].get_total_resources() == 0


def test_distance_rule():
    board = create_board(random_seed=2)
    board.play_move(Move.build_town(7))

    blocked = {7} | set(board.intersections[7].neighbours)
    placements = {m.index1 for m in board.legal_moves()}

    assert not (blocked & placements)


def test_best_initial_move_uses_opening_heuristic():
    board = create_board(random_seed=4)
    best = board.best_initial_move()
    scores = [initial_move_score(board, m) for m in board.legal_moves()]

    assert best.move_type == MoveType.BUILD_TOWN
    assert initial_move_score(board, best) == max(scores)


def test_late_opening_placement_scored_for_its_builder():
    board = create_board(num_players=3, random_seed=6)
    while board.turns < 4:
        board.play_move(board.best_initial_move())
    actor = board.current_player_index
    placement = board.best_initial_move()

    board.play_move(placement)

    # The placement ends the turn, so the next player is already to move
    assert board.current_player_index != actor
    expected = board.intersections[placement.index1].field_weight() / 100
    assert move_score(board, placement, actor) == pytest.approx(expected)
    assert board.player_position(actor).index == placement.index1


def test_late_opening_expansion_records_builder():
    board = create_board(num_players=3, random_seed=6)
    while board.turns < 4:
        board.play_move(board.best_initial_move())
    actor = board.current_player_index
    tree = Tree(board, MCTSConfig())

    children = tree.expand(tree.root)

    assert children
    for child in children:
        assert child.state.mover == actor
        assert child.state.player_id != actor
        position = child.state.board.player_position(actor)
        assert position.index == child.move.index1


def test_opening_ends_after_two_rounds():
    board = create_board(num_players=2, random_seed=5)
    while board.in_opening():
        board.play_move(board.best_initial_move())

    assert board.turns == 4
    assert board.current_player_index == 0
    assert all(len(p.towns) == 2 for p in board.players)
    assert Move.end_turn() in board.legal_moves()


def test_main_phase_moves(midgame_board):
    moves = midgame_board.legal_moves()
    kinds = {m.move_type for m in moves}
    player = midgame_board.current_player

    assert MoveType.BUILD_ROAD in kinds
    assert MoveType.UPGRADE_TOWN in kinds
    assert MoveType.TRADE in kinds
    assert moves[-1] == Move.end_turn()
    for move in moves:
        if move.move_type == MoveType.BUILD_ROAD:
            assert move.index2 in player.network()
            assert move.index1 in midgame_board.intersections[move.index2].neighbours


def test_build_road_then_town(midgame_board):
    player = midgame_board.current_player
    source = sorted(player.towns)[0]
    first = next(m for m in midgame_board.legal_moves()
                 if m.move_type == MoveType.BUILD_ROAD and m.index2 == source)
    midgame_board.play_move(first)

    assert roads_key(first.index1, first.index2) in player.roads

    # A second road two steps out makes a legal town site
    for move in midgame_board.legal_moves():
        if move.move_type == MoveType.BUILD_ROAD and move.index2 == first.index1:
            midgame_board.play_move(move)
            break
    player.add_resources({Resource.WOOD: 1, Resource.CLAY: 1, Resource.WHEAT: 1, Resource.SHEEP: 1})
    towns = [m for m in midgame_board.legal_moves() if m.move_type == MoveType.BUILD_TOWN]
    if towns:
        points = player.points
        midgame_board.play_move(towns[0])
        assert player.points == points + TOWN_POINTS
        assert midgame_board.current_player_position().index == towns[0].index1


def test_upgrade_town(midgame_board):
    player = midgame_board.current_player
    points = player.points
    upgrade = next(m for m in midgame_board.legal_moves() if m.move_type == MoveType.UPGRADE_TOWN)

    midgame_board.play_move(upgrade)

    assert upgrade.index1 in player.cities
    assert upgrade.index1 not in player.towns
    assert player.points == points - TOWN_POINTS + CITY_POINTS


def test_bank_trade(midgame_board):
    player = midgame_board.current_player
    wheat = TRADABLE_RESOURCES.index(Resource.WHEAT)
    ore = TRADABLE_RESOURCES.index(Resource.ORE)
    before = dict(player.resources)

    midgame_board.play_move(Move.trade(wheat, ore))

    assert player.resources[Resource.WHEAT] == before[Resource.WHEAT] - 4
    assert player.resources[Resource.ORE] == before[Resource.ORE] + 1


def test_end_turn_passes_to_next_player(midgame_board):
    midgame_board.play_move(Move.end_turn())

    assert midgame_board.current_player_index == 1
    assert midgame_board.turns == 5


def test_illegal_move_rejected(midgame_board):
    with pytest.raises(InvalidMoveError):
        midgame_board.play_move(Move.build_town(0))
    with pytest.raises(InvalidMoveError):
        midgame_board.play_move(Move.upgrade_town(999))


def test_victory_ends_game(midgame_board):
    midgame_board.victory_points = 3
    upgrade = next(m for m in midgame_board.legal_moves() if m.move_type == MoveType.UPGRADE_TOWN)

    midgame_board.play_move(upgrade)

    assert not midgame_board.is_running()
    assert midgame_board.winner == 0
    assert midgame_board.legal_moves() == []
    with pytest.raises(ValueError):
        midgame_board.random_move(random.Random(0))


def test_clone_is_independent(midgame_board):
    clone = midgame_board.clone()
    clone.play_move(Move.end_turn())

    assert midgame_board.turns == 4
    assert midgame_board.current_player_index == 0
    assert clone.turns == 5
    assert clone.players[0] is not midgame_board.players[0]
    assert clone.intersections[0] is not midgame_board.intersections[0]


def test_clone_continues_same_production():
    board = create_board(random_seed=8)
    while board.in_opening():
        board.play_move(board.best_initial_move())
    first, second = board.clone(), board.clone()
    for _ in range(6):
        first.play_move(Move.end_turn())
        second.play_move(Move.end_turn())

    assert first.to_dict() == second.to_dict()


def test_random_game_terminates():
    board, scores = simulate_random_game(num_players=2, max_turns=60, random_seed=0)

    assert not board.is_running()
    assert len(scores) == 2
    assert board.turns <= 60


def test_mcts_agent_plays_short_game():
    stats = run_test_game(max_turns=10, agent_iterations=15, random_seed=1)

    assert stats["turns"] <= 10
    assert stats["searches"] > 0
    assert all(score >= 2 for score in stats["scores"])

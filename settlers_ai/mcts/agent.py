"""
Monte Carlo Tree Search Agent for Settlers.

This module provides the MCTSAgent class, a ready-to-use AI player that
searches the board for a fixed time per move. The agent owns a seeded
random generator so its decisions can be reproduced, and keeps statistics
about its searches.
"""
from typing import Dict, List, Optional, Tuple, Any, Callable
import json
import random
import time

from rich.console import Console
from rich.table import Table

from settlers_ai.core.board import Board
from settlers_ai.core.moves import Move
from settlers_ai.mcts.config import MCTSConfig
from settlers_ai.mcts.search import mcts_search, Clock


class MCTSAgent:
    """
    Monte Carlo Tree Search agent for playing Settlers.

    Each call to select_action builds a fresh search tree; nothing is
    reused between moves except the random generator.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        seed: Optional[int] = None,
        verbose: bool = False,
        clock: Clock = time.monotonic,
        console: Optional[Console] = None
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
            seed: Seed for the agent's random generator
            verbose: Whether to print a search report after every move
            clock: Time source used by the search
            console: Console for verbose output
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose
        self.rng = random.Random(seed)
        self.clock = clock
        self.console = console or Console()

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.action_history: List[Tuple[Move, Dict[str, Any]]] = []

    def select_action(self, board: Board) -> Move:
        """
        Select a move for the player to move on the board.

        Args:
            board: Current board; it is not modified

        Returns:
            Selected move
        """
        move, stats = mcts_search(board, self.config, self.rng, self.clock)

        self.last_stats = stats
        self.action_history.append((move, stats))

        if self.verbose:
            self._print_search_info(move, stats)

        return move

    def _print_search_info(self, move: Move, stats: Dict[str, Any]) -> None:
        """
        Print a report about the search.

        Args:
            move: Selected move
            stats: Search statistics
        """
        self.console.print(f"\n[bold]{self.name}[/bold] selected: {move}")

        if stats["opening_bypass"]:
            self.console.print("Opening move, search skipped")
            return

        self.console.print(
            f"Iterations: {stats['iterations']} "
            f"({stats['failed_iterations']} dropped), "
            f"time: {stats['time_elapsed']:.3f}s "
            f"({stats['iterations_per_second']:.1f} it/s), "
            f"nodes: {stats['node_count']}, max depth: {stats['max_depth']}"
        )

        table = Table(title="Top moves")
        table.add_column("#", justify="right")
        table.add_column("Move")
        table.add_column("Visits", justify="right")
        table.add_column("Value", justify="right")

        moves_by_visits = sorted(
            stats["action_visits"].items(),
            key=lambda x: x[1],
            reverse=True
        )
        for i, (move_str, visits) in enumerate(moves_by_visits[:5]):
            value = stats["action_rewards"].get(move_str, 0.0)
            table.add_row(str(i + 1), move_str, str(visits), f"{value:.3f}")

        self.console.print(table)

    def get_action_callback(self) -> Callable[[Board], Move]:
        """
        Get a callback function for selecting moves.

        Returns:
            Callback taking a board and returning a move
        """
        return lambda board: self.select_action(board)

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def get_principal_variation(self) -> List[Tuple[str, float]]:
        """
        Get the principal variation (most visited path) from the last search.

        Returns:
            List of (move, average score) pairs
        """
        return self.last_stats.get("principal_variation", [])

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []

    def save_statistics(self, filename: str) -> None:
        """
        Save statistics to a JSON file.

        Args:
            filename: Name of the file to save to
        """
        # Keep only scalar statistics; dicts, lists and arrays are dropped
        history = []
        for move, stats in self.action_history:
            history.append({
                "action": move.to_dict(),
                "stats": {k: v for k, v in stats.items() if isinstance(v, (int, float, bool))}
            })

        data = {
            "agent_name": self.name,
            "config": self.config.to_dict(),
            "history": history,
            "total_actions": len(self.action_history)
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        if self.config.time_limit is None:
            budget = f"{self.config.max_iterations} iterations"
        else:
            budget = f"{self.config.time_limit}s"
        return f"{self.name} (MCTS, {budget} per move)"


class MCTSAgentFactory:
    """Factory for creating MCTS agents with preset configurations."""

    @staticmethod
    def create_fast(seed: Optional[int] = None) -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.fast(), name="Fast MCTS", seed=seed)

    @staticmethod
    def create_standard(seed: Optional[int] = None) -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.default(), name="Standard MCTS", seed=seed)

    @staticmethod
    def create_strong(seed: Optional[int] = None) -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.deep(), name="Strong MCTS", seed=seed)

    @staticmethod
    def create_custom(
        time_limit: Optional[float] = 1.0,
        max_iterations: Optional[int] = None,
        exploration_weight: float = 1.41,
        rollout_depth: int = 6,
        name: str = "Custom MCTS",
        seed: Optional[int] = None
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            time_limit: Seconds per move
            max_iterations: Optional iteration cap per move
            exploration_weight: UCT exploration constant
            rollout_depth: Random moves per rollout
            name: Name of the agent
            seed: Seed for the agent's random generator

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            time_limit=time_limit,
            max_iterations=max_iterations,
            exploration_weight=exploration_weight,
            rollout_depth=rollout_depth
        )
        return MCTSAgent(config=config, name=name, seed=seed)

"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS algorithm,
including the time budget, rollout depth, exploration constant and the
opening bypass threshold.
"""
from dataclasses import dataclass, fields
from typing import Optional, ClassVar
import math

from settlers_ai.core.constants import (
    DEFAULT_TIME_LIMIT, DEFAULT_ROLLOUT_DEPTH,
    DEFAULT_OPENING_MOVE_THRESHOLD, DEFAULT_DISCOUNT
)


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    The search runs until time_limit elapses. max_iterations adds a
    deterministic stop on the number of attempted iterations, counting those
    dropped after a clone failure; when both are set, whichever comes first
    ends the search.
    """
    # Search budget
    time_limit: Optional[float] = DEFAULT_TIME_LIMIT
    """Wall-clock budget per search in seconds (None = iteration bound only)"""

    max_iterations: Optional[int] = None
    """Optional cap on attempted iterations, dropped ones included (None = time bound only)"""

    # Tree policy
    exploration_weight: float = math.sqrt(2)
    """UCT exploration constant C"""

    # Rollouts
    rollout_depth: int = DEFAULT_ROLLOUT_DEPTH
    """Number of random moves played per rollout (D)"""

    divide_by_rounds_played: bool = False
    """Average rollout scores over the rounds actually played instead of D"""

    discount: float = DEFAULT_DISCOUNT
    """Coefficient of the max_score normalization series"""

    normalize_by_max_score: bool = False
    """Divide rollout scores by max_score"""

    # Opening
    opening_move_threshold: int = DEFAULT_OPENING_MOVE_THRESHOLD
    """Below this turn count the board's best initial move is played without search"""

    # Robustness
    isolate_clone_failures: bool = True
    """Drop a single iteration when its rollout clone fails instead of aborting"""

    # Constants
    INFINITE_VALUE: ClassVar[float] = float('inf')
    """UCT value of an unvisited child"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.time_limit is None and self.max_iterations is None:
            raise ValueError("time_limit and max_iterations cannot both be None")

        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError("time_limit must be non-negative or None")

        if self.max_iterations is not None and self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative or None")

        if self.exploration_weight < 0:
            raise ValueError("exploration_weight must be non-negative")

        if self.rollout_depth <= 0:
            raise ValueError("rollout_depth must be positive")

        if self.discount <= 0:
            raise ValueError("discount must be positive")

        if self.opening_move_threshold < 0:
            raise ValueError("opening_move_threshold must be non-negative")

    @property
    def max_score(self) -> float:
        """
        Sum of discount ** i over the even rounds 0, 2, ..., rollout_depth.

        Only applied to rollout scores when normalize_by_max_score is set.
        """
        return sum(self.discount ** i for i in range(0, self.rollout_depth + 1, 2))

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration for quick decisions.

        Returns:
            Fast MCTSConfig object
        """
        return cls(time_limit=0.2, rollout_depth=4)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration with a larger budget and longer rollouts.

        Returns:
            Deep MCTSConfig object
        """
        return cls(
            time_limit=5.0,
            exploration_weight=1.2,  # Slightly less exploration
            rollout_depth=12
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in names}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        params = [f"{name}={value}" for name, value in self.to_dict().items()]
        return f"MCTSConfig({', '.join(params)})"

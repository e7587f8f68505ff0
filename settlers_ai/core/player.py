"""
Player representation for the Settlers game.

This module defines the Player class which tracks a player's resources,
buildings, roads and points.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple, Any

from settlers_ai.core.constants import (
    Resource, TRADABLE_RESOURCES, TOWN_POINTS, CITY_POINTS
)


@dataclass
class Player:
    """
    Represents a player in the Settlers game.

    Tracks the player's resources, towns, cities and roads, and the
    intersection the player last built on (its current position).
    """
    id: int  # Player ID (0-indexed)
    name: str  # Player name
    resources: Dict[Resource, int] = field(default_factory=dict)
    towns: Set[int] = field(default_factory=set)  # Intersection indices
    cities: Set[int] = field(default_factory=set)  # Intersection indices
    roads: Set[Tuple[int, int]] = field(default_factory=set)  # Sorted index pairs
    current_intersection: Optional[int] = None
    points: int = 0

    def __post_init__(self):
        """Initialize empty resource counts and derive points."""
        for resource in TRADABLE_RESOURCES:
            if resource not in self.resources:
                self.resources[resource] = 0
        self.recalculate_points()

    def recalculate_points(self) -> None:
        """Recalculate victory points from towns and cities."""
        self.points = len(self.towns) * TOWN_POINTS + len(self.cities) * CITY_POINTS

    def can_afford(self, cost: Dict[Resource, int]) -> bool:
        return all(self.resources.get(r, 0) >= n for r, n in cost.items())

    def add_resources(self, resources: Dict[Resource, int]) -> None:
        for resource, count in resources.items():
            self.resources[resource] = self.resources.get(resource, 0) + count

    def remove_resources(self, resources: Dict[Resource, int]) -> None:
        """
        Pay resources.

        Args:
            resources: Dictionary mapping resources to counts

        Raises:
            ValueError: If the player does not hold enough of a resource
        """
        for resource, count in resources.items():
            if self.resources.get(resource, 0) < count:
                raise ValueError(f"Not enough {resource.name}")
            self.resources[resource] -= count

    def buildings(self) -> Set[int]:
        """Intersections occupied by this player's towns or cities."""
        return self.towns | self.cities

    def network(self) -> Set[int]:
        """Intersections reachable by this player's buildings and roads."""
        nodes = set(self.buildings())
        for a, b in self.roads:
            nodes.add(a)
            nodes.add(b)
        return nodes

    def get_total_resources(self) -> int:
        return sum(self.resources.values())

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the player to a dictionary for serialization.

        Returns:
            Dictionary representation of the player
        """
        return {
            "id": self.id,
            "name": self.name,
            "resources": {r.name: n for r, n in self.resources.items()},
            "towns": sorted(self.towns),
            "cities": sorted(self.cities),
            "roads": [list(road) for road in sorted(self.roads)],
            "current_intersection": self.current_intersection,
            "points": self.points,
        }

    def __str__(self) -> str:
        resources = ", ".join(f"{n} {r.name}" for r, n in self.resources.items() if n > 0)
        return (f"{self.name} (Player {self.id}): {self.points} points, "
                f"{len(self.towns)} towns, {len(self.cities)} cities, "
                f"{len(self.roads)} roads, resources: {resources or 'none'}")


def roads_key(a: int, b: int) -> Tuple[int, int]:
    """Canonical key for the road between two intersections."""
    return (a, b) if a < b else (b, a)


def default_player_names(num_players: int, names: Optional[List[str]] = None) -> List[str]:
    """Default player names ("Player 1", "Player 2", ...) unless given."""
    if names is None:
        return [f"Player {i + 1}" for i in range(num_players)]
    if len(names) != num_players:
        raise ValueError("Number of player names must match number of players")
    return list(names)

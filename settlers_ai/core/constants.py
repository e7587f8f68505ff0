"""
Constants for the Settlers board game.

This module defines the game constants used throughout the Settlers implementation,
including resource types, building costs, board dimensions and victory conditions.
"""
from enum import Enum, auto
from typing import Dict, List, Final


class Resource(Enum):
    """Enum representing the resources a field can produce."""
    WOOD = auto()
    CLAY = auto()
    WHEAT = auto()
    SHEEP = auto()
    ORE = auto()
    DESERT = auto()  # Produces nothing


# Resources players can hold and trade (excluding desert)
TRADABLE_RESOURCES: Final[List[Resource]] = [
    Resource.WOOD,
    Resource.CLAY,
    Resource.WHEAT,
    Resource.SHEEP,
    Resource.ORE,
]

# Resource mix used when laying out a random board
FIELD_RESOURCES: Final[List[Resource]] = TRADABLE_RESOURCES + [Resource.DESERT]


class MoveType(Enum):
    """Tag of a move; the scoring heuristic dispatches on it."""
    BUILD_TOWN = auto()
    UPGRADE_TOWN = auto()
    BUILD_ROAD = auto()
    TRADE = auto()
    END_TURN = auto()


# Field weights (production odds out of PRODUCTION_DIE_SIDES)
MIN_FIELD_WEIGHT: Final[int] = 1
MAX_FIELD_WEIGHT: Final[int] = 5
PRODUCTION_DIE_SIDES: Final[int] = 6

# Building costs
TOWN_COST: Final[Dict[Resource, int]] = {
    Resource.WOOD: 1,
    Resource.CLAY: 1,
    Resource.WHEAT: 1,
    Resource.SHEEP: 1,
}
CITY_COST: Final[Dict[Resource, int]] = {
    Resource.WHEAT: 2,
    Resource.ORE: 3,
}
ROAD_COST: Final[Dict[Resource, int]] = {
    Resource.WOOD: 1,
    Resource.CLAY: 1,
}

# Bank trade rate (give N of one resource for 1 of another)
BANK_TRADE_RATE: Final[int] = 4

# Points
TOWN_POINTS: Final[int] = 1
CITY_POINTS: Final[int] = 2

# Player limits
MIN_PLAYERS: Final[int] = 2
MAX_PLAYERS: Final[int] = 4

# Opening placements per player (one free town per opening turn)
OPENING_TOWNS_PER_PLAYER: Final[int] = 2

# Victory conditions
VICTORY_POINTS: Final[int] = 10
MAX_TURNS: Final[int] = 200

# Default board size in intersections
DEFAULT_BOARD_WIDTH: Final[int] = 6
DEFAULT_BOARD_HEIGHT: Final[int] = 5

# Opening heuristic multipliers per resource (unlisted resources count 0)
OPENING_RESOURCE_MULTIPLIERS: Final[Dict[Resource, int]] = {
    Resource.WOOD: 4,
    Resource.CLAY: 4,
    Resource.WHEAT: 3,
    Resource.SHEEP: 3,
}
OPENING_SCORE_SCALE: Final[int] = 100

# Move heuristic divisors
TOWN_SCORE_DIVISOR: Final[float] = 100.0
UPGRADE_SCORE_DIVISOR: Final[float] = 100.0
ROAD_SCORE_DIVISOR: Final[float] = 400.0

# AI and search settings
DEFAULT_TIME_LIMIT: Final[float] = 1.0  # seconds
DEFAULT_ROLLOUT_DEPTH: Final[int] = 6
DEFAULT_OPENING_MOVE_THRESHOLD: Final[int] = 4
DEFAULT_DISCOUNT: Final[float] = 0.9

"""
Moves for the Settlers game.

A move is a small immutable value: a MoveType tag plus up to two position
indices. Their meaning depends on the tag:

- BUILD_TOWN:   index1 = intersection to build on
- UPGRADE_TOWN: index1 = intersection holding the town
- BUILD_ROAD:   index1 = target intersection, index2 = source intersection
- TRADE:        index1 = resource given, index2 = resource received
                (positions in TRADABLE_RESOURCES)
- END_TURN:     no indices
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from settlers_ai.core.constants import MoveType, TRADABLE_RESOURCES


@dataclass(frozen=True)
class Move:
    """A single move on the board."""
    move_type: MoveType
    index1: Optional[int] = None
    index2: Optional[int] = None

    @classmethod
    def build_town(cls, intersection: int) -> Move:
        return cls(MoveType.BUILD_TOWN, intersection)

    @classmethod
    def upgrade_town(cls, intersection: int) -> Move:
        return cls(MoveType.UPGRADE_TOWN, intersection)

    @classmethod
    def build_road(cls, target: int, source: int) -> Move:
        return cls(MoveType.BUILD_ROAD, target, source)

    @classmethod
    def trade(cls, give: int, receive: int) -> Move:
        return cls(MoveType.TRADE, give, receive)

    @classmethod
    def end_turn(cls) -> Move:
        return cls(MoveType.END_TURN)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "move_type": self.move_type.name,
            "index1": self.index1,
            "index2": self.index2,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Move:
        """Create from dictionary representation."""
        return cls(
            move_type=MoveType[data["move_type"]],
            index1=data.get("index1"),
            index2=data.get("index2"),
        )

    def __str__(self) -> str:
        if self.move_type == MoveType.BUILD_TOWN:
            return f"Build town at {self.index1}"
        if self.move_type == MoveType.UPGRADE_TOWN:
            return f"Upgrade town at {self.index1}"
        if self.move_type == MoveType.BUILD_ROAD:
            return f"Build road {self.index2}->{self.index1}"
        if self.move_type == MoveType.TRADE:
            give = TRADABLE_RESOURCES[self.index1].name
            receive = TRADABLE_RESOURCES[self.index2].name
            return f"Trade {give} for {receive}"
        return "End turn"

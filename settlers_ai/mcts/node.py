"""
Monte Carlo Tree Search tree for Settlers.

This module defines the search tree. Nodes live in a flat list owned by the
Tree and refer to each other by index: a node owns the indices of its
children and keeps the index of its parent only to walk back up during
backpropagation.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import copy
import math
import random

from settlers_ai.core.board import Board
from settlers_ai.core.exceptions import CloneFailureError
from settlers_ai.core.moves import Move
from settlers_ai.mcts.config import MCTSConfig


class State:
    """
    A board snapshot inside the tree.

    Holds the board, the move that produced it (None for the root), the
    player who played that move and the player to move when the snapshot
    was taken.
    """

    def __init__(
        self,
        board: Board,
        initial_move: Optional[Move] = None,
        player_id: Optional[int] = None,
        mover: Optional[int] = None
    ):
        self.board = board
        self.initial_move = initial_move
        self.player_id = board.current_player_index if player_id is None else player_id
        self.mover = mover

    def is_terminal(self) -> bool:
        return not self.board.is_running()

    def get_all_possible_states(self) -> List[State]:
        """
        Compute one successor state per legal move.

        Each successor gets its own copy of the board with the move applied.

        Returns:
            Successor states in legal move order
        """
        states = []
        mover = self.board.current_player_index
        for move in self.board.legal_moves():
            board = self.board.clone()
            board.play_move(move)
            states.append(State(board, move, mover=mover))
        return states

    def clone(self) -> State:
        """
        Deep copy of this state for a rollout.

        Raises:
            CloneFailureError: If the board cannot be copied
        """
        try:
            board = self.board.clone()
        except CloneFailureError:
            raise
        except (copy.Error, TypeError, RecursionError) as e:
            raise CloneFailureError(f"Cannot copy board for rollout: {e}") from e
        return State(board, self.initial_move, self.player_id, self.mover)

    def __str__(self) -> str:
        return f"State(move={self.initial_move}, player={self.player_id})"


@dataclass
class Node:
    """
    A node of the search tree.

    Statistics start at zero and are only changed by Tree.backpropagate.
    """
    index: int
    state: State
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    visits: int = 0
    total_score: float = 0.0

    @property
    def move(self) -> Optional[Move]:
        return self.state.initial_move

    @property
    def average_score(self) -> float:
        return self.total_score / self.visits if self.visits > 0 else 0.0

    def is_leaf(self) -> bool:
        return not self.children

    def __str__(self) -> str:
        return (f"Node(index={self.index}, move={self.move}, "
                f"visits={self.visits}, "
                f"score={self.total_score:.2f}, "
                f"children={len(self.children)})")


class Tree:
    """
    Arena of search nodes rooted at the searched board.

    A tree is built for a single search and thrown away afterwards.
    """

    def __init__(self, board: Board, config: Optional[MCTSConfig] = None):
        self.config = config or MCTSConfig()
        self.nodes: List[Node] = [Node(index=0, state=State(board))]

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def __len__(self) -> int:
        return len(self.nodes)

    def parent(self, node: Node) -> Optional[Node]:
        return None if node.parent is None else self.nodes[node.parent]

    def children(self, node: Node) -> List[Node]:
        """Children of a node in expansion order."""
        return [self.nodes[i] for i in node.children]

    def add_child(self, parent: Node, state: State) -> Node:
        child = Node(index=len(self.nodes), state=state, parent=parent.index)
        self.nodes.append(child)
        parent.children.append(child.index)
        return child

    def depth(self, node: Node) -> int:
        depth = 0
        while node.parent is not None:
            node = self.nodes[node.parent]
            depth += 1
        return depth

    def uct_value(self, parent: Node, child: Node) -> float:
        """
        Calculate the UCT value of a child.

        UCT = average_score + C * sqrt(ln(parent_visits) / child_visits)

        Args:
            parent: Node the child hangs under
            child: Child node to evaluate

        Returns:
            UCT value, infinite for unvisited children
        """
        if child.visits == 0:
            return MCTSConfig.INFINITE_VALUE

        exploitation = child.total_score / child.visits
        exploration = math.sqrt(math.log(parent.visits) / child.visits)
        return exploitation + self.config.exploration_weight * exploration

    def select_child(self, node: Node) -> Node:
        """
        Select the child with the highest UCT value (first one on ties).

        Raises:
            ValueError: If the node has no children
        """
        if not node.children:
            raise ValueError("Cannot select child from node with no children")
        return max(self.children(node), key=lambda c: self.uct_value(node, c))

    def select_leaf(self) -> Node:
        """Descend from the root by UCT until reaching a node without children."""
        node = self.root
        while node.children:
            node = self.select_child(node)
        return node

    def expand(self, node: Node) -> List[Node]:
        """
        Create one child per successor state of a node.

        Calling this twice on the same node duplicates its children, so the
        search expands each node at most once.

        Args:
            node: Leaf to expand

        Returns:
            The new children (empty for terminal states)
        """
        if node.state.is_terminal():
            return []
        return [self.add_child(node, state) for state in node.state.get_all_possible_states()]

    def backpropagate(self, node: Node, score: float) -> None:
        """
        Add one visit and the score to a node and all of its ancestors.

        Args:
            node: Node the rollout started from
            score: Rollout score
        """
        current: Optional[Node] = node
        while current is not None:
            current.visits += 1
            current.total_score += score
            current = self.parent(current)

    def random_child(self, node: Node, rng: random.Random) -> Node:
        return self.nodes[rng.choice(node.children)]

    def child_with_max_visits(self, node: Node) -> Optional[Node]:
        """
        Most visited child, ties going to the first expanded.

        Returns:
            The child, or None if the node has no children
        """
        if not node.children:
            return None
        return max(self.children(node), key=lambda c: c.visits)

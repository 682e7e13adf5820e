# cxsynth/frontier.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional

from cxsynth.gates import CX, MoveSet
from cxsynth.states import SearchState

ROOT = -1


@dataclass(slots=True)
class SearchNode:
    """
    One discovered state.

    Attributes
    ----------
    state : SearchState
        The state value.
    depth : int
        Number of gates from the arena's root.
    parent : int
        Arena index of the parent node, ROOT for the root.
    move : Optional[CX]
        Gate that produced this node from its parent (None for the root).
    """

    state: SearchState
    depth: int
    parent: int = ROOT
    move: Optional[CX] = None


@dataclass
class SearchStats:
    """Counters recorded during one search invocation."""

    expansions: int = 0
    generated: int = 0
    duplicates: int = 0
    layers: List[int] = field(default_factory=list)
    peak_visited: int = 0

    def merge(self, other: SearchStats) -> SearchStats:
        return SearchStats(
            expansions=self.expansions + other.expansions,
            generated=self.generated + other.generated,
            duplicates=self.duplicates + other.duplicates,
            layers=self.layers + other.layers,
            peak_visited=self.peak_visited + other.peak_visited,
        )


class SearchArena:
    """
    Append-only node store plus visited set for one search tree.

    Nodes refer to their parent by index, so the tree can be walked back
    from any node without holding live references. The visited set maps
    a state's canonical key to the index of the node it was first seen at.
    An arena belongs to a single search invocation and is dropped with it.
    """

    def __init__(self, root: SearchState):
        self.nodes: List[SearchNode] = [SearchNode(root, 0)]
        self.visited: Dict[Hashable, int] = {root.key(): 0}
        self.stats = SearchStats()

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root(self) -> SearchNode:
        return self.nodes[0]

    def lookup(self, key: Hashable) -> Optional[int]:
        return self.visited.get(key)

    def add(self, state: SearchState, parent: int, move: CX) -> Optional[int]:
        """
        Record `state` as a child of node `parent` reached by `move`.

        Returns the new node index, or None if the state was already visited.
        """
        self.stats.generated += 1
        key = state.key()
        if key in self.visited:
            self.stats.duplicates += 1
            return None
        idx = len(self.nodes)
        self.nodes.append(SearchNode(state, self.nodes[parent].depth + 1, parent, move))
        self.visited[key] = idx
        self.stats.peak_visited = max(self.stats.peak_visited, len(self.visited))
        return idx

    def push(self, state: SearchState, parent: int, move: CX) -> int:
        """Append a node unconditionally (used by A*, which tracks best costs itself)."""
        self.stats.generated += 1
        idx = len(self.nodes)
        self.nodes.append(SearchNode(state, self.nodes[parent].depth + 1, parent, move))
        return idx

    def expand_layer(self, layer: List[int], moves: MoveSet, deadline: Optional[float] = None) -> Optional[List[int]]:
        """
        Expand every node of `layer` by every move, in order.

        Returns the indices of the newly discovered nodes, or None if the
        deadline passed part way through.
        """
        new_layer: List[int] = []
        for idx in layer:
            if past(deadline):
                return None
            self.stats.expansions += 1
            state = self.nodes[idx].state
            for mv in moves:
                child = self.add(state.apply(mv), idx, mv)
                if child is not None:
                    new_layer.append(child)
        self.stats.layers.append(len(new_layer))
        return new_layer

    def path(self, idx: int) -> List[CX]:
        """Gates from the root to node `idx`, in execution order."""
        out: List[CX] = []
        node = self.nodes[idx]
        while node.parent != ROOT:
            assert node.move is not None
            out.append(node.move)
            node = self.nodes[node.parent]
        out.reverse()
        return out


def join_paths(forward: SearchArena, f_idx: int, backward: SearchArena, b_idx: int) -> List[CX]:
    """
    Combine a forward path (source -> meeting state) with a backward path
    (target -> meeting state) into one circuit source -> target.

    The backward path is walked from the meeting node towards its root;
    every CX is its own inverse, so the moves are kept as they are.
    """
    head = forward.path(f_idx)
    tail = backward.path(b_idx)
    tail.reverse()
    return head + tail


def deadline_after(timeout: Optional[float]) -> Optional[float]:
    if timeout is None:
        return None
    return time.monotonic() + timeout


def past(deadline: Optional[float]) -> bool:
    return deadline is not None and time.monotonic() >= deadline

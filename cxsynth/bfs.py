# cxsynth/bfs.py
from __future__ import annotations

import logging
import time
from typing import Optional

from cxsynth.frontier import SearchArena
from cxsynth.gates import MoveSet
from cxsynth.result import SearchResult
from cxsynth.states import SearchState

log = logging.getLogger(__name__)


def bfs(
    source: SearchState,
    target: SearchState,
    moves: MoveSet,
    max_depth: int,
    *,
    deadline: Optional[float] = None,
) -> SearchResult:
    """
    Exhaustive breadth-first search from `source` to `target`.

    Layer k holds exactly the states at distance k from the source, so the
    first layer containing the target gives a shortest circuit.

    Parameters
    ----------
    source, target : SearchState
        End points; must be of the same state type.
    moves : MoveSet
        Allowed gates, expanded in their fixed order.
    max_depth : int
        Maximum number of gates (layers) to explore.
    deadline : Optional[float]
        `time.monotonic()` value after which the search gives up.

    Returns
    -------
    SearchResult
        FOUND with the circuit, NO_SOLUTION when the frontier empties or
        the bound is reached, TIMEOUT when the deadline passes.
    """
    started = time.monotonic()
    arena = SearchArena(source)
    goal = target.key()

    if source.key() == goal:
        return SearchResult.solved([], max_depth, arena.stats).stamp(started)

    layer = [0]
    for depth in range(1, max_depth + 1):
        new_layer = arena.expand_layer(layer, moves, deadline)
        if new_layer is None:
            return SearchResult.failed(max_depth, arena.stats, timed_out=True).stamp(started)
        log.debug("bfs depth %d: %d new states, %d visited", depth, len(new_layer), len(arena.visited))

        hit = arena.lookup(goal)
        if hit is not None:
            log.info("bfs found a %d-gate circuit", depth)
            return SearchResult.solved(arena.path(hit), max_depth, arena.stats).stamp(started)
        if not new_layer:
            log.info("bfs exhausted the reachable states at depth %d", depth - 1)
            break
        layer = new_layer

    return SearchResult.failed(max_depth, arena.stats).stamp(started)
# cxsynth/astar.py
from __future__ import annotations

import heapq
import itertools
import logging
import math
import time
from typing import Callable, Dict, Hashable, List, Optional, Tuple

from cxsynth.frontier import SearchArena, past
from cxsynth.gates import MoveSet
from cxsynth.result import SearchResult
from cxsynth.states import SearchState

log = logging.getLogger(__name__)

Heuristic = Callable[[SearchState, SearchState], int]


def state_distance(state: SearchState, target: SearchState) -> int:
    """Default heuristic: the state's own admissible lower bound."""
    return state.distance(target)


def astar(
    source: SearchState,
    target: SearchState,
    moves: MoveSet,
    max_depth: int,
    *,
    heuristic: Optional[Heuristic] = None,
    deadline: Optional[float] = None,
) -> SearchResult:
    """
    A* search ordered by f = g + h.

    `heuristic(state, target)` must never overestimate the number of gates
    left; with that, the first time the target is popped its path is
    shortest. Children with g + h above `max_depth` are never queued.
    Ties on f are broken by smaller h, then by insertion order.
    """
    h = heuristic or state_distance
    started = time.monotonic()
    arena = SearchArena(source)
    stats = arena.stats
    goal = target.key()

    best_g: Dict[Hashable, int] = {source.key(): 0}
    counter = itertools.count()
    h0 = h(source, target)
    heap: List[Tuple[int, int, int, int]] = []
    if h0 <= max_depth:
        heap.append((h0, h0, next(counter), 0))

    while heap:
        if past(deadline):
            return SearchResult.failed(max_depth, stats, timed_out=True).stamp(started)

        f, _, _, idx = heapq.heappop(heap)
        node = arena.nodes[idx]
        key = node.state.key()
        if node.depth > best_g.get(key, math.inf):
            continue  # stale
        if key == goal:
            log.info("astar found a %d-gate circuit after %d expansions", node.depth, stats.expansions)
            return SearchResult.solved(arena.path(idx), max_depth, stats).stamp(started)
        if node.depth >= max_depth:
            continue

        stats.expansions += 1
        g = node.depth + 1
        for mv in moves:
            child = node.state.apply(mv)
            ckey = child.key()
            if g >= best_g.get(ckey, math.inf):
                stats.duplicates += 1
                continue
            hc = h(child, target)
            if g + hc > max_depth:
                continue
            best_g[ckey] = g
            cidx = arena.push(child, idx, mv)
            heapq.heappush(heap, (g + hc, hc, next(counter), cidx))

        stats.peak_visited = max(stats.peak_visited, len(best_g))
        if stats.expansions % 10000 == 0:
            log.debug("astar: %d expansions, f=%d, queue %d, seen %d", stats.expansions, f, len(heap), len(best_g))

    log.info("astar exhausted the queue within depth bound %d", max_depth)
    return SearchResult.failed(max_depth, stats).stamp(started)

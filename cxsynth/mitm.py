# cxsynth/mitm.py
from __future__ import annotations

import logging
import time
from typing import Optional

from cxsynth.frontier import SearchArena, join_paths
from cxsynth.gates import MoveSet
from cxsynth.result import SearchResult
from cxsynth.states import SearchState

log = logging.getLogger(__name__)


def mitm(
    source: SearchState,
    target: SearchState,
    moves: MoveSet,
    max_depth: int,
    *,
    deadline: Optional[float] = None,
) -> SearchResult:
    """
    Meet-in-the-middle breadth-first search.

    One tree grows from the source and one from the target, using the same
    moves on both sides. Each round expands one layer of the shallower tree
    (the forward tree on ties) and looks every new state up in the other
    tree's visited set. Before a round, every split of forward_depth +
    backward_depth gates has been checked, so the first meeting yields a
    shortest circuit. `max_depth` bounds the combined depth, i.e. the gate
    count, as for the other engines.
    """
    started = time.monotonic()
    forward = SearchArena(source)
    backward = SearchArena(target)

    if source.key() == target.key():
        return SearchResult.solved([], max_depth, forward.stats).stamp(started)

    f_layer, b_layer = [0], [0]
    f_depth = b_depth = 0

    while f_depth + b_depth < max_depth:
        grow_forward = f_depth <= b_depth
        if grow_forward:
            grown, other, layer = forward, backward, f_layer
        else:
            grown, other, layer = backward, forward, b_layer

        new_layer = grown.expand_layer(layer, moves, deadline)
        if new_layer is None:
            return SearchResult.failed(max_depth, _stats(forward, backward), timed_out=True).stamp(started)

        if grow_forward:
            f_depth, f_layer = f_depth + 1, new_layer
        else:
            b_depth, b_layer = b_depth + 1, new_layer
        log.debug(
            "mitm %s depth %d: %d new states (forward %d / backward %d visited)",
            "forward" if grow_forward else "backward",
            f_depth if grow_forward else b_depth,
            len(new_layer),
            len(forward.visited),
            len(backward.visited),
        )

        for idx in new_layer:
            met = other.lookup(grown.nodes[idx].state.key())
            if met is None:
                continue
            if grow_forward:
                circuit = join_paths(forward, idx, backward, met)
            else:
                circuit = join_paths(forward, met, backward, idx)
            log.info("mitm met at forward depth %d, backward depth %d", f_depth, b_depth)
            return SearchResult.solved(circuit, max_depth, _stats(forward, backward)).stamp(started)

        if not new_layer:
            # one side has visited its whole component without meeting the other
            log.info("mitm exhausted the %s search space", "forward" if grow_forward else "backward")
            break

    return SearchResult.failed(max_depth, _stats(forward, backward)).stamp(started)


def _stats(forward: SearchArena, backward: SearchArena):
    return forward.stats.merge(backward.stats)

# cxsynth/engine.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional

from cxsynth.astar import astar
from cxsynth.bfs import bfs
from cxsynth.errors import MalformedInput, UnsupportedAlgorithmForInputKind
from cxsynth.frontier import SearchStats, deadline_after
from cxsynth.gates import MoveSet
from cxsynth.mitm import mitm
from cxsynth.result import SearchResult
from cxsynth.states import InputKind, LinearState, SearchState, StabiliserState

log = logging.getLogger(__name__)


class Algorithm(StrEnum):
    BFS = "bfs"  # exhaustive breadth-first search
    MITM = "mitm"  # bidirectional breadth-first search
    ASTAR = "astar"  # A* on linear maps
    ASTAR_STABILISER = "astar-stabiliser"  # A* on X-stabiliser states


# Input kinds each algorithm accepts
SUPPORTED_KINDS: dict[Algorithm, set[InputKind]] = {
    Algorithm.BFS: {InputKind.CIRCUIT, InputKind.STABILISER},
    Algorithm.MITM: {InputKind.CIRCUIT, InputKind.STABILISER},
    Algorithm.ASTAR: {InputKind.CIRCUIT},
    Algorithm.ASTAR_STABILISER: {InputKind.STABILISER},
}


Engine = Callable[[SearchState, SearchState, MoveSet, int, Optional[float]], SearchResult]


def _run_bfs(source, target, moves, max_depth, deadline):
    return bfs(source, target, moves, max_depth, deadline=deadline)


def _run_mitm(source, target, moves, max_depth, deadline):
    return mitm(source, target, moves, max_depth, deadline=deadline)


def _run_astar(source, target, moves, max_depth, deadline):
    return astar(source, target, moves, max_depth, heuristic=LinearState.distance, deadline=deadline)


def _run_astar_stabiliser(source, target, moves, max_depth, deadline):
    return astar(source, target, moves, max_depth, heuristic=StabiliserState.distance, deadline=deadline)


ENGINES: dict[Algorithm, Engine] = {
    Algorithm.BFS: _run_bfs,
    Algorithm.MITM: _run_mitm,
    Algorithm.ASTAR: _run_astar,
    Algorithm.ASTAR_STABILISER: _run_astar_stabiliser,
}


@dataclass
class SearchConfig:
    algorithm: Algorithm = Algorithm.ASTAR
    max_depth: int = 5
    timeout: Optional[float] = None  # seconds


def algorithms_for(kind: InputKind) -> list[Algorithm]:
    """Every algorithm that accepts `kind`, in declaration order."""
    return [a for a in Algorithm if kind in SUPPORTED_KINDS[a]]


def check_compatible(algorithm: Algorithm, source: SearchState, target: SearchState, moves: MoveSet) -> None:
    """
    Fail fast on inputs that cannot be searched together.

    Raises
    ------
    MalformedInput
        If source and target differ in kind or qubit count.
    UnsupportedAlgorithmForInputKind
        If `algorithm` does not accept the input kind.
    InvalidGate
        If a move does not fit on the problem's qubits.
    """
    if source.kind != target.kind:
        raise MalformedInput(f"Source is a {source.kind} but target is a {target.kind}")
    if source.num_qubits != target.num_qubits:
        raise MalformedInput(
            f"Source has {source.num_qubits} qubits but target has {target.num_qubits}"
        )
    if source.kind not in SUPPORTED_KINDS[algorithm]:
        raise UnsupportedAlgorithmForInputKind(algorithm.value, source.kind.value)
    for g in moves:
        g.check(source.num_qubits)


def synthesize(
    source: SearchState,
    target: SearchState,
    moves: MoveSet,
    config: SearchConfig,
) -> SearchResult:
    """
    Find a shortest CX circuit from `source` to `target` using only `moves`.

    The identity case returns the empty circuit without searching. Bound
    exhaustion and timeouts come back as a SearchResult status, never as
    an exception.
    """
    if config.max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {config.max_depth}")
    check_compatible(config.algorithm, source, target, moves)

    if source.key() == target.key():
        log.info("source already equals target, nothing to search")
        return SearchResult.solved([], config.max_depth, SearchStats())

    log.info(
        "running %s on %d qubits with %d moves, depth bound %d",
        config.algorithm.value, source.num_qubits, len(moves), config.max_depth,
    )
    started = time.monotonic()
    engine = ENGINES[config.algorithm]
    result = engine(source, target, moves, config.max_depth, deadline_after(config.timeout))
    result.elapsed = time.monotonic() - started
    return result

# cxsynth/result.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from cxsynth.errors import NoSolutionWithinDepth
from cxsynth.frontier import SearchStats
from cxsynth.gates import CX


class SearchStatus(IntEnum):
    FOUND = 0
    NO_SOLUTION = 1
    TIMEOUT = 2


@dataclass
class SearchResult:
    """
    Outcome of one engine invocation.

    Attributes
    ----------
    status : SearchStatus
        FOUND, NO_SOLUTION (bound exhausted or frontier empty) or TIMEOUT.
    max_depth : int
        Depth bound the search ran with.
    circuit : Optional[List[CX]]
        Gates in execution order; only set when status is FOUND. An empty
        list is a valid solution (source already equals target).
    stats : SearchStats
        Counters gathered during the search.
    elapsed : float
        Wall-clock seconds spent in the engine.
    """

    status: SearchStatus
    max_depth: int
    circuit: Optional[List[CX]] = None
    stats: SearchStats = field(default_factory=SearchStats)
    elapsed: float = 0.0

    @property
    def found(self) -> bool:
        return self.status == SearchStatus.FOUND

    @property
    def gate_count(self) -> Optional[int]:
        return None if self.circuit is None else len(self.circuit)

    def require_circuit(self) -> List[CX]:
        """Return the circuit, or raise NoSolutionWithinDepth."""
        if self.status != SearchStatus.FOUND or self.circuit is None:
            raise NoSolutionWithinDepth(self.max_depth, timed_out=self.status == SearchStatus.TIMEOUT)
        return self.circuit

    def stamp(self, started: float) -> SearchResult:
        """Set `elapsed` from a `time.monotonic()` start value."""
        self.elapsed = time.monotonic() - started
        return self

    @classmethod
    def solved(cls, circuit: List[CX], max_depth: int, stats: SearchStats) -> SearchResult:
        return cls(SearchStatus.FOUND, max_depth, list(circuit), stats)

    @classmethod
    def failed(cls, max_depth: int, stats: SearchStats, *, timed_out: bool = False) -> SearchResult:
        status = SearchStatus.TIMEOUT if timed_out else SearchStatus.NO_SOLUTION
        return cls(status, max_depth, None, stats)

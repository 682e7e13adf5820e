# cxsynth/gates.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

from cxsynth.errors import InvalidGate


@dataclass(frozen=True, order=True)
class CX:
    """A CX gate. Self-inverse: applying it twice is the identity."""

    ctrl: int
    tgt: int

    def __post_init__(self):
        if self.ctrl == self.tgt or self.ctrl < 0 or self.tgt < 0:
            raise InvalidGate(self.ctrl, self.tgt)

    def check(self, n: int) -> CX:
        """Raise InvalidGate if the gate does not fit on `n` qubits."""
        if self.ctrl >= n or self.tgt >= n:
            raise InvalidGate(self.ctrl, self.tgt, n)
        return self

    @property
    def reversed(self) -> CX:
        """The same interaction with control and target swapped."""
        return CX(self.tgt, self.ctrl)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.ctrl, self.tgt)

    def __repr__(self) -> str:
        return f"CX({self.ctrl}, {self.tgt})"


class MoveSet:
    """
    Run-scoped, ordered set of allowed CX gates.

    The enumeration order is fixed at construction and is the tie-break
    order used by every search engine.
    """

    def __init__(self, gates: Iterable[CX], n: int):
        self.n = n
        seen: set[CX] = set()
        ordered: list[CX] = []
        for g in gates:
            g.check(n)
            if g not in seen:
                seen.add(g)
                ordered.append(g)
        self._gates: Tuple[CX, ...] = tuple(ordered)

    # ---------- constructors ----------
    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, int]], n: int, *, symmetric: bool = True) -> MoveSet:
        """
        Build a move set from (a, b) interactions.

        With `symmetric=True` each interaction allows both CX(a, b) and
        CX(b, a), in that order.
        """
        gates: list[CX] = []
        for a, b in pairs:
            g = CX(int(a), int(b))
            gates.append(g)
            if symmetric:
                gates.append(g.reversed)
        return cls(gates, n)

    @classmethod
    def all_to_all(cls, n: int) -> MoveSet:
        """Every ordered pair of distinct qubits."""
        return cls((CX(a, b) for a in range(n) for b in range(n) if a != b), n)

    # ---------- container protocol ----------
    def __iter__(self) -> Iterator[CX]:
        return iter(self._gates)

    def __len__(self) -> int:
        return len(self._gates)

    def __contains__(self, gate: object) -> bool:
        return gate in self._gates

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MoveSet):
            return NotImplemented
        return self.n == other.n and self._gates == other._gates

    def __repr__(self) -> str:
        return f"MoveSet(n={self.n}, gates={list(self._gates)!r})"

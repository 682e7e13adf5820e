# cxsynth/states.py
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import ClassVar, Hashable, Iterable, Optional, Sequence, Tuple

import numpy as np

from cxsynth.errors import MalformedInput
from cxsynth.gates import CX


class InputKind(StrEnum):
    """What the source/target configurations describe."""

    CIRCUIT = "circuit"
    STABILISER = "stabiliser"


def gf2_rank(matrix: np.ndarray) -> int:
    """Rank of a binary matrix over GF(2) (Gaussian elimination on a copy)."""
    m = np.array(matrix, dtype=np.uint8) & 1
    rows, cols = m.shape
    rank = 0
    for col in range(cols):
        pivots = np.nonzero(m[rank:, col])[0]
        if pivots.size == 0:
            continue
        pivot = rank + int(pivots[0])
        if pivot != rank:
            m[[rank, pivot]] = m[[pivot, rank]]
        below = np.nonzero(m[:, col])[0]
        for r in below:
            if r != rank:
                m[r] ^= m[rank]
        rank += 1
        if rank == rows:
            break
    return rank


def bits_to_array(rows: Sequence[int], n: int) -> np.ndarray:
    """Unpack integer bitmasks into an (len(rows), n) uint8 matrix, bit j -> column j."""
    out = np.zeros((len(rows), n), dtype=np.uint8)
    for i, r in enumerate(rows):
        for j in range(n):
            out[i, j] = (r >> j) & 1
    return out


def array_to_bits(matrix: np.ndarray) -> Tuple[int, ...]:
    """Pack each row of a binary matrix into an integer bitmask, column j -> bit j."""
    return tuple(sum(1 << j for j, v in enumerate(row) if int(v) & 1) for row in np.asarray(matrix))


class SearchState(ABC):
    """
    Immutable search-graph node value shared by every engine.

    Subclasses provide move application, a canonical hashable key used
    for both deduplication and goal testing, and an admissible lower
    bound on the number of CX gates left to reach another state.
    """

    kind: ClassVar[InputKind]

    @property
    @abstractmethod
    def num_qubits(self) -> int:
        ...

    @abstractmethod
    def apply(self, gate: CX) -> SearchState:
        """Return the state after `gate`. Never mutates `self`."""
        ...

    @abstractmethod
    def key(self) -> Hashable:
        """Canonical encoding; two states are equal iff their keys are."""
        ...

    @abstractmethod
    def distance(self, other: SearchState) -> int:
        """
        Lower bound on the number of CX gates needed to go from `self`
        to `other`. Must never overestimate and must change by at most one
        per gate.
        """
        ...

    def replay(self, gates: Iterable[CX]) -> SearchState:
        """Apply `gates` in execution order."""
        state = self
        for g in gates:
            state = state.apply(g)
        return state

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SearchState):
            return NotImplemented
        return type(self) is type(other) and self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())


class LinearState(SearchState):
    """
    Invertible n x n matrix over GF(2): the cumulative linear map of the
    CX gates applied so far.

    Row q is stored as an integer bitmask (bit j = A[q][j]). CX(c, t) is the
    row operation row[t] ^= row[c].
    """

    kind = InputKind.CIRCUIT
    __slots__ = ("_rows",)

    def __init__(self, rows: Iterable[int]):
        self._rows: Tuple[int, ...] = tuple(int(r) for r in rows)

    @classmethod
    def _wrap(cls, rows: Tuple[int, ...]) -> LinearState:
        st = cls.__new__(cls)
        st._rows = rows
        return st

    # ---------- constructors ----------
    @classmethod
    def identity(cls, n: int) -> LinearState:
        return cls._wrap(tuple(1 << q for q in range(n)))

    @classmethod
    def from_circuit(cls, n: int, gates: Iterable[CX]) -> LinearState:
        """Linear map of `gates` applied to the identity on `n` qubits."""
        state = cls.identity(n)
        for g in gates:
            state = state.apply(g.check(n))
        return state

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> LinearState:
        """Build from a square binary matrix; raises MalformedInput if it is not invertible."""
        m = np.asarray(matrix)
        if m.ndim != 2 or m.shape[0] != m.shape[1]:
            raise MalformedInput(f"Linear map must be a square matrix, got shape {m.shape}")
        if not np.isin(m, (0, 1)).all():
            raise MalformedInput("Linear map entries must be 0 or 1")
        if gf2_rank(m) != m.shape[0]:
            raise MalformedInput("Linear map is not invertible over GF(2)")
        return cls(array_to_bits(m))

    # ---------- SearchState ----------
    @property
    def num_qubits(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> Tuple[int, ...]:
        return self._rows

    def apply(self, gate: CX) -> LinearState:
        rows = list(self._rows)
        rows[gate.tgt] ^= rows[gate.ctrl]
        return self._wrap(tuple(rows))

    def key(self) -> Tuple[int, ...]:
        return self._rows

    def distance(self, other: SearchState) -> int:
        # each CX rewrites exactly one row
        if not isinstance(other, LinearState):
            raise TypeError(f"Cannot compare LinearState with {type(other).__name__}")
        return sum(1 for a, b in zip(self._rows, other._rows) if a != b)

    # ---------- views ----------
    def to_matrix(self) -> np.ndarray:
        return bits_to_array(self._rows, self.num_qubits)

    def is_identity(self) -> bool:
        return all(r == 1 << q for q, r in enumerate(self._rows))

    def __repr__(self) -> str:
        n = self.num_qubits
        body = ", ".join(format(r, f"0{n}b")[::-1] for r in self._rows)
        return f"LinearState([{body}])"


class StabiliserState(SearchState):
    """
    X-type stabiliser state on n qubits given by n independent generators.

    Generator i is an integer bitmask with bit q set when it acts as X on
    qubit q. CX(c, t) conjugation maps X_c -> X_c X_t, i.e. every generator
    with X on the control flips its X on the target.

    Equality and hashing use the sorted generator tuple, so generator
    order does not matter.
    """

    kind = InputKind.STABILISER
    __slots__ = ("_gens", "_n", "_key", "_weights")

    def __init__(self, generators: Iterable[int], n: int):
        self._gens: Tuple[int, ...] = tuple(int(g) for g in generators)
        self._n = n
        self._key: Optional[Tuple[int, ...]] = None
        self._weights: Optional[Tuple[int, ...]] = None

    # ---------- constructors ----------
    @classmethod
    def from_strings(cls, lines: Sequence[str]) -> StabiliserState:
        """
        Parse generators such as ["IX", "XI"]; character q is qubit q.

        Raises
        ------
        MalformedInput
            On characters outside {I, X}, ragged or non-square input, or
            linearly dependent generators.
        """
        rows = [ln.strip() for ln in lines]
        n = len(rows)
        if n == 0:
            raise MalformedInput("Stabiliser state has no generators")
        for i, row in enumerate(rows, start=1):
            bad = set(row) - {"I", "X"}
            if bad:
                raise MalformedInput(f"Invalid Pauli character(s) {''.join(sorted(bad))!r}", line=i)
            if len(row) != n:
                raise MalformedInput(f"Generator has length {len(row)}, expected {n}", line=i)
        matrix = np.array([[ch == "X" for ch in row] for row in rows], dtype=np.uint8)
        if gf2_rank(matrix) != n:
            raise MalformedInput("Stabiliser generators are not linearly independent")
        return cls(array_to_bits(matrix), n)

    def to_strings(self) -> list[str]:
        return ["".join("X" if (g >> q) & 1 else "I" for q in range(self._n)) for g in self._gens]

    # ---------- SearchState ----------
    @property
    def num_qubits(self) -> int:
        return self._n

    @property
    def generators(self) -> Tuple[int, ...]:
        return self._gens

    def apply(self, gate: CX) -> StabiliserState:
        c, flip = gate.ctrl, 1 << gate.tgt
        return StabiliserState(tuple(g ^ flip if (g >> c) & 1 else g for g in self._gens), self._n)

    def key(self) -> Tuple[int, ...]:
        if self._key is None:
            self._key = tuple(sorted(self._gens))
        return self._key

    def x_weights(self) -> Tuple[int, ...]:
        """Per qubit, how many generators act as X on it (order independent)."""
        if self._weights is None:
            self._weights = tuple(sum((g >> q) & 1 for g in self._gens) for q in range(self._n))
        return self._weights

    def distance(self, other: SearchState) -> int:
        # a CX rewrites only the target qubit's column
        if not isinstance(other, StabiliserState):
            raise TypeError(f"Cannot compare StabiliserState with {type(other).__name__}")
        if self.key() == other.key():
            return 0
        changed = sum(1 for a, b in zip(self.x_weights(), other.x_weights()) if a != b)
        return max(changed, 1)

    def to_matrix(self) -> np.ndarray:
        return bits_to_array(self._gens, self._n)

    def __repr__(self) -> str:
        return f"StabiliserState({self.to_strings()!r})"

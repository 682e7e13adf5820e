# cxsynth/quantum_backend.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence

from cxsynth.errors import VerificationError
from cxsynth.gates import CX
from cxsynth.states import LinearState, SearchState, StabiliserState


class VerificationBackend(ABC):
    """
    Independent Clifford simulator used to double-check found circuits.

    A CX circuit U maps the X-type Pauli with support v to the X-type Pauli
    with support A v, where A is the circuit's GF(2) linear map. Both the
    linear-map and the stabiliser checks reduce to that conjugation.
    """

    name: str = "abstract"

    @abstractmethod
    def conjugate_x(self, gates: Sequence[CX], n: int, supports: Sequence[int]) -> List[int]:
        """
        Return the X-supports of U P U† for each X-type Pauli P.

        Parameters
        ----------
        gates : Sequence[CX]
            Circuit U in execution order.
        n : int
            Number of qubits.
        supports : Sequence[int]
            Bitmasks, bit q set when P acts as X on qubit q.
        """
        ...

    def linear_matrix(self, gates: Sequence[CX], n: int) -> LinearState:
        """Linear map of `gates`: column j is the image of X_j."""
        columns = self.conjugate_x(gates, n, [1 << j for j in range(n)])
        rows = [0] * n
        for j, col in enumerate(columns):
            for q in range(n):
                if (col >> q) & 1:
                    rows[q] |= 1 << j
        return LinearState(rows)

    def stabiliser_image(self, state: StabiliserState, gates: Sequence[CX]) -> StabiliserState:
        return StabiliserState(self.conjugate_x(gates, state.num_qubits, state.generators), state.num_qubits)

    def replay(self, source: SearchState, gates: Sequence[CX]) -> SearchState:
        """Apply `gates` to `source` through this backend."""
        if isinstance(source, StabiliserState):
            return self.stabiliser_image(source, gates)
        if isinstance(source, LinearState):
            # A_total = A_gates · A_source over GF(2)
            n = source.num_qubits
            gate_map = self.linear_matrix(gates, n).to_matrix().astype(int)
            combined = (gate_map @ source.to_matrix().astype(int)) % 2
            return LinearState.from_matrix(combined)
        raise TypeError(f"Unsupported state type: {type(source).__name__}")


def verify_solution(
    source: SearchState,
    target: SearchState,
    gates: Sequence[CX],
    backend: VerificationBackend,
) -> None:
    """
    Check that `gates` takes `source` to `target`, both with the search's
    own move application and with an independent simulator.

    Raises
    ------
    VerificationError
        If either replay misses the target.
    """
    if source.replay(gates) != target:
        raise VerificationError("replaying the circuit does not reach the target state")
    if backend.replay(source, gates) != target:
        raise VerificationError(f"{backend.name} simulation of the circuit does not reach the target state")

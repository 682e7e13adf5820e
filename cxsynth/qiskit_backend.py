# cxsynth/qiskit_backend.py
from __future__ import annotations

from typing import List, Sequence

from qiskit import QuantumCircuit
from qiskit.quantum_info import Clifford, Pauli

from cxsynth.gates import CX
from cxsynth.quantum_backend import VerificationBackend


def to_qiskit_circuit(gates: Sequence[CX], n: int) -> QuantumCircuit:
    """Build a qiskit QuantumCircuit of CX gates on `n` qubits."""
    qc = QuantumCircuit(n)
    for g in gates:
        qc.cx(g.ctrl, g.tgt)
    return qc


class QiskitBackend(VerificationBackend):
    """
    Verification through qiskit's Clifford simulator.

    Qiskit uses little-endian order for Pauli labels: qubit 0 corresponds
    to the *right-most* character.
    """

    name = "qiskit"

    def conjugate_x(self, gates: Sequence[CX], n: int, supports: Sequence[int]) -> List[int]:
        cliff = Clifford(to_qiskit_circuit(gates, n))
        out: List[int] = []
        for v in supports:
            label = "".join("X" if (v >> q) & 1 else "I" for q in reversed(range(n)))
            # frame="s" gives U P U† (the default "h" frame gives U† P U)
            image = Pauli(label).evolve(cliff, frame="s")
            if image.z.any():
                raise ValueError("CX conjugation produced a Z component")
            out.append(sum(1 << q for q in range(n) if image.x[q]))
        return out

# cxsynth/stim_backend.py
from __future__ import annotations

from typing import List, Sequence

import stim

from cxsynth.gates import CX
from cxsynth.quantum_backend import VerificationBackend


def to_stim_circuit(gates: Sequence[CX], n: int) -> stim.Circuit:
    """Build a stim circuit of CX gates on `n` qubits (padded with identities)."""
    circuit = stim.Circuit()
    for g in gates:
        circuit.append("CX", [g.ctrl, g.tgt])
    if n > circuit.num_qubits:
        circuit.append("I", [n - 1])
    return circuit


class StimBackend(VerificationBackend):
    """Verification through stim's tableau conjugation."""

    name = "stim"

    def conjugate_x(self, gates: Sequence[CX], n: int, supports: Sequence[int]) -> List[int]:
        tableau = stim.Tableau.from_circuit(to_stim_circuit(gates, n))
        out: List[int] = []
        for v in supports:
            pauli = stim.PauliString("".join("X" if (v >> q) & 1 else "_" for q in range(n)))
            image = tableau(pauli)
            xs, zs = image.to_numpy()
            if zs.any():
                raise ValueError("CX conjugation produced a Z component")
            out.append(sum(1 << q for q in range(n) if xs[q]))
        return out

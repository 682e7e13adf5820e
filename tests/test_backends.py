# tests/test_backends.py
import random

import pytest

from cxsynth.errors import VerificationError
from cxsynth.gates import CX, MoveSet
from cxsynth.quantum_backend import VerificationBackend, verify_solution
from cxsynth.qiskit_backend import QiskitBackend
from cxsynth.stim_backend import StimBackend
from cxsynth.states import LinearState, StabiliserState


def random_circuit(n: int, length: int, rng: random.Random) -> list[CX]:
    gates = list(MoveSet.all_to_all(n))
    return [rng.choice(gates) for _ in range(length)]


@pytest.mark.parametrize("Backend", [StimBackend, QiskitBackend])
def test_single_cx_image(Backend: type[VerificationBackend]):
    """X on the control spreads to the target; X on the target stays put."""
    backend = Backend()
    assert backend.conjugate_x([CX(0, 1)], 2, [0b01, 0b10]) == [0b11, 0b10]


@pytest.mark.parametrize("Backend", [StimBackend, QiskitBackend])
def test_empty_circuit_is_identity(Backend: type[VerificationBackend]):
    backend = Backend()
    assert backend.linear_matrix([], 3).is_identity()


@pytest.mark.parametrize("Backend", [StimBackend, QiskitBackend])
@pytest.mark.parametrize("n", [2, 3, 5])
@pytest.mark.parametrize("seed", range(4))
def test_linear_matrix_matches_row_operations(Backend: type[VerificationBackend], n: int, seed: int):
    """Backend must agree with direct row addition for random circuits."""
    rng = random.Random(seed)
    gates = random_circuit(n, 12, rng)
    assert Backend().linear_matrix(gates, n) == LinearState.from_circuit(n, gates)


@pytest.mark.parametrize("Backend", [StimBackend, QiskitBackend])
@pytest.mark.parametrize("seed", range(4))
def test_stabiliser_image_matches_replay(Backend: type[VerificationBackend], seed: int):
    rng = random.Random(seed)
    source = StabiliserState.from_strings(["XXII", "IXII", "IIXX", "IIIX"])
    gates = random_circuit(4, 10, rng)
    assert Backend().stabiliser_image(source, gates) == source.replay(gates)


@pytest.mark.parametrize("Backend", [StimBackend, QiskitBackend])
def test_replay_from_non_identity_source(Backend: type[VerificationBackend]):
    source = LinearState.from_circuit(3, [CX(2, 0), CX(0, 1)])
    gates = [CX(1, 2), CX(0, 2)]
    assert Backend().replay(source, gates) == source.replay(gates)


@pytest.mark.parametrize("Backend", [StimBackend, QiskitBackend])
def test_verify_solution_accepts_correct_circuit(Backend: type[VerificationBackend]):
    source = StabiliserState.from_strings(["IX", "XI"])
    target = StabiliserState.from_strings(["XX", "XI"])
    verify_solution(source, target, [CX(1, 0)], Backend())


@pytest.mark.parametrize("Backend", [StimBackend, QiskitBackend])
def test_verify_solution_rejects_wrong_circuit(Backend: type[VerificationBackend]):
    source = LinearState.identity(3)
    target = LinearState.from_circuit(3, [CX(0, 1), CX(1, 2)])
    with pytest.raises(VerificationError):
        verify_solution(source, target, [CX(1, 2), CX(0, 1)], Backend())

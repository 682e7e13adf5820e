import random
import time

import pytest

from cxsynth.astar import astar
from cxsynth.bfs import bfs
from cxsynth.frontier import SearchArena
from cxsynth.gates import CX, MoveSet
from cxsynth.mitm import mitm
from cxsynth.result import SearchStatus
from cxsynth.states import LinearState

ENGINES = [bfs, mitm, astar]

LINE3 = MoveSet.from_pairs([(0, 1), (1, 2)], 3)


def shortest_distances(root, moves: MoveSet) -> dict:
    """Exhaustive BFS over the whole reachable space: key -> (state, distance)."""
    arena = SearchArena(root)
    layer = [0]
    while layer:
        layer = arena.expand_layer(layer, moves)
    return {key: (arena.nodes[idx].state, arena.nodes[idx].depth) for key, idx in arena.visited.items()}


@pytest.mark.parametrize("engine", ENGINES)
def test_scenario_linear_transform(engine):
    """n=3 on a line: CX(0,1) CX(1,2) CX(0,1) needs exactly three gates."""
    target = LinearState.from_circuit(3, [CX(0, 1), CX(1, 2), CX(0, 1)])
    source = LinearState.identity(3)

    res = engine(source, target, LINE3, 3)
    assert res.status == SearchStatus.FOUND
    assert len(res.circuit) == 3
    assert source.replay(res.circuit) == target
    assert (source.replay(res.circuit).to_matrix() == target.to_matrix()).all()


@pytest.mark.parametrize("engine", ENGINES)
def test_scenario_depth_bound(engine):
    """A target two gates away fails at depth 1 and succeeds at depth 2."""
    target = LinearState.from_circuit(3, [CX(0, 1), CX(1, 2)])
    source = LinearState.identity(3)

    short = engine(source, target, LINE3, 1)
    assert short.status == SearchStatus.NO_SOLUTION
    assert short.circuit is None

    ok = engine(source, target, LINE3, 2)
    assert ok.status == SearchStatus.FOUND
    assert len(ok.circuit) == 2
    assert source.replay(ok.circuit) == target


@pytest.mark.parametrize("engine", ENGINES)
def test_identity_returns_empty_circuit_without_expanding(engine):
    st = LinearState.from_circuit(3, [CX(0, 1)])
    res = engine(st, st, LINE3, 4)
    assert res.status == SearchStatus.FOUND
    assert res.circuit == []
    assert res.stats.expansions == 0


@pytest.mark.parametrize("engine", ENGINES)
def test_zero_depth_bound(engine):
    target = LinearState.from_circuit(3, [CX(0, 1)])
    res = engine(LinearState.identity(3), target, LINE3, 0)
    assert res.status == SearchStatus.NO_SOLUTION


@pytest.mark.parametrize("engine", ENGINES)
def test_unreachable_target_reports_no_solution(engine):
    """Moves never touch qubit 2, so CX(1,2) cannot be built at any depth."""
    moves = MoveSet.from_pairs([(0, 1)], 3)
    target = LinearState.from_circuit(3, [CX(1, 2)])
    res = engine(LinearState.identity(3), target, moves, 10)
    assert res.status == SearchStatus.NO_SOLUTION
    assert res.circuit is None


@pytest.mark.parametrize("engine", ENGINES)
def test_expired_deadline_reports_timeout(engine):
    target = LinearState.from_circuit(3, [CX(0, 1), CX(1, 2)])
    res = engine(LinearState.identity(3), target, LINE3, 5, deadline=time.monotonic() - 1.0)
    assert res.status == SearchStatus.TIMEOUT
    assert res.circuit is None


@pytest.mark.parametrize("engine", ENGINES)
def test_non_identity_source(engine):
    source = LinearState.from_circuit(3, [CX(1, 0), CX(2, 1)])
    target = LinearState.from_circuit(3, [CX(0, 1)])
    res = engine(source, target, LINE3, 6)
    assert res.status == SearchStatus.FOUND
    assert source.replay(res.circuit) == target


@pytest.mark.parametrize("engine", ENGINES)
@pytest.mark.parametrize("seed", range(5))
def test_deterministic(engine, seed: int):
    rng = random.Random(seed)
    moves = MoveSet.all_to_all(4)
    target = LinearState.from_circuit(4, [rng.choice(list(moves)) for _ in range(4)])
    first = engine(LinearState.identity(4), target, moves, 4)
    second = engine(LinearState.identity(4), target, moves, 4)
    assert first.circuit == second.circuit


@pytest.mark.parametrize("n", [3, 4])
@pytest.mark.parametrize("seed", range(8))
def test_engines_agree_on_optimal_length(n: int, seed: int):
    rng = random.Random(1000 * n + seed)
    moves = MoveSet.from_pairs([(q, q + 1) for q in range(n - 1)], n)
    k = rng.randint(1, 4)
    target = LinearState.from_circuit(n, [rng.choice(list(moves)) for _ in range(k)])
    source = LinearState.identity(n)

    lengths = set()
    for engine in ENGINES:
        res = engine(source, target, moves, 4)
        assert res.status == SearchStatus.FOUND, engine.__name__
        assert source.replay(res.circuit) == target
        assert all(g in moves for g in res.circuit)
        lengths.add(len(res.circuit))
    assert len(lengths) == 1
    assert lengths.pop() <= k


@pytest.mark.parametrize("engine", ENGINES)
def test_no_false_negatives_on_line3(engine):
    """For every target in GL(3,2): bound d-1 fails, bound d succeeds with d gates."""
    identity = LinearState.identity(3)
    table = shortest_distances(identity, LINE3)
    assert len(table) == 168
    for state, d in table.values():
        ok = engine(identity, state, LINE3, d)
        assert ok.status == SearchStatus.FOUND
        assert len(ok.circuit) == d
        assert identity.replay(ok.circuit) == state
        if d > 0:
            assert engine(identity, state, LINE3, d - 1).status == SearchStatus.NO_SOLUTION


def test_mitm_memory_is_split_between_both_trees():
    """Meeting in the middle visits fewer states than one-sided BFS."""
    moves = MoveSet.all_to_all(4)
    target = LinearState.from_circuit(4, [CX(0, 1), CX(1, 2), CX(2, 3), CX(3, 0)])
    one_sided = bfs(LinearState.identity(4), target, moves, 4)
    two_sided = mitm(LinearState.identity(4), target, moves, 4)
    assert one_sided.gate_count == two_sided.gate_count
    assert two_sided.stats.peak_visited < one_sided.stats.peak_visited


def test_astar_accepts_custom_heuristic():
    calls = []

    def zero(state, target):
        calls.append(state)
        return 0

    target = LinearState.from_circuit(3, [CX(0, 1), CX(1, 2)])
    res = astar(LinearState.identity(3), target, LINE3, 3, heuristic=zero)
    assert res.status == SearchStatus.FOUND
    assert len(res.circuit) == 2
    assert calls

from cxsynth.frontier import ROOT, SearchArena, join_paths
from cxsynth.gates import CX, MoveSet
from cxsynth.states import LinearState


def test_add_deduplicates_and_tracks_parents():
    root = LinearState.identity(2)
    arena = SearchArena(root)
    a = arena.add(root.apply(CX(0, 1)), 0, CX(0, 1))
    assert a == 1
    assert arena.add(root.apply(CX(0, 1)), 0, CX(0, 1)) is None
    assert arena.stats.duplicates == 1
    assert arena.nodes[a].parent == 0
    assert arena.nodes[a].depth == 1
    assert arena.root.parent == ROOT


def test_expand_layer_records_layer_sizes():
    arena = SearchArena(LinearState.identity(2))
    layer = arena.expand_layer([0], MoveSet.all_to_all(2))
    assert len(layer) == 2
    assert arena.stats.layers == [2]
    assert arena.stats.expansions == 1


def test_path_is_in_execution_order():
    root = LinearState.identity(3)
    arena = SearchArena(root)
    i = arena.add(root.apply(CX(0, 1)), 0, CX(0, 1))
    j = arena.add(arena.nodes[i].state.apply(CX(1, 2)), i, CX(1, 2))
    assert arena.path(j) == [CX(0, 1), CX(1, 2)]
    assert arena.path(0) == []


def test_join_paths_appends_backward_moves_unchanged():
    source = LinearState.identity(3)
    target = LinearState.from_circuit(3, [CX(0, 1), CX(1, 2), CX(2, 0)])

    fwd = SearchArena(source)
    f1 = fwd.add(source.apply(CX(0, 1)), 0, CX(0, 1))
    meet = fwd.nodes[f1].state.apply(CX(1, 2))
    f2 = fwd.add(meet, f1, CX(1, 2))

    bwd = SearchArena(target)
    b1 = bwd.add(target.apply(CX(2, 0)), 0, CX(2, 0))
    assert bwd.nodes[b1].state == meet

    circuit = join_paths(fwd, f2, bwd, b1)
    assert circuit == [CX(0, 1), CX(1, 2), CX(2, 0)]
    assert source.replay(circuit) == target

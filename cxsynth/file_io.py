# cxsynth/file_io.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from cxsynth.errors import MalformedInput, UnsupportedAlgorithmForInputKind
from cxsynth.gates import CX, MoveSet
from cxsynth.states import InputKind, LinearState, SearchState, StabiliserState

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Move-set name meaning "every pair of qubits may interact"
ALL_TO_ALL = "all_to_all"


@dataclass
class Problem:
    """Everything a search needs, loaded and validated."""

    source: SearchState
    target: SearchState
    moves: MoveSet
    kind: InputKind

    @property
    def num_qubits(self) -> int:
        return self.target.num_qubits


# ---------- low level ----------
def _read_lines(path: PathLike) -> List[Tuple[int, str]]:
    """Non-blank lines of `path` with their 1-based line numbers."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedInput(f"cannot read file ({exc.strerror})", path=str(path)) from exc
    except UnicodeDecodeError as exc:
        raise MalformedInput(f"not a UTF-8 text file ({exc.reason})", path=str(path)) from exc
    return [(i, ln.strip()) for i, ln in enumerate(text.splitlines(), start=1) if ln.strip()]


def _is_index(token: str) -> bool:
    # ASCII digits only: no sign, no "_" separator, no other scripts
    return token.isascii() and token.isdigit()


def parse_pairs(path: PathLike) -> List[Tuple[int, int]]:
    """Parse a file of whitespace separated integer pairs, one pair per line."""
    out: List[Tuple[int, int]] = []
    for lineno, line in _read_lines(path):
        parts = line.split()
        if len(parts) != 2:
            raise MalformedInput(
                f"expected two integers, got {len(parts)} token(s)", path=str(path), line=lineno
            )
        if any(p.startswith("-") and _is_index(p[1:]) for p in parts):
            raise MalformedInput(f"negative qubit index in {line!r}", path=str(path), line=lineno)
        if not all(_is_index(p) for p in parts):
            raise MalformedInput(f"not an integer pair: {line!r}", path=str(path), line=lineno)
        out.append((int(parts[0]), int(parts[1])))
    return out


def parse_circuit(path: PathLike) -> List[CX]:
    """Parse a CX circuit: one `control target` pair per line, in execution order."""
    return [CX(a, b) for a, b in parse_pairs(path)]


def parse_stabiliser(path: PathLike) -> StabiliserState:
    """Parse an X-stabiliser state: n lines of n characters from {I, X}."""
    lines = _read_lines(path)
    try:
        return StabiliserState.from_strings([ln for _, ln in lines])
    except MalformedInput as exc:
        lineno = lines[exc.line - 1][0] if exc.line is not None else None
        raise MalformedInput(str(exc), path=str(path), line=lineno) from exc


def detect_kind(path: PathLike) -> InputKind:
    """Guess whether `path` holds a circuit or a stabiliser state from its first line."""
    lines = _read_lines(path)
    if lines and set(lines[0][1]) <= {"I", "X"}:
        return InputKind.STABILISER
    return InputKind.CIRCUIT


def is_all_to_all(moves: Optional[PathLike]) -> bool:
    return moves is None or (str(moves) == ALL_TO_ALL and not Path(moves).exists())


def parse_moves(moves: Optional[PathLike], n: int) -> MoveSet:
    """
    Load the allowed interactions for `n` qubits.

    Each line `a b` allows CX(a, b) and CX(b, a). `None` or the name
    `all_to_all` (when no such file exists) allows every pair.
    """
    if moves is None or is_all_to_all(moves):
        return MoveSet.all_to_all(n)
    return MoveSet.from_pairs(parse_pairs(moves), n)


def format_circuit(gates: Iterable[CX]) -> str:
    return "".join(f"{g.ctrl} {g.tgt}\n" for g in gates)


def save_circuit(path: PathLike, gates: Iterable[CX]) -> None:
    """Write one `control target` line per gate, in execution order."""
    Path(path).write_text(format_circuit(gates), encoding="utf-8")


# ---------- problem loading ----------
def _max_index(gates: Iterable[Tuple[int, int]]) -> int:
    return max((max(a, b) for a, b in gates), default=-1)


def load_problem(
    target: PathLike,
    source: Optional[PathLike] = None,
    moves: Optional[PathLike] = ALL_TO_ALL,
    *,
    supported: Optional[Iterable[InputKind]] = None,
    algorithm: str = "",
    num_qubits: Optional[int] = None,
) -> Problem:
    """
    Load and validate a synthesis problem before any search starts.

    For circuit input the qubit count is one more than the largest index
    in the source, target and move files (or `num_qubits`), and the source
    defaults to the identity. Stabiliser input needs an explicit source.

    Raises
    ------
    MalformedInput
        Unparsable files or source/target of different kinds or sizes.
    InvalidGate
        A gate or move with control == target or outside the qubit range.
    UnsupportedAlgorithmForInputKind
        If `supported` is given and does not contain the detected kind.
    """
    kind = detect_kind(target)
    if source is not None and detect_kind(source) != kind:
        raise MalformedInput(f"source is not a {kind} file", path=str(source))
    if supported is not None and kind not in set(supported):
        raise UnsupportedAlgorithmForInputKind(algorithm or "selected algorithm", kind.value)

    if kind == InputKind.STABILISER:
        if source is None:
            raise MalformedInput("stabiliser search needs an explicit source state")
        tgt_state = parse_stabiliser(target)
        src_state = parse_stabiliser(source)
        n = tgt_state.num_qubits
        if src_state.num_qubits != n:
            raise MalformedInput(
                f"source has {src_state.num_qubits} qubits, target has {n}", path=str(source)
            )
        if num_qubits is not None and num_qubits != n:
            raise MalformedInput(f"stabiliser state has {n} qubits, not {num_qubits}", path=str(target))
        move_set = parse_moves(moves, n)
        log.info("loaded stabiliser problem on %d qubits with %d moves", n, len(move_set))
        return Problem(src_state, tgt_state, move_set, kind)

    tgt_gates = parse_circuit(target)
    src_gates = parse_circuit(source) if source is not None else []
    pairs = [] if moves is None or is_all_to_all(moves) else parse_pairs(moves)
    seen = _max_index([g.as_tuple() for g in tgt_gates + src_gates] + pairs)
    n = num_qubits if num_qubits is not None else max(seen + 1, 1)

    move_set = MoveSet.all_to_all(n) if is_all_to_all(moves) else MoveSet.from_pairs(pairs, n)
    tgt_state = LinearState.from_circuit(n, tgt_gates)
    src_state = LinearState.from_circuit(n, src_gates)
    log.info(
        "loaded circuit problem on %d qubits (%d source gates, %d target gates, %d moves)",
        n, len(src_gates), len(tgt_gates), len(move_set),
    )
    return Problem(src_state, tgt_state, move_set, kind)

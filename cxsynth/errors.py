# cxsynth/errors.py
from __future__ import annotations

from typing import Optional


class CXSynthError(Exception):
    """Base class for every error raised by cxsynth."""


class MalformedInput(CXSynthError, ValueError):
    """
    An input file (or in-memory description) could not be turned into a
    circuit, move set or stabiliser state.

    Parameters
    ----------
    message : str
        Human readable description.
    path : Optional[str]
        File the problem was found in, if any.
    line : Optional[int]
        1-based line number, if any.
    """

    def __init__(self, message: str, *, path: Optional[str] = None, line: Optional[int] = None):
        self.path = path
        self.line = line
        where = ""
        if path is not None:
            where = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(f"{where}{message}")


class InvalidGate(CXSynthError, ValueError):
    """A CX gate whose control equals its target or that leaves [0, n)."""

    def __init__(self, ctrl: int, tgt: int, n: Optional[int] = None):
        self.ctrl = ctrl
        self.tgt = tgt
        self.n = n
        if ctrl == tgt:
            msg = f"CX({ctrl}, {tgt}): control and target must differ"
        elif n is None:
            msg = f"CX({ctrl}, {tgt}): qubit indices must be non-negative"
        else:
            msg = f"CX({ctrl}, {tgt}): qubit index outside [0, {n})"
        super().__init__(msg)


class UnsupportedAlgorithmForInputKind(CXSynthError, ValueError):
    """The selected search algorithm cannot run on this kind of input."""

    def __init__(self, algorithm: str, kind: str):
        self.algorithm = algorithm
        self.kind = kind
        super().__init__(f"Algorithm '{algorithm}' does not support {kind} input")


class NoSolutionWithinDepth(CXSynthError):
    """The search exhausted its depth bound (or deadline) without reaching the target."""

    def __init__(self, max_depth: int, *, timed_out: bool = False):
        self.max_depth = max_depth
        self.timed_out = timed_out
        if timed_out:
            msg = f"Search timed out before finding a solution (depth bound {max_depth})"
        else:
            msg = f"No solution within depth bound {max_depth}"
        super().__init__(msg)


class VerificationError(CXSynthError):
    """A found circuit does not reproduce the target when replayed."""

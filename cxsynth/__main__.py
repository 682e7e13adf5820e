# cxsynth/__main__.py
from __future__ import annotations

import typer

from cxsynth.engine import SUPPORTED_KINDS, Algorithm, SearchConfig, algorithms_for, synthesize
from cxsynth.errors import CXSynthError, VerificationError
from cxsynth.file_io import load_problem, save_circuit
from cxsynth.logging_config import setup_logging
from cxsynth.quantum_backend import VerificationBackend, verify_solution
from cxsynth.qiskit_backend import QiskitBackend
from cxsynth.report import console, render_comparison, render_result
from cxsynth.settings import get_settings
from cxsynth.stim_backend import StimBackend

app = typer.Typer(help="Depth-optimal CX circuit synthesis under qubit connectivity constraints")

# Exit codes
EXIT_NO_SOLUTION = 1
EXIT_BAD_INPUT = 2
EXIT_VERIFICATION = 3


def make_backend(name: str) -> VerificationBackend:
    chosen = name.strip().lower()
    if chosen == "stim":
        return StimBackend()
    if chosen == "qiskit":
        return QiskitBackend()
    raise typer.BadParameter("Invalid backend, choose 'stim' or 'qiskit'")


def parse_algorithm(name: str) -> Algorithm:
    try:
        return Algorithm(name.strip().lower())
    except ValueError:
        choices = ", ".join(a.value for a in Algorithm)
        raise typer.BadParameter(f"Invalid algorithm '{name}', choose one of: {choices}")


@app.callback()
def main_callback(
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level (default: settings.LOG_LEVEL)"),
):
    """Initialize logging once for every command."""
    setup_logging(log_level or get_settings().LOG_LEVEL)


@app.command()
def synth(
    target: str | None = typer.Option(None, "--target", "-t", help="Target circuit or stabiliser state file"),
    source: str | None = typer.Option(
        None, "--source", "-s", help="Source circuit or stabiliser state file. For circuits, defaults to identity."
    ),
    moves: str | None = typer.Option(None, "--moves", "-m", help="Allowed interactions file (default: all_to_all)"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output circuit file"),
    depth: int | None = typer.Option(None, "--depth", "-d", min=0, help="Maximum number of CX gates to search"),
    algo: str | None = typer.Option(None, "--algo", "-a", help="bfs, mitm, astar or astar-stabiliser"),
    timeout: float | None = typer.Option(None, help="Give up after this many seconds"),
    qubits: int | None = typer.Option(None, min=1, help="Number of qubits for circuit input (default: inferred)"),
    backend: str | None = typer.Option(None, help="Verification backend: stim or qiskit"),
    verify: bool | None = typer.Option(
        None, "--verify/--no-verify", help="Double-check the solution before saving (default: settings.VERIFY)"
    ),
):
    """
    Synthesize a shortest CX circuit taking the source to the target.
    Reads defaults from settings; CLI options override for this run.
    """
    settings = get_settings()
    algorithm = parse_algorithm(algo or settings.ALGORITHM)
    target_final = target or settings.TARGET
    moves_final = moves or settings.MOVES
    output_final = output or settings.OUTPUT
    depth_final = settings.DEPTH if depth is None else depth
    timeout_final = settings.TIMEOUT if timeout is None else timeout
    verify_final = settings.VERIFY if verify is None else verify
    checker = make_backend(backend or settings.BACKEND) if verify_final else None

    try:
        problem = load_problem(
            target_final,
            source,
            moves_final,
            supported=SUPPORTED_KINDS[algorithm],
            algorithm=algorithm.value,
            num_qubits=qubits,
        )
        result = synthesize(
            problem.source,
            problem.target,
            problem.moves,
            SearchConfig(algorithm, depth_final, timeout_final),
        )
    except CXSynthError as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=EXIT_BAD_INPUT)

    if not result.found:
        render_result(algorithm.value, result)
        raise typer.Exit(code=EXIT_NO_SOLUTION)

    circuit = result.require_circuit()
    if checker is not None:
        try:
            verify_solution(problem.source, problem.target, circuit, checker)
        except VerificationError as exc:
            console.print(f"[bold red]Solution is incorrect ({exc}). Please report this as a bug. Aborting.[/]")
            raise typer.Exit(code=EXIT_VERIFICATION)

    try:
        save_circuit(output_final, circuit)
    except OSError as exc:
        render_result(algorithm.value, result)
        console.print(f"[bold red]Error:[/] cannot write {output_final} ({exc.strerror})")
        raise typer.Exit(code=EXIT_BAD_INPUT)
    render_result(algorithm.value, result, output=output_final)


@app.command()
def compare(
    target: str | None = typer.Option(None, "--target", "-t", help="Target circuit or stabiliser state file"),
    source: str | None = typer.Option(None, "--source", "-s", help="Source circuit or stabiliser state file"),
    moves: str | None = typer.Option(None, "--moves", "-m", help="Allowed interactions file (default: all_to_all)"),
    depth: int | None = typer.Option(None, "--depth", "-d", min=0, help="Maximum number of CX gates to search"),
    timeout: float | None = typer.Option(None, help="Per-engine timeout in seconds"),
    qubits: int | None = typer.Option(None, min=1, help="Number of qubits for circuit input (default: inferred)"),
):
    """
    Run every engine that accepts the input and compare their results.
    """
    settings = get_settings()
    depth_final = settings.DEPTH if depth is None else depth
    timeout_final = settings.TIMEOUT if timeout is None else timeout

    try:
        problem = load_problem(target or settings.TARGET, source, moves or settings.MOVES, num_qubits=qubits)
        rows = []
        for algorithm in algorithms_for(problem.kind):
            config = SearchConfig(algorithm, depth_final, timeout_final)
            rows.append((algorithm.value, synthesize(problem.source, problem.target, problem.moves, config)))
    except CXSynthError as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(code=EXIT_BAD_INPUT)

    render_comparison(rows)
    if not any(res.found for _, res in rows):
        raise typer.Exit(code=EXIT_NO_SOLUTION)


if __name__ == "__main__":
    app()

# cxsynth/report.py
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from cxsynth.gates import CX
from cxsynth.result import SearchResult, SearchStatus

console = Console()


STATUS_STYLE = {
    SearchStatus.FOUND: "bold green",
    SearchStatus.NO_SOLUTION: "yellow",
    SearchStatus.TIMEOUT: "magenta",
}

STATUS_LABEL = {
    SearchStatus.FOUND: "found",
    SearchStatus.NO_SOLUTION: "no solution within depth",
    SearchStatus.TIMEOUT: "timed out",
}


def status_text(result: SearchResult) -> Text:
    return Text(STATUS_LABEL[result.status], style=STATUS_STYLE[result.status])


def results_table(rows: Iterable[tuple[str, SearchResult]]) -> Table:
    """One row per (algorithm name, result)."""
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 1))
    table.add_column("Algorithm")
    table.add_column("Status")
    table.add_column("Gates", justify="right")
    table.add_column("Depth bound", justify="right")
    table.add_column("Expansions", justify="right")
    table.add_column("Visited", justify="right")
    table.add_column("Time", justify="right")
    for name, res in rows:
        gates = "-" if res.gate_count is None else str(res.gate_count)
        table.add_row(
            name,
            status_text(res),
            gates,
            str(res.max_depth),
            str(res.stats.expansions),
            str(res.stats.peak_visited),
            f"{res.elapsed:.2f}s",
        )
    return table


def render_circuit(gates: Sequence[CX]) -> None:
    if not gates:
        console.print("[dim](empty circuit: source already equals target)[/dim]")
        return
    console.print("  ".join(f"[cyan]CX[/]({g.ctrl},{g.tgt})" for g in gates))


def render_result(algorithm: str, result: SearchResult, *, output: Optional[str] = None) -> None:
    console.print(results_table([(algorithm, result)]))
    if result.circuit is not None:
        render_circuit(result.circuit)
        if output is not None:
            console.print(f"[bold magenta]Writing to[/bold magenta] {output}")
    elif result.status == SearchStatus.TIMEOUT:
        console.print("[magenta]Search timed out; rerun with a longer timeout or a different engine.[/]")
    else:
        console.print(
            f"[yellow]No solution within depth {result.max_depth}; "
            f"rerun with a larger --depth or a different engine.[/]"
        )


def render_comparison(rows: Sequence[tuple[str, SearchResult]]) -> None:
    console.print(results_table(rows))
    counts = {res.gate_count for _, res in rows if res.found}
    if len(counts) > 1:
        console.print(f"[bold red]Engines disagree on the optimal gate count: {sorted(counts)}[/]")

"""Rich tables and JSON export for rewrite traces."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.table import Table

from glsl_demodernizer.core.ir import SkipReason
from glsl_demodernizer.pipelines.demodernize import PipelineResult
from glsl_demodernizer.transforms.base import ProbedGroup, Rule

_STATUS_STYLE = {
    SkipReason.NONE: "green",
    SkipReason.NO_MATCH: "dim",
    SkipReason.STAGE_MISMATCH: "dim",
    SkipReason.PROBE_FAILED: "yellow",
}


def render_trace_table(result: PipelineResult, console: Console | None = None) -> None:
    """Print a Rich table of every ledger entry in recording order."""
    if console is None:
        console = Console()

    console.print(f"\n[bold]Rewrite trace ({result.kind.value} shader)[/bold]")
    fired = result.report_data.get("fired_rules", [])
    console.print(f"{len(fired)} of {result.ledger.count()} entries fired\n")

    table = Table(title="Rule applications")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Rule")
    table.add_column("Group", style="dim")
    table.add_column("Condition")
    table.add_column("Matches", justify="right")
    table.add_column("Status")

    for i, entry in enumerate(result.ledger.entries(), 1):
        status = "fired" if entry.fired else entry.skip_reason.value
        table.add_row(
            str(i),
            entry.rule,
            entry.group,
            entry.condition.value,
            str(entry.match_count),
            status,
            style=_STATUS_STYLE.get(entry.skip_reason, ""),
        )

    console.print(table)

    if result.directives:
        console.print("\n[bold]Extensions enabled:[/bold]")
        for d in result.directives:
            console.print(f"  {d}")


def render_rule_chain(rules: Sequence[Rule], console: Console | None = None) -> None:
    """Print the rule chain in execution order."""
    if console is None:
        console = Console()

    table = Table(title="Rewrite rule chain (execution order)")
    table.add_column("Step", justify="right", style="dim")
    table.add_column("Rule")
    table.add_column("Condition")
    table.add_column("Description")

    for i, rule in enumerate(rules, 1):
        condition = rule.condition.value
        if isinstance(rule, ProbedGroup):
            condition = f"{rule.stage.value} + {condition}"
        table.add_row(str(i), rule.name, condition, rule.describe())
        if isinstance(rule, ProbedGroup):
            for child in rule.rules:
                table.add_row("", f"  {child.name}", "", child.describe(), style="dim")

    console.print(table)


def trace_to_json(result: PipelineResult) -> dict:
    """Convert a PipelineResult to a JSON-serializable dict."""
    return {
        "kind": result.kind.value,
        "changed": result.changed,
        "directives": result.directives,
        "fired_rules": result.report_data.get("fired_rules", []),
        "entries": [e.model_dump(mode="json") for e in result.ledger.entries()],
    }


def export_trace_json(data: dict, path: Path) -> None:
    """Write a trace dict to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str))

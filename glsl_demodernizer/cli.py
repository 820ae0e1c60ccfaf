"""CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from glsl_demodernizer.core.ir import ShaderKind

app = typer.Typer(name="glsl-demodernize", help="Demote GLSL ES 3.00 shaders to GLSL ES 1.00")


def _resolve_kind(path: Path, stage: Optional[ShaderKind]) -> ShaderKind:
    if stage is not None:
        return stage
    kind = ShaderKind.from_path(path)
    if kind is None:
        typer.echo(
            f"Cannot tell the stage of {path} from its suffix; pass --stage vertex|fragment",
            err=True,
        )
        raise typer.Exit(code=1)
    return kind


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Cannot read shader file {path}: {e}", err=True)
        raise typer.Exit(code=1)


@app.command("convert")
def convert(
    path: Path = typer.Argument(..., help="GLSL ES 3.00 shader source"),
    stage: Optional[ShaderKind] = typer.Option(
        None, "--stage", help="Shader stage (default: from file suffix)",
    ),
    out: Optional[Path] = typer.Option(None, "--out", help="Write output here instead of stdout"),
    strict: bool = typer.Option(False, "--strict", help="Check rule postconditions and output invariants"),
    ledger: Optional[Path] = typer.Option(None, "--ledger", help="Write the rule ledger as JSON"),
) -> None:
    """Rewrite a shader as GLSL ES 1.00."""
    from glsl_demodernizer.core.invariants import PipelineInvariantViolation
    from glsl_demodernizer.pipelines.demodernize import run_demodernize

    source = _read_source(path)
    kind = _resolve_kind(path, stage)

    try:
        result = run_demodernize(
            source, kind, path.name, out=out, strict=strict, ledger_path=ledger,
        )
    except PipelineInvariantViolation as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    if out is None:
        typer.echo(result.output, nl=False)


@app.command("trace")
def trace(
    path: Path = typer.Argument(..., help="GLSL ES 3.00 shader source"),
    stage: Optional[ShaderKind] = typer.Option(
        None, "--stage", help="Shader stage (default: from file suffix)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    save: Optional[Path] = typer.Option(None, "--save", help="Also write the trace JSON here"),
) -> None:
    """Show which rules fired, were skipped, or failed their probe."""
    import json

    from glsl_demodernizer.pipelines.demodernize import demodernize_pipeline
    from glsl_demodernizer.reports.render_trace import (
        export_trace_json,
        render_trace_table,
        trace_to_json,
    )

    source = _read_source(path)
    kind = _resolve_kind(path, stage)
    result = demodernize_pipeline(source, kind)

    if json_output:
        typer.echo(json.dumps(trace_to_json(result), indent=2))
    else:
        render_trace_table(result)

    if save is not None:
        export_trace_json(trace_to_json(result), save)


@app.command("rules")
def rules() -> None:
    """List the rewrite rules in execution order."""
    from glsl_demodernizer.pipelines.demodernize import DEMODERNIZE_RULES
    from glsl_demodernizer.reports.render_trace import render_rule_chain

    render_rule_chain(DEMODERNIZE_RULES)


if __name__ == "__main__":
    app()

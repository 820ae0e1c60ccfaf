"""GLSL ES 3.00 -> GLSL ES 1.00 rewrite pipeline.

Chains: VersionDowngrade -> CubeSamplingRename -> TextureCallRename ->
  Fragment: FragmentInputQualifier -> DrawBuffersOutputs -> FragColorRename ->
            FragColorIndexedRename -> FragColorLayoutRemoval -> FragDepthOutput
  Vertex:   VertexInputQualifier -> VertexOutputQualifier

Stage-gated rules for the other stage stay in the chain and record a
stage_mismatch skip. Only the syntax used by the renderer's own shaders is
supported; anything else passes through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from glsl_demodernizer.core.ir import ShaderKind
from glsl_demodernizer.core.ledger import RewriteLedger
from glsl_demodernizer.pipelines.strict_runner import StrictPipelineRunner
from glsl_demodernizer.transforms.base import Rule
from glsl_demodernizer.transforms.frag_depth import FragDepthOutput
from glsl_demodernizer.transforms.frag_outputs import (
    DrawBuffersOutputs,
    FragColorIndexedRename,
    FragColorLayoutRemoval,
    FragColorRename,
)
from glsl_demodernizer.transforms.qualifiers import (
    FragmentInputQualifier,
    VertexInputQualifier,
    VertexOutputQualifier,
)
from glsl_demodernizer.transforms.sampling import (
    DEFAULT_CUBE_SAMPLER,
    CubeSamplingRename,
    TextureCallRename,
)
from glsl_demodernizer.transforms.version import VersionDowngrade


def build_rule_chain(cube_sampler: str = DEFAULT_CUBE_SAMPLER) -> tuple[Rule, ...]:
    """The ordered rule chain. Order is load-bearing; do not sort."""
    return (
        VersionDowngrade(),
        CubeSamplingRename(cube_sampler),
        TextureCallRename(),
        FragmentInputQualifier(),
        VertexInputQualifier(),
        VertexOutputQualifier(),
        DrawBuffersOutputs(),
        FragColorRename(),
        FragColorIndexedRename(),
        FragColorLayoutRemoval(),
        FragDepthOutput(),
    )


DEMODERNIZE_RULES: tuple[Rule, ...] = build_rule_chain()


@dataclass
class PipelineResult:
    """Result of running the rewrite chain over one source unit."""

    source: str
    output: str
    kind: ShaderKind
    ledger: RewriteLedger
    report_data: dict = field(default_factory=dict)

    @property
    def directives(self) -> list[str]:
        """Extension directives the run prepended, top of file first."""
        return self.ledger.inserted_directives()

    @property
    def changed(self) -> bool:
        return self.output != self.source


def demodernize_pipeline(
    source: str,
    kind: ShaderKind,
    rules: tuple[Rule, ...] | None = None,
    strict: bool = False,
) -> PipelineResult:
    """Run the rule chain over source for the given stage.

    With strict=True each rule's postcondition and the final output
    invariants are checked; PipelineInvariantViolation is raised on failure.
    """
    chain = DEMODERNIZE_RULES if rules is None else rules

    if strict:
        runner = StrictPipelineRunner(RewriteLedger(kind=kind))
        output = runner.run(chain, source, kind)
        ledger = runner.ledger
    else:
        ledger = RewriteLedger(kind=kind)
        output = source
        for rule in chain:
            output = rule.apply(output, kind, ledger)

    result = PipelineResult(source=source, output=output, kind=kind, ledger=ledger)
    result.report_data = {
        "kind": kind.value,
        "strict": strict,
        "changed": result.changed,
        "fired_rules": ledger.fired_names(),
        "directives": result.directives,
        "entry_count": ledger.count(),
        "rule_chain": [rule.name for rule in chain],
    }
    return result


def demodernize(source: str, is_fragment_stage: bool) -> str:
    """Rewrite GLSL ES 3.00 source as GLSL ES 1.00. Never raises."""
    return demodernize_pipeline(source, ShaderKind.from_flag(is_fragment_stage)).output


def run_demodernize(
    source: str,
    kind: ShaderKind,
    name: str = "<source>",
    out: Path | None = None,
    strict: bool = False,
    ledger_path: Path | None = None,
) -> PipelineResult:
    """CLI entry point: convert one source unit and write artifacts.

    Status goes to stderr so the converted text can be piped from stdout.
    """
    console = Console(stderr=True)

    result = demodernize_pipeline(source, kind, strict=strict)

    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(result.output)
        console.print(f"[bold]{name}[/bold] ({kind.value}) -> {out}")

    if ledger_path is not None:
        result.ledger.export(ledger_path)
        console.print(f"Ledger written to {ledger_path}")

    fired = result.report_data["fired_rules"]
    console.print(f"[dim]{len(fired)} rule(s) fired: {', '.join(fired) or 'none'}[/dim]")
    return result

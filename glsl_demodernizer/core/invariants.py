"""Invariant checks on demodernized output.

These hold for every input inside the supported subset:
- The 300 es version pragma never survives
- Modern sampling built-ins never survive
- Stage qualifiers are rewritten for the requested stage
- Extension directives keep rule-sequence order
"""

from __future__ import annotations

import re

from glsl_demodernizer.core.ir import (
    DRAW_BUFFERS_DIRECTIVE,
    FRAG_DEPTH_DIRECTIVE,
    ShaderKind,
)

_MODERN_INPUT = re.compile(r"in\s+(vec[0-9]|mat[0-9]|float)")
_FRAG_DATA = re.compile(r"out_FragData_[0-9]+")
_BARE_FRAG_DEPTH = re.compile(r"gl_FragDepth(?!EXT)")


def check_version_downgraded(output: str) -> list[str]:
    """No '300 es' version pragma may remain."""
    violations: list[str] = []
    if "version 300 es" in output:
        violations.append("Version pragma '300 es' survived demodernization")
    return violations


def check_no_modern_sampling(output: str) -> list[str]:
    """Modern sampling built-ins must all be rewritten."""
    violations: list[str] = []
    if "czm_textureCube" in output:
        violations.append("Cube sampling built-in 'czm_textureCube' survived")
    if "texture(" in output:
        violations.append("Unified sampling call 'texture(' survived")
    return violations


def check_stage_qualifiers(output: str, kind: ShaderKind) -> list[str]:
    """Input declarations must use the legacy qualifier for the stage."""
    violations: list[str] = []
    leftover = _MODERN_INPUT.findall(output)
    if leftover:
        violations.append(
            f"{kind.value} shader still declares modern inputs of type {sorted(set(leftover))}"
        )
    return violations


def check_fragment_outputs(output: str, kind: ShaderKind) -> list[str]:
    """Fragment output identifiers must be legacy built-ins."""
    violations: list[str] = []
    if not kind.is_fragment:
        return violations
    if _FRAG_DATA.search(output):
        violations.append("Indexed output 'out_FragData_<N>' survived")
    if "out_FragColor" in output:
        violations.append("Single output 'out_FragColor' survived")
    if _BARE_FRAG_DEPTH.search(output):
        violations.append("Depth built-in 'gl_FragDepth' was not extension-qualified")
    return violations


def check_directive_order(output: str) -> list[str]:
    """frag_depth is prepended last, so it must precede draw_buffers."""
    violations: list[str] = []
    depth_at = output.find(FRAG_DEPTH_DIRECTIVE)
    buffers_at = output.find(DRAW_BUFFERS_DIRECTIVE)
    if depth_at != -1 and buffers_at != -1 and depth_at > buffers_at:
        violations.append(
            "Extension directives out of order: frag_depth must precede draw_buffers"
        )
    return violations


class PipelineInvariantViolation(Exception):
    """Raised by StrictPipelineRunner when a per-stage invariant fails."""

    def __init__(self, stage: str, violations: list[str]) -> None:
        self.stage = stage
        self.violations = violations
        msg = f"Invariant violation after {stage}:\n" + "\n".join(violations)
        super().__init__(msg)


def validate_output(output: str, kind: ShaderKind) -> list[str]:
    """Run all whole-output invariant checks."""
    violations: list[str] = []
    violations.extend(check_version_downgraded(output))
    violations.extend(check_no_modern_sampling(output))
    violations.extend(check_stage_qualifiers(output, kind))
    violations.extend(check_fragment_outputs(output, kind))
    violations.extend(check_directive_order(output))
    return violations

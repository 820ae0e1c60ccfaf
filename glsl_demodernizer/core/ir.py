"""Core types for the shader demodernizer.

Ledger records are frozen Pydantic models, immutable after construction.
"""

from __future__ import annotations

import enum
from pathlib import Path

from pydantic import BaseModel


class ShaderKind(str, enum.Enum):
    """Pipeline stage a source unit runs in. Supplied by the caller, never inferred from content."""

    VERTEX = "vertex"
    FRAGMENT = "fragment"

    @classmethod
    def from_flag(cls, is_fragment_stage: bool) -> "ShaderKind":
        return cls.FRAGMENT if is_fragment_stage else cls.VERTEX

    @classmethod
    def from_path(cls, path: str | Path) -> "ShaderKind | None":
        """Guess the stage from a file suffix, or None when the suffix is unknown."""
        return SUFFIX_KINDS.get(Path(path).suffix.lower())

    @property
    def is_fragment(self) -> bool:
        return self is ShaderKind.FRAGMENT


SUFFIX_KINDS: dict[str, ShaderKind] = {
    ".frag": ShaderKind.FRAGMENT,
    ".fs": ShaderKind.FRAGMENT,
    ".fsh": ShaderKind.FRAGMENT,
    ".vert": ShaderKind.VERTEX,
    ".vs": ShaderKind.VERTEX,
    ".vsh": ShaderKind.VERTEX,
}


DRAW_BUFFERS_DIRECTIVE = "#extension GL_EXT_draw_buffers : enable"
FRAG_DEPTH_DIRECTIVE = "#extension GL_EXT_frag_depth : enable"


class RuleCondition(str, enum.Enum):
    ALWAYS = "Always"
    FRAGMENT_ONLY = "FragmentOnly"
    VERTEX_ONLY = "VertexOnly"
    CONTENT_PROBE = "ContentProbe"


# Which stages each stage-gated condition admits
CONDITION_KINDS: dict[RuleCondition, set[ShaderKind]] = {
    RuleCondition.ALWAYS: {ShaderKind.VERTEX, ShaderKind.FRAGMENT},
    RuleCondition.FRAGMENT_ONLY: {ShaderKind.FRAGMENT},
    RuleCondition.VERTEX_ONLY: {ShaderKind.VERTEX},
}


class SkipReason(str, enum.Enum):
    NONE = "none"
    STAGE_MISMATCH = "stage_mismatch"
    PROBE_FAILED = "probe_failed"
    NO_MATCH = "no_match"


class RuleApplication(BaseModel):
    """One rule invocation against the intermediate source.

    Frozen after construction; the ledger only ever appends.
    """

    model_config = {"frozen": True}

    rule: str
    condition: RuleCondition = RuleCondition.ALWAYS
    group: str = ""
    fired: bool = False
    match_count: int = 0
    skip_reason: SkipReason = SkipReason.NONE
    inserted: str = ""  # directive text, for prepend rules that fired
    description: str = ""

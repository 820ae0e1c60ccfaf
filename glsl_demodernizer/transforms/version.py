"""Downgrade the version pragma from '300 es' to '100'.

Exact literal match on 'version 300 es'; every occurrence is rewritten,
though well-formed input carries exactly one.

Postcondition: 'version 300 es' no longer occurs.
"""

from __future__ import annotations

from glsl_demodernizer.transforms.base import PatternRule


class VersionDowngrade(PatternRule):
    """#version 300 es -> #version 100."""

    def __init__(self) -> None:
        super().__init__(
            name="VersionDowngrade",
            pattern="version 300 es",
            replacement="version 100",
            literal=True,
            forbids=r"version 300 es",
            description="Replace the '300 es' version pragma with '100'",
        )

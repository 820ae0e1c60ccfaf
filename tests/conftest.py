"""Shared fixtures for glsl-demodernizer tests."""

from __future__ import annotations

import pytest

from glsl_demodernizer.core.ir import RuleApplication, RuleCondition, SkipReason
from glsl_demodernizer.core.ledger import RewriteLedger


@pytest.fixture
def fragment_source() -> str:
    """Single-output fragment shader with a 2D lookup."""
    return (
        "#version 300 es\n"
        "precision highp float;\n"
        "uniform sampler2D t;\n"
        "in vec2 uv;\n"
        "in float alpha;\n"
        "out vec4 out_FragColor;\n"
        "void main() {\n"
        "    out_FragColor = texture(t, uv) * alpha;\n"
        "}\n"
    )


@pytest.fixture
def vertex_source() -> str:
    """Vertex shader with attributes and a named interpolant."""
    return (
        "#version 300 es\n"
        "in vec3 position;\n"
        "in vec2 st;\n"
        "uniform mat4 mvp;\n"
        "out vec2 v_st;\n"
        "void main() {\n"
        "    v_st = st;\n"
        "    gl_Position = mvp * vec4(position, 1.0);\n"
        "}\n"
    )


@pytest.fixture
def mrt_source() -> str:
    """Fragment shader writing two render targets."""
    return (
        "#version 300 es\n"
        "precision highp float;\n"
        "in vec2 v_st;\n"
        "layout (location = 0) vec4 out_FragData_0;\n"
        "layout (location = 1) vec4 out_FragData_1;\n"
        "void main() {\n"
        "    out_FragData_0 = vec4(v_st, 0.0, 1.0);\n"
        "    out_FragData_1 = vec4(1.0);\n"
        "}\n"
    )


@pytest.fixture
def depth_source() -> str:
    """Fragment shader writing depth alongside colour."""
    return (
        "#version 300 es\n"
        "precision highp float;\n"
        "in float depth;\n"
        "out vec4 out_FragColor;\n"
        "void main() {\n"
        "    out_FragColor = vec4(1.0);\n"
        "    gl_FragDepth = depth;\n"
        "}\n"
    )


@pytest.fixture
def cube_source() -> str:
    return (
        "#version 300 es\n"
        "uniform samplerCube envMap;\n"
        "in vec3 dir;\n"
        "out vec4 out_FragColor;\n"
        "void main() {\n"
        "    out_FragColor = czm_textureCube(envMap, dir);\n"
        "}\n"
    )


@pytest.fixture
def empty_ledger() -> RewriteLedger:
    return RewriteLedger()


@pytest.fixture
def populated_ledger() -> RewriteLedger:
    ledger = RewriteLedger()
    ledger.record(RuleApplication(rule="VersionDowngrade", fired=True, match_count=1))
    ledger.record(
        RuleApplication(
            rule="VertexInputQualifier",
            condition=RuleCondition.VERTEX_ONLY,
            skip_reason=SkipReason.STAGE_MISMATCH,
        )
    )
    ledger.record(
        RuleApplication(
            rule="FragDepthOutput",
            condition=RuleCondition.CONTENT_PROBE,
            skip_reason=SkipReason.PROBE_FAILED,
        )
    )
    return ledger

"""Tests for the Typer CLI and trace rendering."""

from __future__ import annotations

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from glsl_demodernizer.cli import app
from glsl_demodernizer.core.ir import ShaderKind
from glsl_demodernizer.core.ledger import RewriteLedger
from glsl_demodernizer.pipelines.demodernize import DEMODERNIZE_RULES, demodernize_pipeline
from glsl_demodernizer.reports.render_trace import (
    export_trace_json,
    render_rule_chain,
    render_trace_table,
    trace_to_json,
)

runner = CliRunner()
WIDE = {"COLUMNS": "200"}


@pytest.fixture
def frag_file(tmp_path, fragment_source):
    path = tmp_path / "shade.frag"
    path.write_text(fragment_source)
    return path


@pytest.fixture
def undecodable_file(tmp_path):
    path = tmp_path / "bad.frag"
    path.write_bytes(b"#version 300 es\n\xff\xfe in vec3 a;\n")
    return path


class TestConvert:
    def test_stdout(self, frag_file) -> None:
        result = runner.invoke(app, ["convert", str(frag_file)])
        assert result.exit_code == 0
        assert "gl_FragColor = texture2D(t, uv) * alpha;" in result.output
        assert "varying vec2 uv;" in result.output

    def test_out_file(self, frag_file, tmp_path) -> None:
        out = tmp_path / "legacy" / "shade.frag"
        result = runner.invoke(app, ["convert", str(frag_file), "--out", str(out)])
        assert result.exit_code == 0
        assert out.read_text().startswith("#version 100\n")

    def test_stage_override(self, frag_file, tmp_path) -> None:
        out = tmp_path / "as_vertex.glsl"
        result = runner.invoke(
            app, ["convert", str(frag_file), "--stage", "vertex", "--out", str(out)],
        )
        assert result.exit_code == 0
        assert "attribute vec2 uv;" in out.read_text()

    def test_unknown_suffix_needs_stage(self, tmp_path, vertex_source) -> None:
        path = tmp_path / "shader.glsl"
        path.write_text(vertex_source)
        assert runner.invoke(app, ["convert", str(path)]).exit_code == 1
        result = runner.invoke(app, ["convert", str(path), "--stage", "vertex"])
        assert result.exit_code == 0
        assert "attribute vec3 position;" in result.output

    def test_missing_file(self, tmp_path) -> None:
        result = runner.invoke(app, ["convert", str(tmp_path / "nope.frag")])
        assert result.exit_code == 1

    def test_undecodable_file(self, undecodable_file) -> None:
        result = runner.invoke(app, ["convert", str(undecodable_file)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)
        assert "Cannot read shader file" in result.output

    def test_strict_and_ledger(self, frag_file, tmp_path) -> None:
        ledger_path = tmp_path / "ledger.json"
        out = tmp_path / "out.frag"
        result = runner.invoke(
            app,
            ["convert", str(frag_file), "--strict", "--ledger", str(ledger_path), "--out", str(out)],
        )
        assert result.exit_code == 0
        ledger = RewriteLedger.load(ledger_path)
        assert ledger.kind is ShaderKind.FRAGMENT
        assert ledger.count() == len(DEMODERNIZE_RULES)
        assert "FragColorRename" in ledger.fired_names()


class TestTraceCommand:
    def test_json(self, frag_file) -> None:
        result = runner.invoke(app, ["trace", str(frag_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["kind"] == "fragment"
        assert data["changed"] is True
        assert "TextureCallRename" in data["fired_rules"]
        assert len(data["entries"]) == len(DEMODERNIZE_RULES)

    def test_table(self, frag_file) -> None:
        result = runner.invoke(app, ["trace", str(frag_file)], env=WIDE)
        assert result.exit_code == 0
        assert "FragColorRename" in result.output

    def test_save(self, frag_file, tmp_path) -> None:
        save = tmp_path / "trace" / "shade.json"
        result = runner.invoke(app, ["trace", str(frag_file), "--json", "--save", str(save)])
        assert result.exit_code == 0
        assert json.loads(save.read_text())["kind"] == "fragment"

    def test_undecodable_file(self, undecodable_file) -> None:
        result = runner.invoke(app, ["trace", str(undecodable_file), "--json"])
        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)


class TestRulesCommand:
    def test_lists_chain(self) -> None:
        result = runner.invoke(app, ["rules"], env=WIDE)
        assert result.exit_code == 0
        for rule in DEMODERNIZE_RULES:
            assert rule.name in result.output
        assert "FragDataLayoutRemoval" in result.output


class TestRenderTrace:
    def test_table_mentions_directives(self, mrt_source) -> None:
        console = Console(record=True, width=200)
        result = demodernize_pipeline(mrt_source, ShaderKind.FRAGMENT)
        render_trace_table(result, console=console)
        text = console.export_text()
        assert "DrawBuffersOutputs" in text
        assert "GL_EXT_draw_buffers" in text

    def test_rule_chain_table(self) -> None:
        console = Console(record=True, width=200)
        render_rule_chain(DEMODERNIZE_RULES, console=console)
        text = console.export_text()
        assert "FragmentOnly + ContentProbe" in text
        assert "FragDepthRename" in text

    def test_trace_json_export(self, vertex_source, tmp_path) -> None:
        result = demodernize_pipeline(vertex_source, ShaderKind.VERTEX)
        data = trace_to_json(result)
        assert data["directives"] == []
        assert data["entries"][0]["rule"] == "VersionDowngrade"
        path = tmp_path / "t.json"
        export_trace_json(data, path)
        assert json.loads(path.read_text()) == data

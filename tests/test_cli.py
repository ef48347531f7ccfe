"""Command-line interface."""

import json

import pytest
import yaml
from click.testing import CliRunner

from src.cli import main
from src.core.registry import CALCULATORS
from src.utils.settings import EMAILS_ENV_VAR


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def beam_inputs(tmp_path):
    path = tmp_path / "beam.yaml"
    path.write_text(yaml.safe_dump(CALCULATORS["beam_moment"].example), encoding="utf-8")
    return path


def test_list(runner):
    result = runner.invoke(main, ["list"])
    assert result.exit_code == 0
    assert "Poutres mixtes" in result.output
    for name in CALCULATORS:
        assert name in result.output


def test_template_is_valid_input(runner):
    result = runner.invoke(main, ["template", "column_buckling"])
    assert result.exit_code == 0
    assert result.output.startswith("# Flambement")
    assert yaml.safe_load(result.output) == CALCULATORS["column_buckling"].example


def test_unknown_calculator(runner):
    result = runner.invoke(main, ["template", "beam_torsion"])
    assert result.exit_code == 1
    assert "Unknown calculator" in result.output


class TestCalc:

    def test_text_output(self, runner, beam_inputs):
        result = runner.invoke(main, ["calc", "beam_moment", str(beam_inputs)])
        assert result.exit_code == 0
        assert "✓ Vérifié" in result.output
        assert "pna_position" in result.output
        assert "Calculation steps:" in result.output

    def test_json_output(self, runner, beam_inputs):
        result = runner.invoke(main, ["calc", "beam_moment", str(beam_inputs), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["pna_position"] == "slab"
        assert data["moment_resistance"] == pytest.approx(624.69, abs=0.02)

    def test_invalid_inputs(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("profile: IPE 360\nbeff: -1\n", encoding="utf-8")
        result = runner.invoke(main, ["calc", "beam_moment", str(path)])
        assert result.exit_code == 1
        assert "Invalid inputs for beam_moment" in result.output
        assert "beff" in result.output

    def test_not_a_mapping(self, runner, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        result = runner.invoke(main, ["calc", "beam_moment", str(path)])
        assert result.exit_code == 1
        assert "valid YAML mapping" in result.output

    def test_yaml_syntax_error(self, runner, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("profile: [IPE 360\n", encoding="utf-8")
        result = runner.invoke(main, ["calc", "beam_moment", str(path)])
        assert result.exit_code == 1
        assert "YAML syntax error" in result.output


def test_report_writes_pdf(runner, beam_inputs, tmp_path):
    out = tmp_path / "notes" / "beam.pdf"
    result = runner.invoke(main, ["report", "beam_moment", str(beam_inputs), "-o", str(out),
                                  "--reader", "Marie Dupont - marie@esup.fr"])
    assert result.exit_code == 0
    assert out.read_bytes().startswith(b"%PDF")


class TestTables:

    def test_all_tables(self, runner):
        result = runner.invoke(main, ["tables"])
        assert result.exit_code == 0
        assert "cofraplus60_088" in result.output

    def test_one_table(self, runner):
        result = runner.invoke(main, ["tables", "beam_steels"])
        assert result.exit_code == 0
        assert "S355: {'fy': 355" in result.output

    def test_unknown_table(self, runner):
        result = runner.invoke(main, ["tables", "rivets"])
        assert result.exit_code == 1
        assert "Available:" in result.output


class TestAllowList:

    def test_encode(self, runner):
        result = runner.invoke(main, ["encode-emails", "admin@esup.fr", "@esup.fr"])
        assert result.exit_code == 0
        assert result.output.strip() == "YWRtaW5AZXN1cC5mcixAZXN1cC5mcg=="

    def test_check_configured_list(self, runner):
        assert runner.invoke(main, ["check-email", "test@example.com"]).exit_code == 0
        result = runner.invoke(main, ["check-email", "someone@other.com"])
        assert result.exit_code == 1
        assert "refused" in result.output

    def test_check_with_override(self, runner, monkeypatch):
        # "@other.com"
        monkeypatch.setenv(EMAILS_ENV_VAR, "QG90aGVyLmNvbQ==")
        result = runner.invoke(main, ["check-email", "someone@other.com"])
        assert result.exit_code == 0
        assert "authorized" in result.output

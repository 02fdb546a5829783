"""Tests for the firestore-rulegen CLI.

Verifies that the CLI module:
- Uses ``firestore-rulegen`` as program name
- Compiles schemas to stdout or a file, with configurable indentation
- Reads defaults from rulegen.toml in the current directory
- Reports parse errors and (with ``--strict``) check errors with exit code 1
- Checks, lists and converts schemas
"""

import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console

import firestore_rulegen.cli as cli_mod
from firestore_rulegen.cli import cmd_check, cmd_compile, cmd_convert, cmd_models, main
from firestore_rulegen.compiler import compile_rules, expand_indent
from firestore_rulegen.schema.loader import load_schema

SCHEMA = [
    {
        "name": "post",
        "ownerField": "authorId",
        "updateAuthRequired": True,
        "fields": [
            {"name": "title", "rules": {"type": "string", "maxLength": 80}},
            {"name": "authorId", "rules": {"type": "string"}},
        ],
    }
]

DANGLING_SCHEMA = {"user": {"home": {"type": "address"}}}


@pytest.fixture(autouse=True)
def isolated_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run every CLI test in an empty directory with a wide console."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli_mod, "console", Console(width=200, color_system=None))
    return tmp_path


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(SCHEMA))
    return path


def run_cli(*argv: str) -> int:
    with patch("sys.argv", ["firestore-rulegen", *argv]):
        return main()


# ------------------------------------------------------------------
# Parser
# ------------------------------------------------------------------


class TestParser:
    """Verify argument parsing."""

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            run_cli()

    def test_prog_is_firestore_rulegen(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            run_cli("--help")
        assert "firestore-rulegen" in capsys.readouterr().out

    def test_indent_and_tabs_are_exclusive(self, schema_file: Path) -> None:
        with pytest.raises(SystemExit):
            run_cli("compile", str(schema_file), "--tabs", "--indent", "    ")

    def test_convert_requires_schema(self) -> None:
        with pytest.raises(SystemExit):
            run_cli("convert")

    def test_dispatches_to_command(self, schema_file: Path) -> None:
        with patch("firestore_rulegen.cli.cmd_check", return_value=0) as mock_check:
            assert run_cli("check", str(schema_file)) == 0
        mock_check.assert_called_once()
        args = mock_check.call_args[0][0]
        assert args.schema == str(schema_file)

    def test_command_functions_exported(self) -> None:
        for fn in (cmd_compile, cmd_check, cmd_models, cmd_convert):
            assert callable(fn)


# ------------------------------------------------------------------
# compile
# ------------------------------------------------------------------


class TestCompileCommand:
    """Verify the compile command."""

    def test_compile_to_stdout(
        self, schema_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run_cli("compile", str(schema_file)) == 0

        out = capsys.readouterr().out
        expected = expand_indent(compile_rules(load_schema(schema_file)), "  ")
        assert out == expected + "\n"
        assert "\t" not in out

    def test_compile_keeps_tabs(
        self, schema_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run_cli("compile", str(schema_file), "--tabs") == 0
        out = capsys.readouterr().out
        assert out == compile_rules(load_schema(schema_file)) + "\n"

    def test_compile_custom_indent(
        self, schema_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert run_cli("compile", str(schema_file), "--indent", "    ") == 0
        out = capsys.readouterr().out
        assert "    match /databases/{database}/documents {" in out

    def test_compile_to_file(self, schema_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "firestore.rules"

        assert run_cli("compile", str(schema_file), "-o", str(output)) == 0

        text = output.read_text()
        assert text.startswith("rules_version = '2'\n")
        assert "allow update: if request.auth != null && ownedByCaller(resource.data.authorId)" in text

    def test_missing_schema_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_cli("compile", "missing.json") == 1
        assert "Schema file not found" in capsys.readouterr().out

    def test_invalid_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")

        assert run_cli("compile", str(bad)) == 1
        assert "Invalid schema encoding" in capsys.readouterr().out

    def test_wrongly_typed_rule_value(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"user": {"age": {"type": 5}}}))

        assert run_cli("compile", str(bad)) == 1
        assert "Invalid schema encoding" in capsys.readouterr().out

    def test_dangling_reference_compiles_by_default(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "dangling.json"
        path.write_text(json.dumps(DANGLING_SCHEMA))

        assert run_cli("compile", str(path)) == 0
        assert "validateAddressModel(data.home)" in capsys.readouterr().out

    def test_strict_refuses_dangling_reference(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "dangling.json"
        path.write_text(json.dumps(DANGLING_SCHEMA))

        assert run_cli("compile", str(path), "--strict") == 1
        out = capsys.readouterr().out
        assert "Refusing to compile" in out
        assert "user.home -> address" in out
        assert "rules_version" not in out


class TestCompileWithConfig:
    """Verify compile falls back to rulegen.toml settings."""

    def test_schema_and_output_from_config(self, isolated_cwd: Path) -> None:
        (isolated_cwd / "models.json").write_text(json.dumps(SCHEMA))
        (isolated_cwd / "rulegen.toml").write_text(
            textwrap.dedent("""\
                [schema]
                file = "models.json"

                [output]
                file = "out.rules"
                indent = "\\t"
            """)
        )

        assert run_cli("compile") == 0

        text = (isolated_cwd / "out.rules").read_text()
        assert text == compile_rules(load_schema(isolated_cwd / "models.json")) + "\n"

    def test_strict_from_config(self, isolated_cwd: Path) -> None:
        (isolated_cwd / "schema.json").write_text(json.dumps(DANGLING_SCHEMA))
        (isolated_cwd / "rulegen.toml").write_text("[output]\nstrict = true\n")

        assert run_cli("compile") == 1

    def test_explicit_config_missing(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_cli("--config", "nope.toml", "compile") == 1
        assert "Rulegen config not found" in capsys.readouterr().out

    def test_explicit_config(self, isolated_cwd: Path, capsys: pytest.CaptureFixture[str]) -> None:
        conf_dir = isolated_cwd / "conf"
        conf_dir.mkdir()
        (isolated_cwd / "a.json").write_text(json.dumps(SCHEMA))
        (conf_dir / "custom.toml").write_text('[schema]\nfile = "a.json"\n')

        assert run_cli("--config", str(conf_dir / "custom.toml"), "compile") == 0
        assert "match /post/{postDocument}" in capsys.readouterr().out


# ------------------------------------------------------------------
# check / models / convert
# ------------------------------------------------------------------


class TestCheckCommand:
    """Verify the check command."""

    def test_valid_schema(self, schema_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_cli("check", str(schema_file)) == 0
        assert "Schema is valid" in capsys.readouterr().out

    def test_dangling_reference(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "dangling.json"
        path.write_text(json.dumps(DANGLING_SCHEMA))

        assert run_cli("check", str(path)) == 1
        out = capsys.readouterr().out
        assert "Schema has errors" in out
        assert "user.home -> address" in out

    def test_warnings_do_not_fail(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "warn.json"
        path.write_text(json.dumps({"tag": {}}))

        assert run_cli("check", str(path)) == 0
        assert "Models without clauses (warning): tag" in capsys.readouterr().out


class TestModelsCommand:
    """Verify the models command."""

    def test_lists_models(self, schema_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_cli("models", str(schema_file)) == 0
        out = capsys.readouterr().out
        assert "post" in out
        assert "validatePostModel" in out
        assert "authorId" in out

    def test_get_column_shows_split_read(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "split.json"
        path.write_text(
            json.dumps(
                [
                    {"name": "photo", "readAllAuthRequired": False, "readOneAuthRequired": True},
                    {"name": "tag"},
                ]
            )
        )

        assert run_cli("models", str(path)) == 0

        lines = capsys.readouterr().out.splitlines()
        assert any("Get" in line for line in lines)
        photo_row = next(line for line in lines if "photo" in line)
        assert photo_row.count("auth") == 1
        assert photo_row.count("public") == 4
        tag_row = next(line for line in lines if "validateTagModel" in line)
        assert "auth" not in tag_row
        assert tag_row.count("public") == 4

    def test_missing_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_cli("models", "missing.json") == 1


class TestConvertCommand:
    """Verify the convert command."""

    def test_flattened_to_persisted_stdout(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = tmp_path / "flat.json"
        path.write_text(json.dumps({"user": {"age": {"type": "number"}}}))

        assert run_cli("convert", str(path)) == 0

        data = json.loads(capsys.readouterr().out)
        assert data[0]["name"] == "user"
        assert data[0]["fields"] == [{"name": "age", "rules": {"type": "number"}}]

    def test_convert_to_file_compiles_identically(self, tmp_path: Path) -> None:
        flat = tmp_path / "flat.json"
        flat.write_text(json.dumps({"user": {"age": {"type": "number"}}}))
        out = tmp_path / "schema.json"

        assert run_cli("convert", str(flat), "-o", str(out)) == 0

        assert compile_rules(load_schema(out)) == compile_rules(load_schema(flat))

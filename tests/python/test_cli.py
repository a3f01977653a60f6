"""End-to-end tests for the shwifty command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from shwifty import cli
from shwifty.utils.config import DEFAULT_CONFIG_PATH

FIXTURES = Path(__file__).parent / "fixtures" / "declarations"

PAIR_DOCUMENT = """
- name: Pair
  params: [a, b]
  constructors:
    - name: Pair
      fields:
        - {name: first, type: a}
        - {name: second, type: Maybe b}
- name: Flag
  constructors:
    - name: On
    - name: Off
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "decls.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_generate_swift(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, PAIR_DOCUMENT)

    exit_code = cli.main(["--config", str(DEFAULT_CONFIG_PATH), "generate", str(path)])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out == (
        "struct Pair<A, B> {\n"
        "    let first: A\n"
        "    let second: B?\n"
        "}\n"
        "\n"
        "enum Flag {\n"
        "    case on\n"
        "    case off\n"
        "}\n"
    )


def test_overrides_change_rendering(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, PAIR_DOCUMENT)

    exit_code = cli.main(
        [
            "--set",
            "options.indent=2",
            "--set",
            "options.protocols=[Codable]",
            "--set",
            "options.raw_value=String",
            "generate",
            str(path),
            "--expand-optional",
        ]
    )

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "struct Pair<A, B>: Codable {\n  let first: A\n  let second: Optional<B>\n}" in output
    assert "enum Flag: String, Codable {\n  case on\n" in output


def test_generate_reports_failures_and_keeps_going(capsys) -> None:
    exit_code = cli.main(["generate", str(FIXTURES / "shapes.yaml")])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "enum Barcode {" in captured.out
    assert "    let codes: Array<Barcode>" in captured.out
    assert "struct Pair<A, B> {" in captured.out
    assert "[shwifty] Nothing: Nothing: Cannot get shwifty with void types." in captured.err


def test_generate_json_and_yaml(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, PAIR_DOCUMENT)

    assert cli.main(["generate", str(path), "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [entry["name"] for entry in payload] == ["Pair", "Flag"]
    assert payload[0]["type"]["type"] == "Concrete"
    assert payload[1]["declaration"]["type"] == "EnumDecl"

    assert cli.main(["generate", str(path), "--format", "yaml"]) == 0
    document = yaml.safe_load(capsys.readouterr().out)
    assert document[0]["declaration"]["fields"][0]["name"] == "first"


def test_type_command(capsys) -> None:
    assert cli.main(["type", "Either String (Maybe [a])"]) == 0
    assert capsys.readouterr().out == "Result<Array<A>?, String>\n"

    assert cli.main(["type", "Maybe Int", "--expand-optional"]) == 0
    assert capsys.readouterr().out == "Optional<Int>\n"

    assert cli.main(["type", "Int", "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["kind"] == "int"


def test_errors_exit_non_zero(tmp_path: Path, capsys) -> None:
    assert cli.main(["type", "Mystery a"]) == 1
    assert "[shwifty] error: No Swift type for `Mystery" in capsys.readouterr().err

    assert cli.main(["type", "Maybe ("]) == 1
    assert "[shwifty] error:" in capsys.readouterr().err

    assert cli.main(["generate", str(tmp_path / "absent.yaml")]) == 1
    assert "descriptor file not found" in capsys.readouterr().err

    assert cli.main(["--set", "options.colour=red", "type", "Int"]) == 1
    assert "Unknown option 'colour'" in capsys.readouterr().err

import csv
import os

from dotenv import dotenv_values
from typer.testing import CliRunner

from tui.app import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "CellView v" in result.output


def test_repair_prints_pretty_json():
    result = runner.invoke(app, ["repair", '{"a":1,"b":2,"c":'])
    assert result.exit_code == 0
    assert '"b": 2' in result.output
    assert '"c"' not in result.output


def test_repair_passes_valid_json_through():
    result = runner.invoke(app, ["repair", '{"a": [1]}'])
    assert result.exit_code == 0
    assert result.output.strip() == '{\n  "a": [\n    1\n  ]\n}'


def test_repair_failure_exits_nonzero():
    result = runner.invoke(app, ["repair", "not json at all"])
    assert result.exit_code == 1


def test_repair_reads_stdin():
    result = runner.invoke(app, ["repair", "-"], input='["x", "y...')
    assert result.exit_code == 0
    assert '"x"' in result.output


def test_show_prints_trees(tmp_path):
    path = tmp_path / "export.csv"
    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f).writerows(
            [["id", "payload"], ["1", '{"ok": true}'], ["2", '{"cut": "abc...']]
        )

    result = runner.invoke(
        app, ["show", str(path), "--repair", "--env-file", str(tmp_path / ".env")]
    )

    assert result.exit_code == 0
    assert "Row 1" in result.output
    assert '"ok": true' in result.output
    assert "Truncated JSON (repaired)" in result.output


def test_show_reports_unreadable_input(tmp_path):
    result = runner.invoke(
        app, ["show", str(tmp_path / "nope.xlsx"), "--env-file", str(tmp_path / ".env")]
    )
    assert result.exit_code == 1


def test_config_updates_env_file(tmp_path):
    env_file = tmp_path / ".env"
    result = runner.invoke(
        app,
        [
            "config",
            "--env-file",
            str(env_file),
            "--repair",
            "--add-field",
            "payload",
            "--remove-field",
            "all",
        ],
    )
    assert result.exit_code == 0
    values = dotenv_values(env_file)
    assert values["CELLVIEW_REPAIR_TRUNCATED"] == "true"
    assert values["CELLVIEW_FIELD_NAMES"] == "payload"


def test_show_reads_settings_from_the_given_env_file(tmp_path):
    path = tmp_path / "export.csv"
    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f).writerows([["payload", "meta"], ['{"p": 1}', '{"m": 2}']])
    env_file = tmp_path / "custom.env"
    env_file.write_text("CELLVIEW_FIELD_NAMES=meta\n", encoding="utf-8")

    result = runner.invoke(app, ["show", str(path), "--env-file", str(env_file)])

    assert result.exit_code == 0
    assert '"m": 2' in result.output
    assert '"p": 1' not in result.output
    assert "CELLVIEW_FIELD_NAMES" not in os.environ

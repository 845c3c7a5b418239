import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from passfault.cli import cli


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "passfault.yml"
    path.write_text("analysis:\n  parallel: true\n", encoding="utf-8")
    return path


def _analyze(args, config_file):
    runner = CliRunner()
    return runner.invoke(cli, ["analyze", "--config", str(config_file), *args], prog_name="passfault")


def test_version_command():
    runner = CliRunner()
    result = runner.invoke(cli, ["version"], prog_name="passfault")
    assert result.exit_code == 0
    assert "passfault" in result.stdout


def test_hash_functions_lists_bcrypt():
    runner = CliRunner()
    result = runner.invoke(cli, ["hash-functions"], prog_name="passfault")
    assert result.exit_code == 0
    assert "bcrypt" in result.stdout
    assert "ntlm" in result.stdout


def test_analyze_prints_patterns(config_file):
    result = _analyze(["-p", "password2019"], config_file)
    assert result.exit_code == 0
    assert "Most crackable patterns:" in result.stdout
    assert "'password' matches the Rule" in result.stdout
    assert "percent of password strength" in result.stdout
    assert "Total complexity" in result.stdout
    assert "Estimated time" not in result.stdout


def test_analyze_with_hash_speed(config_file):
    result = _analyze(["-p", "Tr0ub4dor&3", "-s", "1000"], config_file)
    assert result.exit_code == 0
    assert "Estimated time to crack at 1000 H/s" in result.stdout


def test_analyze_with_gpus(config_file):
    result = _analyze(["-p", "correcthorse", "-g", "2", "-f", "md5"], config_file)
    assert result.exit_code == 0
    assert "Estimated 'md5' cracking speed with 2 GPU(s)" in result.stdout


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["-p", "abc"],
        ["-p", "password", "-i", "list.txt"],
        ["-p", "password", "-c"],
        ["-p", "password", "-g", "1"],
        ["-p", "password", "-s", "10", "-g", "1", "-f", "md5"],
        ["-p", "password", "-g", "0", "-f", "md5"],
        ["-p", "password", "-g", "1", "-f", "rot13"],
        ["-i", "does-not-exist.txt"],
        ["-p", "password", "-d", "does-not-exist.words"],
    ],
)
def test_analyze_rejects_bad_input(config_file, args):
    result = _analyze(args, config_file)
    assert result.exit_code == 1
    assert "CLI error" in result.stdout


def test_analyze_missing_config(tmp_path: Path):
    result = _analyze(["-p", "password"], tmp_path / "nope.yml")
    assert result.exit_code == 1


def test_analyze_input_file_to_report(tmp_path: Path, config_file):
    passwords = tmp_path / "passwords.txt"
    passwords.write_text("password2019\nabc\n\nqwerty123\n", encoding="utf-8")
    report = tmp_path / "report.jsonl"

    result = _analyze(["-i", str(passwords), "-o", str(report), "-s", "1e9"], config_file)

    assert result.exit_code == 0
    assert "Skipping line 2" in result.stdout
    lines = [json.loads(line) for line in report.read_text(encoding="utf-8").splitlines()]
    assert [r["password"] for r in lines] == ["password2019", "qwerty123"]
    assert lines[0]["patterns"][0]["match"] == "password"
    assert "duration" in lines[0]["crack_time"]


def test_custom_dictionary_only(tmp_path: Path, config_file):
    words = tmp_path / "team.words"
    words.write_text("falcon\nraven\n", encoding="utf-8")

    result = _analyze(["-p", "ravenfalcon", "-d", str(words), "-c"], config_file)

    assert result.exit_code == 0
    assert "in 'custom dictionary'" in result.stdout


def test_config_validate_ok(config_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["config-validate", str(config_file)], prog_name="passfault")
    assert result.exit_code == 0
    assert "Config OK" in result.stdout


def test_config_validate_rejects_invalid(tmp_path: Path):
    bad = tmp_path / "bad.yml"
    bad.write_text("analysis:\n  max_workers: 0\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["config-validate", str(bad)], prog_name="passfault")
    assert result.exit_code == 1
    assert "Config validation failed" in result.stdout

from pathlib import Path

import pytest

from passfault.config import resolve_config_path


def test_resolve_prefers_cli(tmp_path, monkeypatch):
    cfg = tmp_path / "a.yml"
    cfg.write_text("{}", encoding="utf-8")
    monkeypatch.setenv("PASSFAULT_CONFIG", str(tmp_path / "b.yml"))
    p = resolve_config_path(cfg)
    assert p == cfg.resolve()


def test_resolve_env_when_no_cli(tmp_path, monkeypatch):
    cfg = tmp_path / "b.yml"
    cfg.write_text("{}", encoding="utf-8")
    monkeypatch.setenv("PASSFAULT_CONFIG", str(cfg))
    p = resolve_config_path(None)
    assert p == cfg.resolve()


@pytest.mark.skipif(Path("/etc/passfault/passfault.yml").exists(), reason="system config present")
def test_resolve_falls_back_to_missing_cli_path(tmp_path, monkeypatch):
    monkeypatch.delenv("PASSFAULT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    missing = tmp_path / "missing.yml"
    assert resolve_config_path(missing) == missing

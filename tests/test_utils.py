import re

import pytest

from signspeak.utils import DEFAULT_CONFIG, Logger, load_config, resolve


def test_missing_config_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "absent.yaml")
    assert cfg == DEFAULT_CONFIG
    cfg["camera"]["index"] = 9
    assert DEFAULT_CONFIG["camera"]["index"] == 0


def test_partial_config_is_merged(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("camera:\n  index: 2\nhistory:\n  limit: 5\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg["camera"]["index"] == 2
    assert cfg["camera"]["width"] == 640
    assert cfg["history"] == {"limit": 5, "recent": 8, "repeat_after_s": 2.0, "min_confidence": 0.6}


def test_config_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("recognition:\n  predict_interval_s: 1.5\n", encoding="utf-8")
    monkeypatch.setenv("SIGNSPEAK_CONFIG", str(path))
    assert load_config()["recognition"]["predict_interval_s"] == 1.5


def test_config_root_must_be_mapping(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_empty_config_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == DEFAULT_CONFIG


def test_repo_config_loads():
    cfg = load_config("config/config.yaml")
    assert cfg["pixel"]["skin"]["hold_s"] is None
    assert cfg["tracking"]["max_num_hands"] == 1


def test_resolve_keeps_absolute_paths(tmp_path):
    assert resolve(tmp_path) == str(tmp_path)
    assert resolve("logs/x.log").endswith("x.log")


def test_logger_prints_and_appends(tmp_path, capsys):
    log = Logger(tmp_path / "logs" / "session.log")
    log.log("hello")
    log.log("again")
    lines = (tmp_path / "logs" / "session.log").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert re.fullmatch(r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] hello", lines[0])
    assert "hello" in capsys.readouterr().out

# tests/test_config.py
from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from tspw.config import Settings
from tspw.logging_setup import configure_logging
from tspw.models import Options


def test_appdata_wins_over_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("APPDATA", str(tmp_path / "roaming"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert Settings().user_data_dir == tmp_path / "roaming"


def test_xdg_used_without_appdata(monkeypatch, tmp_path):
    monkeypatch.delenv("APPDATA", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert Settings().user_data_dir == tmp_path / "xdg"


def test_prefixed_environment(monkeypatch):
    monkeypatch.setenv("TSPW_NODE_BIN", "")
    monkeypatch.setenv("TSPW_LOG_LEVEL", "DEBUG")
    cfg = Settings()
    assert cfg.NODE_BIN == ""
    assert cfg.LOG_LEVEL == "DEBUG"


def test_configure_logging_replaces_only_its_own_handlers():
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        configure_logging("INFO")
        configure_logging("DEBUG", "json")
        ours = [h for h in root.handlers if isinstance(h, logging.StreamHandler) and h.formatter is not None
                and h.formatter.__class__.__name__ == "ProcessorFormatter"]
        assert len(ours) == 2
        assert foreign in root.handlers
        assert root.level == logging.DEBUG
    finally:
        root.removeHandler(foreign)
        configure_logging("INFO")


def test_options_are_frozen(tmp_path):
    opts = Options(compiler_path=tmp_path / "tsc")
    with pytest.raises(ValidationError):
        opts.simulate = True
    assert opts.extra_args_split() == []


def test_options_reject_non_config_projects(tmp_path):
    with pytest.raises(ValidationError):
        Options(compiler_path=tmp_path / "tsc", watch_projects=(Path("/x/package.json"),))

"""Shared fixtures for pipeline tests."""

import sys
from pathlib import Path

import pytest
from loguru import logger

from cue_thumbs.core.config import Config, PathsConfig
from cue_thumbs.core.output import set_console

from helpers import FakeExtractor


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    """Keep config, logs and env overrides inside the test's tmp_path."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    for name in ("RETROVERSE_DATA_REPO", "CUE_THUMBS_DESIGN_ROOT", "CUE_THUMBS_WORKERS"):
        monkeypatch.delenv(name, raising=False)
    yield
    set_console(None)
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def design_root(tmp_path) -> Path:
    root = tmp_path / "design"
    root.mkdir()
    return root


@pytest.fixture
def config(design_root, tmp_path) -> Config:
    return Config(
        paths=PathsConfig(
            design_root=str(design_root),
            data_repo=str(tmp_path / "data"),
        )
    )


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    return FakeExtractor()

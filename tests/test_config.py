"""Tests for default locations derived from the environment."""

from __future__ import annotations

from pathlib import Path

from vimflavor import config
from vimflavor.core.cache import RepositoryCache


def test_home_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv(config.HOME_ENV, raising=False)
    assert config.vim_flavor_home() == tmp_path / ".vim-flavor"
    assert config.default_cache_root() == tmp_path / ".vim-flavor" / "repos"
    assert config.default_vimfiles_path() == tmp_path / ".vim"


def test_vim_flavor_home_override(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv(config.HOME_ENV, str(tmp_path / "state"))
    assert config.default_cache_root() == tmp_path / "state" / "repos"
    assert RepositoryCache().root == tmp_path / "state" / "repos"


def test_project_files(tmp_path: Path) -> None:
    assert config.default_flavorfile_path(tmp_path) == tmp_path / "VimFlavor"
    assert config.default_lockfile_path(tmp_path) == tmp_path / "VimFlavor.lock"

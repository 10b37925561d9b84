# tests/50_core/test_resolve_config.py
"""Tests for resolve_config: precedence, path roots and truffle layout."""

from pathlib import Path

import pytest

import soljitsu.config.config_resolve as mod_config_resolve
from tests.utils import make_args


def _dirs(tmp_path: Path) -> tuple[Path, Path]:
    config_dir = tmp_path / "project"
    cwd = tmp_path / "elsewhere"
    config_dir.mkdir()
    cwd.mkdir()
    return config_dir, cwd


def test_config_paths_are_relative_to_config_dir(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)

    resolved = mod_config_resolve.resolve_config(
        {"src_dir": "contracts", "dest_dir": "build"},
        make_args(),
        config_dir,
        cwd,
    )

    assert resolved["src_dir"] == {
        "path": (config_dir / "contracts").resolve(),
        "origin": "config",
    }
    assert resolved["dest_dir"]["path"] == (config_dir / "build").resolve()
    assert resolved["registries"] == []
    assert resolved["command"] == "combine"
    assert resolved["strict_config"] is True
    assert resolved["dry_run"] is False


def test_cli_overrides_config_relative_to_cwd(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)

    resolved = mod_config_resolve.resolve_config(
        {"src_dir": "contracts", "dest_dir": "build"},
        make_args(command="flatten", src_dir="src", dest_dir="out", dry_run=True),
        config_dir,
        cwd,
    )

    assert resolved["command"] == "flatten"
    assert resolved["src_dir"] == {"path": (cwd / "src").resolve(), "origin": "cli"}
    assert resolved["dest_dir"]["origin"] == "cli"
    assert resolved["dry_run"] is True


def test_home_directory_is_expanded(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_dir, cwd = _dirs(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))

    resolved = mod_config_resolve.resolve_config(
        {}, make_args(src_dir="~/contracts", dest_dir="out"), config_dir, cwd
    )

    assert resolved["src_dir"]["path"] == (tmp_path / "contracts").resolve()


def test_truffle_layout(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)
    project = cwd / "dapp"
    (project / "contracts").mkdir(parents=True)
    (project / "installed_contracts").mkdir()

    resolved = mod_config_resolve.resolve_config(
        {}, make_args(truffle="dapp", dest_dir="out"), config_dir, cwd
    )

    project = project.resolve()
    assert resolved["src_dir"] == {"path": project / "contracts", "origin": "truffle"}
    assert [(r["kind"], r["path"]) for r in resolved["registries"]] == [
        ("npm", project / "node_modules"),
        ("ethpm", project / "installed_contracts"),
    ]


def test_truffle_without_ethpm_dir(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)
    (cwd / "contracts").mkdir()

    resolved = mod_config_resolve.resolve_config(
        {}, make_args(truffle=".", dest_dir="out"), config_dir, cwd
    )

    assert [r["kind"] for r in resolved["registries"]] == ["npm"]


def test_explicit_dep_dir_replaces_truffle_default(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)
    (cwd / "contracts").mkdir()

    resolved = mod_config_resolve.resolve_config(
        {},
        make_args(truffle=".", dest_dir="out", dep_dir="vendor"),
        config_dir,
        cwd,
    )

    assert resolved["registries"] == [
        {"path": (cwd / "vendor").resolve(), "origin": "cli", "kind": "npm"}
    ]


def test_cli_src_dir_wins_over_config_truffle(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)

    resolved = mod_config_resolve.resolve_config(
        {"truffle": ".", "dest_dir": "out"},
        make_args(src_dir="contracts"),
        config_dir,
        cwd,
    )

    assert resolved["src_dir"]["origin"] == "cli"
    assert resolved["registries"] == []


def test_missing_truffle_project(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)

    with pytest.raises(FileNotFoundError, match="Truffle"):
        mod_config_resolve.resolve_config(
            {}, make_args(truffle="missing", dest_dir="out"), config_dir, cwd
        )


def test_source_is_required(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)

    with pytest.raises(ValueError, match="--src-dir"):
        mod_config_resolve.resolve_config(
            {}, make_args(dest_dir="out"), config_dir, cwd
        )


def test_destination_is_required(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)

    with pytest.raises(ValueError, match="--dest-dir"):
        mod_config_resolve.resolve_config(
            {}, make_args(src_dir="contracts"), config_dir, cwd
        )


def test_unknown_command(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)

    with pytest.raises(ValueError, match="Unknown command"):
        mod_config_resolve.resolve_config(
            {},
            make_args(command="explode", src_dir="a", dest_dir="b"),
            config_dir,
            cwd,
        )


def test_cli_excludes_extend_config_excludes(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)

    resolved = mod_config_resolve.resolve_config(
        {"src_dir": "contracts", "dest_dir": "out", "exclude": ["mocks/*.sol"]},
        make_args(exclude=["test/*.sol"]),
        config_dir,
        cwd,
    )

    assert resolved["exclude"] == ["mocks/*.sol", "test/*.sol"]


def test_config_log_level_applies_without_cli_flag(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_dir, cwd = _dirs(tmp_path)
    monkeypatch.delenv("SOLJITSU_LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    resolved = mod_config_resolve.resolve_config(
        {"src_dir": "a", "dest_dir": "b", "log_level": "warning"},
        make_args(),
        config_dir,
        cwd,
    )

    assert resolved["log_level"].lower() == "warning"


def test_cli_log_level_beats_config(tmp_path: Path) -> None:
    config_dir, cwd = _dirs(tmp_path)

    resolved = mod_config_resolve.resolve_config(
        {"src_dir": "a", "dest_dir": "b", "log_level": "warning"},
        make_args(log_level="error"),
        config_dir,
        cwd,
    )

    assert resolved["log_level"].lower() == "error"

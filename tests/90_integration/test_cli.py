# tests/90_integration/test_cli.py
"""Tests for argument handling and exit codes of the CLI."""

from pathlib import Path

import pytest

import soljitsu.cli as mod_cli
import soljitsu.meta as mod_meta
from tests.utils import make_contract_source, write_config_file, write_tree


# --- constants --------------------------------------------------------------------

ARGPARSE_ERROR_EXIT_CODE = 2

# --- tests ------------------------------------------------------------------------


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    code = mod_cli.main(["--version"])

    out = capsys.readouterr().out
    assert code == 0
    assert mod_meta.PROGRAM_DISPLAY in out


def test_command_is_required() -> None:
    with pytest.raises(SystemExit) as exc_info:
        mod_cli.main([])

    assert exc_info.value.code == ARGPARSE_ERROR_EXIT_CODE


def test_unknown_command_suggests_close_match(
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        mod_cli.main(["combin"])

    assert exc_info.value.code == ARGPARSE_ERROR_EXIT_CODE
    assert "did you mean combine?" in capsys.readouterr().err


def test_mistyped_flag_suggests_close_match(
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        mod_cli.main(["combine", "--dest-dri", "out"])

    assert exc_info.value.code == ARGPARSE_ERROR_EXIT_CODE
    assert "did you mean --dest-dir?" in capsys.readouterr().err


def test_src_dir_and_truffle_are_exclusive(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc_info:
        mod_cli.main(
            [
                "combine",
                "--src-dir",
                str(tmp_path),
                "--truffle",
                str(tmp_path),
                "--dest-dir",
                str(tmp_path / "out"),
            ]
        )

    assert exc_info.value.code == ARGPARSE_ERROR_EXIT_CODE


def test_missing_dest_dir_returns_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    assert mod_cli.main(["combine", "--src-dir", str(tmp_path)]) == 1


def test_missing_src_dir_returns_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    code = mod_cli.main(
        ["combine", "--src-dir", str(tmp_path / "nope"), "--dest-dir", "out"]
    )

    assert code == 1


def test_registry_import_without_dep_dir_returns_error(tmp_path: Path) -> None:
    src = write_tree(
        tmp_path / "contracts",
        {"A.sol": make_contract_source("A", "some-module/MyDep.sol")},
    )

    code = mod_cli.main(
        ["combine", "--src-dir", str(src), "--dest-dir", str(tmp_path / "out")]
    )

    assert code == 1


def test_invalid_config_returns_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    write_config_file(tmp_path, {"src_dir": "contracts", "destdir": "out"})
    monkeypatch.chdir(tmp_path)

    assert mod_cli.main(["combine", "--dest-dir", "out"]) == 1


def test_explicit_config_flag(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    write_tree(tmp_path / "contracts", {"A.sol": make_contract_source("A")})
    config = write_config_file(
        tmp_path,
        {"src_dir": "contracts", "dest_dir": "out"},
        name="soljitsu.json",
    )
    cwd = tmp_path / "elsewhere"
    cwd.mkdir()
    monkeypatch.chdir(cwd)

    code = mod_cli.main(["flatten", "-c", str(config)])

    assert code == 0
    # config paths are relative to the config file, not the cwd
    assert (tmp_path / "out" / "A.sol").exists()


def test_quiet_flag_hides_summary(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    src = write_tree(tmp_path / "contracts", {"A.sol": make_contract_source("A")})

    code = mod_cli.main(
        ["combine", "-q", "--src-dir", str(src), "--dest-dir", str(tmp_path / "out")]
    )

    assert code == 0
    assert "completed" not in capsys.readouterr().out.lower()


def test_unexpected_error_returns_one(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _boom(_resolved: object) -> None:
        xmsg = "boom"
        raise KeyError(xmsg)

    monkeypatch.setattr(mod_cli, "run_build", _boom)
    src = write_tree(tmp_path / "contracts", {"A.sol": make_contract_source("A")})

    code = mod_cli.main(
        ["combine", "--src-dir", str(src), "--dest-dir", str(tmp_path / "out")]
    )

    assert code == 1

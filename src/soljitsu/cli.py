# src/soljitsu/cli.py

import argparse
import platform
import sys
from difflib import get_close_matches
from pathlib import Path

from apathetic_logging import LEVEL_ORDER, safeLog
from apathetic_utils import cast_hint, get_sys_version_info

from .build import run_build
from .config import (
    RootConfig,
    load_and_validate_config,
    resolve_config,
)
from .constants import COMMANDS
from .logs import getAppLogger
from .meta import (
    PROGRAM_DISPLAY,
    PROGRAM_SCRIPT,
    get_metadata,
)


# --------------------------------------------------------------------------- #
# CLI setup and helpers
# --------------------------------------------------------------------------- #


class HintingArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        # Build known option strings: ["-v", "--verbose", "--log-level", ...]
        known_opts: list[str] = []
        for action in self._actions:
            known_opts.extend([s for s in action.option_strings if s])

        hint_lines: list[str] = []
        # Argparse message for bad flags is typically
        # "unrecognized arguments: --dest-dri ..."
        if "unrecognized arguments:" in message:
            bad = message.split("unrecognized arguments:", 1)[1].strip()
            bad_args = [tok for tok in bad.split() if tok.startswith("-")]
            for arg in bad_args:
                close = get_close_matches(arg, known_opts, n=1, cutoff=0.6)
                if close:
                    hint_lines.append(f"Hint: did you mean {close[0]}?")
        # "invalid choice: 'combin'" for the command
        elif "invalid choice:" in message:
            bad = message.split("invalid choice:", 1)[1].split("(", 1)[0]
            close = get_close_matches(bad.strip(" '\""), COMMANDS, n=1, cutoff=0.6)
            if close:
                hint_lines.append(f"Hint: did you mean {close[0]}?")

        # Print usage + the original error
        self.print_usage(sys.stderr)
        full = f"{self.prog}: error: {message}"
        if hint_lines:
            full += "\n" + "\n".join(hint_lines)
        self.exit(2, full + "\n")


def _setup_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = HintingArgumentParser(
        prog=PROGRAM_SCRIPT,
        description=(
            "Combine Solidity contract files with their dependencies into "
            "single files, or flatten them into one directory."
        ),
    )

    # --- Command ---
    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        help=(
            "combine: one self-contained file per contract file; "
            "flatten: every file in one directory with imports rewritten."
        ),
    )

    # --- Sources ---
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--src-dir",
        dest="src_dir",
        help="Directory holding the contract files.",
    )
    source.add_argument(
        "--truffle",
        help=(
            "Truffle project root; uses its contracts/, node_modules/ "
            "and installed_contracts/ directories."
        ),
    )
    parser.add_argument(
        "--dep-dir",
        dest="dep_dir",
        help="npm dependency directory (usually node_modules).",
    )
    parser.add_argument(
        "--ethpm-dir",
        dest="ethpm_dir",
        help="EthPM dependency directory (usually installed_contracts).",
    )
    parser.add_argument(
        "--exclude",
        nargs="+",
        help="Glob patterns (relative to the source directory) to skip.",
    )

    # --- Output ---
    parser.add_argument(
        "--dest-dir",
        dest="dest_dir",
        help="Directory to write the output files to.",
    )
    parser.add_argument("-c", "--config", help="Path to config file.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve and combine without writing any files.",
    )

    # --- Color ---
    color = parser.add_mutually_exclusive_group()
    color.add_argument(
        "--no-color",
        dest="use_color",
        action="store_const",
        const=False,
        help="Disable ANSI color output.",
    )
    color.add_argument(
        "--color",
        dest="use_color",
        action="store_const",
        const=True,
        help="Force-enable ANSI color output (overrides auto-detect).",
    )
    color.set_defaults(use_color=None)

    # --- Version and verbosity ---
    parser.add_argument("--version", action="store_true", help="Show version info.")

    log_level = parser.add_mutually_exclusive_group()
    log_level.add_argument(
        "-q",
        "--quiet",
        action="store_const",
        const="warning",
        dest="log_level",
        help="Suppress non-critical output (same as --log-level warning).",
    )
    log_level.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const="debug",
        dest="log_level",
        help="Verbose output (same as --log-level debug).",
    )
    log_level.add_argument(
        "--log-level",
        choices=LEVEL_ORDER,
        default=None,
        dest="log_level",
        help="Set log verbosity level.",
    )
    return parser


# --------------------------------------------------------------------------- #
# Main entry helpers
# --------------------------------------------------------------------------- #


def _initialize_logger(args: argparse.Namespace) -> None:
    """Initialize logger with CLI args, env vars, and defaults."""
    logger = getAppLogger()
    log_level = logger.determineLogLevel(args=args)
    logger.setLevel(log_level)
    use_color = getattr(args, "use_color", None)
    logger.enable_color = (
        use_color if use_color is not None else logger.determineColorEnabled()
    )
    logger.trace("[BOOT] log-level initialized: %s", logger.levelName)

    logger.debug(
        "Runtime: Python %s (%s)\n    %s",
        platform.python_version(),
        platform.python_implementation(),
        sys.version.replace("\n", " "),
    )


def _handle_early_exits(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int | None:
    """Returns exit code if we should exit early, None otherwise."""
    logger = getAppLogger()

    # --- Version flag ---
    if getattr(args, "version", None):
        meta = get_metadata()
        logger.info("%s %s (%s)", PROGRAM_DISPLAY, meta.version, meta.commit)
        return 0

    # --- Python version check ---
    if get_sys_version_info() < (3, 10):
        logger.error("%s requires Python 3.10 or newer.", PROGRAM_DISPLAY)
        return 1

    if not getattr(args, "command", None):
        parser.error(f"a command is required: {', '.join(COMMANDS)}")

    return None


# --------------------------------------------------------------------------- #
# Main entry
# --------------------------------------------------------------------------- #


def main(argv: list[str] | None = None) -> int:
    logger = getAppLogger()  # init (use env + defaults)

    try:
        parser = _setup_parser()
        args = parser.parse_args(argv)

        # --- Early runtime init (use CLI + env + defaults) ---
        _initialize_logger(args)

        # --- Handle early exits (version, missing command) ---
        early_exit_code = _handle_early_exits(args, parser)
        if early_exit_code is not None:
            return early_exit_code

        # --- Load configuration ---
        cwd = Path.cwd().resolve()
        config_path: Path | None = None
        root_cfg = cast_hint(RootConfig, {})
        config_result = load_and_validate_config(args, cwd)
        if config_result is not None:
            config_path, root_cfg = config_result
        config_dir = config_path.parent if config_path else cwd

        # --- Resolve config with args and defaults ---
        resolved = resolve_config(
            root_cfg, args, config_dir, cwd, config_path=config_path
        )

        # --- Config summary ---
        if config_path:
            logger.info("🔧 Using config: %s", config_path.name)
        logger.debug("📁 Config root: %s", config_dir)
        logger.debug("📂 Invoked from: %s", cwd)

        # --- Execute build ---
        run_build(resolved)

    except (FileNotFoundError, ValueError, TypeError, RuntimeError) as e:
        # controlled termination
        silent = getattr(e, "silent", False)
        if not silent:
            try:
                logger.errorIfNotDebug(str(e))
            except Exception:  # noqa: BLE001
                safeLog(f"[FATAL] Logging failed while reporting: {e}")
        return getattr(e, "code", 1)

    except Exception as e:  # noqa: BLE001
        # unexpected internal error
        try:
            logger.criticalIfNotDebug("Unexpected internal error: %s", e)
        except Exception:  # noqa: BLE001
            safeLog(f"[FATAL] Logging failed while reporting: {e}")

        return getattr(e, "code", 1)

    else:
        return 0

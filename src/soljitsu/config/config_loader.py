# src/soljitsu/config/config_loader.py


import argparse
from pathlib import Path
from typing import Any

from apathetic_utils import (
    cast_hint,
    load_jsonc,
    plural,
    remove_path_in_error_message,
    safe_isinstance,
    schema_from_typeddict,
)

from soljitsu.constants import DEFAULT_STRICT_CONFIG
from soljitsu.logs import getAppLogger
from soljitsu.meta import PROGRAM_CONFIG

from .config_types import RootConfig


# Field-specific examples for better error messages
FIELD_EXAMPLES: dict[str, str] = {
    "src_dir": '"contracts"',
    "truffle": '"."',
    "dep_dir": '"node_modules"',
    "ethpm_dir": '"installed_contracts"',
    "dest_dir": '"build/combined"',
    "exclude": '["mocks/**", "test/*.sol"]',
    "log_level": '"debug"',
    "strict_config": "true",
}

DRYRUN_KEYS = {"dry-run", "dry_run", "dryrun", "no-op", "no_op", "noop"}


def find_config(args: argparse.Namespace, cwd: Path) -> Path | None:
    """Locate a configuration file.

    Search order:
      1. Explicit path from CLI (--config)
      2. .{PROGRAM_CONFIG}.jsonc or .{PROGRAM_CONFIG}.json in the current
         working directory, then in each parent

    Returns the first matching path, or None if no config was found.
    """
    logger = getAppLogger()

    # --- 1. Explicit config path ---
    if getattr(args, "config", None):
        config = Path(args.config).expanduser().resolve()
        logger.trace(f"[find_config] Checking explicit path: {config}")
        if not config.exists():
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    # --- 2. Default candidate files (search current dir and parents) ---
    candidate_names = [f".{PROGRAM_CONFIG}.jsonc", f".{PROGRAM_CONFIG}.json"]
    current = cwd
    while True:
        found = [current / name for name in candidate_names if (current / name).exists()]
        if found:
            if len(found) > 1:
                logger.warning(
                    "Multiple config files detected (%s); using %s.",
                    ", ".join(p.name for p in found),
                    found[0].name,
                )
            return found[0]
        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    # Expected absence, everything can come from the CLI
    logger.debug("No config file found in %s or parents", cwd)
    return None


def load_config(config_path: Path) -> dict[str, Any] | None:
    """Load configuration data from a JSON/JSONC file.

    Returns:
        The parsed object, or None for an intentionally empty config.

    Raises:
        ValueError: If the file is not valid JSONC
        TypeError: If the top-level value is not an object
    """
    logger = getAppLogger()
    logger.trace(f"[load_config] Loading from {config_path} ({config_path.suffix})")

    try:
        raw = load_jsonc(config_path)
    except ValueError as e:
        clean_msg = remove_path_in_error_message(str(e), config_path)
        xmsg = (
            f"Error while loading configuration file '{config_path.name}': {clean_msg}"
        )
        raise ValueError(xmsg) from e

    if not raw:
        return None
    if not isinstance(raw, dict):
        xmsg = (
            f"Invalid top-level value in {config_path.name}: "
            f"{type(raw).__name__} (expected object)"
        )
        raise TypeError(xmsg)
    return raw


def validate_config(
    raw_config: dict[str, Any],
    *,
    strict_arg: bool | None = None,
) -> tuple[list[str], bool]:
    """Check keys and value types against RootConfig.

    Returns:
        (problems, strict): the problems found, and whether they are fatal
    """
    logger = getAppLogger()
    logger.trace(f"[validate_config] Validating {len(raw_config)} key(s)")

    strict_from_root: Any = raw_config.get("strict_config")
    if strict_arg is not None:
        strict = strict_arg
    elif isinstance(strict_from_root, bool):
        strict = strict_from_root
    else:
        strict = DEFAULT_STRICT_CONFIG

    schema = schema_from_typeddict(RootConfig)
    problems: list[str] = []
    for key, value in raw_config.items():
        if key in DRYRUN_KEYS:
            problems.append(
                f"Unknown key {key!r}: use the CLI flag '--dry-run' instead."
            )
            continue
        if key not in schema:
            problems.append(f"Unknown key {key!r}.")
            continue
        if not safe_isinstance(value, schema[key]):
            example = FIELD_EXAMPLES.get(key)
            hint = f" (e.g. {example})" if example else ""
            problems.append(
                f"{key!r} has the wrong type: got {type(value).__name__}{hint}."
            )

    if "src_dir" in raw_config and "truffle" in raw_config:
        problems.append("Use either 'src_dir' or 'truffle', not both.")

    return problems, strict


def _validation_summary(
    problems: list[str],
    config_path: Path,
    *,
    strict: bool,
) -> None:
    logger = getAppLogger()
    if not problems:
        logger.debug("Validated %s successfully.", config_path.name)
        return

    mode = "strict mode" if strict else "lenient mode"
    msg_summary = "\n  • ".join(problems)
    counts_msg = f"Found {len(problems)} problem{plural(problems)}"
    if strict:
        logger.error(
            "Failed to validate configuration file %s (%s). %s:\n  • %s",
            config_path.name,
            mode,
            counts_msg,
            msg_summary,
        )
    else:
        logger.warning(
            "Validated configuration file %s (%s) with warnings. %s:\n  • %s",
            config_path.name,
            mode,
            counts_msg,
            msg_summary,
        )


def load_and_validate_config(
    args: argparse.Namespace,
    cwd: Path | None = None,
) -> tuple[Path, RootConfig] | None:
    """Find, load and validate the user's configuration.

    Also applies the config's log_level right away (CLI and env still win),
    so the rest of the run logs at the intended level.

    Returns:
        (config_path, root_cfg), or None if no (or an empty) config was found.
    """
    logger = getAppLogger()
    cwd = (cwd or Path.cwd()).resolve()

    config_path = find_config(args, cwd)
    if config_path is None:
        return None

    raw_config = load_config(config_path)
    if raw_config is None:
        return None

    # --- Early peek for log_level ---
    raw_log_level = raw_config.get("log_level")
    if isinstance(raw_log_level, str) and raw_log_level:
        logger.setLevel(
            logger.determineLogLevel(args=args, root_log_level=raw_log_level)
        )

    problems, strict = validate_config(raw_config)
    _validation_summary(problems, config_path, strict=strict)
    if problems and strict:
        xmsg = f"Configuration file {config_path.name} contains validation errors."
        exception = ValueError(xmsg)
        exception.silent = True  # type: ignore[attr-defined]
        raise exception

    # unknown and mistyped keys were reported above
    schema = schema_from_typeddict(RootConfig)
    cleaned = {
        k: v
        for k, v in raw_config.items()
        if k in schema and safe_isinstance(v, schema[k])
    }
    return config_path, cast_hint(RootConfig, cleaned)

# src/soljitsu/config/config_resolve.py


import argparse
from pathlib import Path

from apathetic_utils import cast_hint

from soljitsu.constants import (
    COMMANDS,
    DEFAULT_DRY_RUN,
    DEFAULT_STRICT_CONFIG,
    TRUFFLE_CONTRACTS_DIR,
    TRUFFLE_ETHPM_DIR,
    TRUFFLE_NPM_DIR,
)
from soljitsu.logs import getAppLogger

from .config_types import (
    CommandName,
    MetaConfigResolved,
    OriginType,
    PathResolved,
    RegistryName,
    RegistryResolved,
    RootConfig,
    RootConfigResolved,
)


def make_pathresolved(path: Path, origin: OriginType) -> PathResolved:
    return {"path": path, "origin": origin}


def _normalize_path(raw: str | Path, context_root: Path) -> Path:
    """Absolute form of a user-provided path (``~`` expanded)."""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = context_root / path
    return path.resolve()


def _pick_path(
    key: str,
    root_cfg: RootConfig,
    args: argparse.Namespace,
    *,
    config_dir: Path,
    cwd: Path,
) -> PathResolved | None:
    """CLI value (relative to cwd), else config value (relative to config dir)."""
    cli_value = getattr(args, key, None)
    if cli_value:
        return make_pathresolved(_normalize_path(cli_value, cwd), "cli")
    cfg_value = root_cfg.get(key)
    if cfg_value:
        return make_pathresolved(_normalize_path(cfg_value, config_dir), "config")
    return None


def _resolve_truffle(
    truffle: PathResolved,
) -> tuple[PathResolved, list[RegistryResolved]]:
    """Source and registry directories of a truffle project."""
    logger = getAppLogger()
    root = truffle["path"]
    if not root.is_dir():
        xmsg = f"Truffle project directory not found: {root}"
        raise FileNotFoundError(xmsg)

    src = make_pathresolved(root / TRUFFLE_CONTRACTS_DIR, "truffle")
    registries: list[RegistryResolved] = [
        {"path": root / TRUFFLE_NPM_DIR, "origin": "truffle", "kind": "npm"}
    ]
    ethpm_path = root / TRUFFLE_ETHPM_DIR
    if ethpm_path.is_dir():
        registries.append({"path": ethpm_path, "origin": "truffle", "kind": "ethpm"})
    logger.trace(
        "[resolve_truffle] %s -> %s (%d registries)",
        root,
        src["path"],
        len(registries),
    )
    return src, registries


def _resolve_registries(
    root_cfg: RootConfig,
    args: argparse.Namespace,
    *,
    config_dir: Path,
    cwd: Path,
    truffle_registries: list[RegistryResolved],
) -> list[RegistryResolved]:
    """Explicit --dep-dir / --ethpm-dir replace the truffle defaults per kind."""
    explicit: dict[RegistryName, PathResolved] = {}
    for key, kind in (("dep_dir", "npm"), ("ethpm_dir", "ethpm")):
        picked = _pick_path(key, root_cfg, args, config_dir=config_dir, cwd=cwd)
        if picked is not None:
            explicit[cast_hint(RegistryName, kind)] = picked

    registries: list[RegistryResolved] = []
    kinds: tuple[RegistryName, ...] = ("npm", "ethpm")
    for kind in kinds:
        if kind in explicit:
            registries.append({**explicit[kind], "kind": kind})
        else:
            registries.extend(r for r in truffle_registries if r["kind"] == kind)
    return registries


def resolve_config(
    root_input: RootConfig,
    args: argparse.Namespace,
    config_dir: Path,
    cwd: Path,
    *,
    config_path: Path | None = None,
) -> RootConfigResolved:
    """Fully resolve a loaded RootConfig into a ready-to-run RootConfigResolved.

    Precedence is CLI > config file > defaults. Also syncs the app logger
    with the resolved log level.
    """
    logger = getAppLogger()
    root_cfg = cast_hint(RootConfig, dict(root_input))

    # ------------------------------
    # Command
    # ------------------------------
    command = getattr(args, "command", None)
    if command not in COMMANDS:
        xmsg = f"Unknown command {command!r}, expected one of: {', '.join(COMMANDS)}"
        raise ValueError(xmsg)

    # ------------------------------
    # Log level
    # ------------------------------
    #  log_level: arg -> env -> config -> default
    log_level = logger.determineLogLevel(
        args=args, root_log_level=root_cfg.get("log_level")
    )
    logger.setLevel(log_level)

    # ------------------------------
    # Sources
    # ------------------------------
    picked_src = _pick_path("src_dir", root_cfg, args, config_dir=config_dir, cwd=cwd)
    picked_truffle = _pick_path(
        "truffle", root_cfg, args, config_dir=config_dir, cwd=cwd
    )
    # a CLI choice overrides the other key from the config file
    if picked_src and picked_truffle:
        if picked_src["origin"] == "cli" and picked_truffle["origin"] == "config":
            picked_truffle = None
        elif picked_truffle["origin"] == "cli" and picked_src["origin"] == "config":
            picked_src = None
    if picked_src and picked_truffle:
        xmsg = "Use either --src-dir or --truffle, not both."
        raise ValueError(xmsg)

    truffle_registries: list[RegistryResolved] = []
    if picked_truffle:
        src_dir, truffle_registries = _resolve_truffle(picked_truffle)
    elif picked_src:
        src_dir = picked_src
    else:
        xmsg = "No source directory given: use --src-dir or --truffle."
        raise ValueError(xmsg)

    registries = _resolve_registries(
        root_cfg,
        args,
        config_dir=config_dir,
        cwd=cwd,
        truffle_registries=truffle_registries,
    )

    # ------------------------------
    # Destination
    # ------------------------------
    dest_dir = _pick_path("dest_dir", root_cfg, args, config_dir=config_dir, cwd=cwd)
    if dest_dir is None:
        xmsg = "No destination directory given: use --dest-dir."
        raise ValueError(xmsg)

    # ------------------------------
    # Excludes: CLI extends config
    # ------------------------------
    exclude = list(root_cfg.get("exclude", []))
    exclude.extend(getattr(args, "exclude", None) or [])

    meta: MetaConfigResolved = {"cli_root": cwd, "config_root": config_dir}
    if config_path is not None:
        meta["config_path"] = config_path

    resolved: RootConfigResolved = {
        "command": cast_hint(CommandName, command),
        "src_dir": src_dir,
        "dest_dir": dest_dir,
        "registries": registries,
        "exclude": exclude,
        "log_level": log_level,
        "strict_config": root_cfg.get("strict_config", DEFAULT_STRICT_CONFIG),
        "dry_run": bool(getattr(args, "dry_run", DEFAULT_DRY_RUN)),
        "__meta__": meta,
    }
    logger.trace(
        "[resolve_config] %s: src=%s dest=%s registries=%s",
        command,
        src_dir["path"],
        dest_dir["path"],
        [str(r["path"]) for r in registries],
    )
    return resolved

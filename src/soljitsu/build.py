# src/soljitsu/build.py
"""Run a resolved combine or flatten job against the filesystem."""

from pathlib import Path

from apathetic_utils import plural

from .assemble import combine_closure, combined_name
from .catalog import Catalog, RegistrySource, load_catalog
from .config import RootConfigResolved
from .constants import DEFAULT_DRY_RUN
from .errors import BuildError, SoljitsuError
from .flatten import ensure_unique_names, flatten_catalog
from .logs import getAppLogger
from .models import index_catalog
from .ordering import ensure_no_import_as


def _registry_sources(resolved: RootConfigResolved) -> list[RegistrySource]:
    return [
        RegistrySource(kind=entry["kind"], root=entry["path"])
        for entry in resolved["registries"]
    ]


def _load(resolved: RootConfigResolved) -> Catalog:
    src_dir = resolved["src_dir"]["path"]
    dest_dir = resolved["dest_dir"]["path"]
    if src_dir.resolve() == dest_dir.resolve():
        xmsg = f"Destination directory must differ from the source directory: {dest_dir}"
        raise ValueError(xmsg)

    return load_catalog(
        src_dir,
        registries=_registry_sources(resolved),
        exclude=resolved["exclude"],
    )


def write_outputs(
    outputs: dict[str, str],
    dest_dir: Path,
    *,
    dry_run: bool = DEFAULT_DRY_RUN,
) -> None:
    """Write name -> content pairs into ``dest_dir``, creating it if needed."""
    logger = getAppLogger()
    if dry_run:
        for name in outputs:
            logger.info("🧪 (dry-run) Would write %s", dest_dir / name)
        return

    dest_dir.mkdir(parents=True, exist_ok=True)
    for name, content in outputs.items():
        out_path = dest_dir / name
        out_path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", out_path)


def run_combine(resolved: RootConfigResolved) -> dict[str, str]:
    """Combine every local contract file with its dependencies.

    A file that cannot be combined is reported and skipped; the others are
    still written, then BuildError is raised.

    Returns:
        Output file name -> combined content, for the files that succeeded
    """
    logger = getAppLogger()
    catalog = _load(resolved)
    dest_dir = resolved["dest_dir"]["path"]

    ensure_no_import_as(catalog.all_files)
    ensure_unique_names(catalog.contract_files)
    index = index_catalog(catalog.all_files)

    outputs: dict[str, str] = {}
    failures: list[str] = []
    for root in catalog.contract_files:
        try:
            outputs[combined_name(root.name)] = combine_closure(root, index)
        except SoljitsuError as e:
            logger.error("Could not combine %s: %s", root.path, e)
            failures.append(root.path)

    write_outputs(outputs, dest_dir, dry_run=resolved["dry_run"])
    logger.info(
        "🧵 Combined %d file%s into %s",
        len(outputs),
        plural(outputs),
        dest_dir,
    )

    if failures:
        xmsg = (
            f"{len(failures)} of {len(catalog.contract_files)} "
            f"file{plural(catalog.contract_files)} could not be combined: "
            + ", ".join(failures)
        )
        raise BuildError(xmsg)
    return outputs


def run_flatten(resolved: RootConfigResolved) -> dict[str, str]:
    """Write every catalog file, imports rewritten, into one directory."""
    logger = getAppLogger()
    catalog = _load(resolved)
    dest_dir = resolved["dest_dir"]["path"]

    outputs = flatten_catalog(catalog.all_files)
    write_outputs(outputs, dest_dir, dry_run=resolved["dry_run"])
    logger.info(
        "🧵 Flattened %d file%s into %s",
        len(outputs),
        plural(outputs),
        dest_dir,
    )
    return outputs


def run_build(resolved: RootConfigResolved) -> dict[str, str]:
    """Execute the resolved command."""
    logger = getAppLogger()
    command = resolved["command"]
    if resolved["dry_run"]:
        logger.info("🧪 Dry-run mode: no files will be written.")

    if command == "combine":
        outputs = run_combine(resolved)
    elif command == "flatten":
        outputs = run_flatten(resolved)
    else:
        xmsg = f"Unknown command: {command!r}"
        raise ValueError(xmsg)

    logger.info("✅ %s completed → %s", command.capitalize(), resolved["dest_dir"]["path"])
    return outputs

# src/soljitsu/catalog.py
"""Load contract files and their registry dependencies into file records.

Local files come from a source directory. Imports that are not relative
(``zeppelin-solidity/contracts/Ownable.sol``) are looked up in the
registry directories (``node_modules`` for npm, ``installed_contracts`` for
EthPM), and the imports of those files are followed until nothing new turns
up.
"""

import json
import posixpath
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from apathetic_utils import fnmatchcase_portable, plural

from .constants import (
    IMPORT_AS_PATTERN,
    IMPORT_LINE_PATTERN,
    IMPORT_TARGET_PATTERN,
    REGISTRY_MANIFESTS,
    SOURCE_SUFFIX,
    UNKNOWN_VERSION,
)
from .errors import RegistryFileNotFoundError
from .logs import getAppLogger
from .models import DependencyEdge, FileRecord, RegistryKind


_RELATIVE_PREFIX = re.compile(r"^(\.{1,2}/)+")


@dataclass(frozen=True)
class RegistrySource:
    """A directory holding installed registry packages."""

    kind: RegistryKind
    root: Path


@dataclass
class Catalog:
    contract_files: list[FileRecord] = field(default_factory=list)
    all_files: list[FileRecord] = field(default_factory=list)


# --------------------------------------------------------------------------- #
# Path and import helpers
# --------------------------------------------------------------------------- #


def name_from_path(file_path: str) -> str:
    """``zeppelin-solidity/contracts/Ownable.sol`` -> ``zeppelin-solidity.contracts.Ownable.sol``."""
    return file_path.replace("/", ".")


def base_module_from_path(file_path: str) -> str:
    """Registry package a path belongs to (``@scope/pkg`` kept whole)."""
    parts = file_path.split("/")
    if parts[0].startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


def remove_relative_dots(file_path: str) -> str:
    """``../other/ContractY.sol`` -> ``other/ContractY.sol``."""
    return _RELATIVE_PREFIX.sub("", file_path)


def is_relative_target(target: str) -> bool:
    return target.startswith(("./", "../"))


def extract_import_target(import_line: str) -> str:
    """Return the path an import line points at.

    ``import './nested/ContractX.sol';`` -> ``./nested/ContractX.sol``
    """
    match = IMPORT_TARGET_PATTERN.search(import_line)
    if match:
        return match.group("target")
    # unquoted, take whatever follows the keyword
    return re.sub(r"['\";]", "", import_line.replace("import ", "", 1)).strip()


def _contains_import_as(import_line: str) -> bool:
    without_target = IMPORT_TARGET_PATTERN.sub("", import_line)
    # only the statement itself, not a trailing comment
    statement = without_target.split(";", 1)[0].split("//", 1)[0]
    return bool(IMPORT_AS_PATTERN.search(statement))


def resolve_import_path(target: str, file_path: str) -> str:
    """Catalog key of ``target`` as imported from the file at ``file_path``.

    Relative targets are joined onto the importing file's directory;
    anything else is already a registry path.
    """
    base_dir = posixpath.dirname(file_path)
    if target.startswith(".") and base_dir:
        resolved = posixpath.normpath(posixpath.join(base_dir, target))
    else:
        resolved = target
    return remove_relative_dots(resolved)


def extract_imports(content: str, file_path: str) -> tuple[DependencyEdge, ...]:
    """Dependency edges for every import line of a file, in file order."""
    edges: list[DependencyEdge] = []
    for line in content.split("\n"):
        if not IMPORT_LINE_PATTERN.match(line):
            continue
        target = extract_import_target(line)
        edges.append(
            DependencyEdge(
                target=target,
                path=resolve_import_path(target, file_path),
                contains_import_as=_contains_import_as(line),
            )
        )
    return tuple(edges)


# --------------------------------------------------------------------------- #
# Local files
# --------------------------------------------------------------------------- #


def is_source_file(path: Path) -> bool:
    return (
        path.is_file()
        and not path.name.startswith(".")
        and path.suffix == SOURCE_SUFFIX
    )


def make_local_record(src_dir: Path, rel_path: str) -> FileRecord:
    content = (src_dir / rel_path).read_text(encoding="utf-8")
    return FileRecord(
        path=rel_path,
        name=name_from_path(rel_path),
        content=content,
        dependencies=extract_imports(content, rel_path),
    )


def collect_contract_files(
    src_dir: Path,
    exclude: Sequence[str] = (),
) -> list[FileRecord]:
    """Every contract file under ``src_dir``.

    Within a directory, files come first (sorted by name), then each
    subdirectory in name order.

    Args:
        src_dir: Source directory to walk
        exclude: Glob patterns matched against paths relative to ``src_dir``
    """
    logger = getAppLogger()
    if not src_dir.is_dir():
        xmsg = f"Source directory not found: {src_dir}"
        raise FileNotFoundError(xmsg)

    records: list[FileRecord] = []
    pending: list[Path] = [src_dir]
    while pending:
        current = pending.pop()
        entries = sorted(current.iterdir(), key=lambda p: p.name)

        for entry in entries:
            if not is_source_file(entry):
                continue
            rel_path = entry.relative_to(src_dir).as_posix()
            if any(fnmatchcase_portable(rel_path, pat) for pat in exclude):
                logger.trace("[COLLECT] Excluded %s", rel_path)
                continue
            records.append(make_local_record(src_dir, rel_path))

        # reversed so the first subdirectory is walked next
        pending.extend(reversed([e for e in entries if e.is_dir()]))

    logger.debug(
        "[COLLECT] Found %d contract file%s in %s",
        len(records),
        plural(records),
        src_dir,
    )
    return records


# --------------------------------------------------------------------------- #
# Registry files
# --------------------------------------------------------------------------- #


def registry_import_paths(files: Iterable[FileRecord]) -> list[str]:
    """Distinct non-relative import targets of the given files, in order."""
    paths: list[str] = []
    for record in files:
        for dep in record.dependencies:
            if not is_relative_target(dep.target) and dep.target not in paths:
                paths.append(dep.target)
    return paths


def read_module_version(source: RegistrySource, module: str) -> str:
    """Version of an installed package, from its package.json / ethpm.json."""
    logger = getAppLogger()
    manifest = source.root / module / REGISTRY_MANIFESTS[source.kind]
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("No %s found for %s", manifest.name, module)
        return UNKNOWN_VERSION
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s: %s", manifest, e)
        return UNKNOWN_VERSION

    version = data.get("version") if isinstance(data, dict) else None
    if not isinstance(version, str):
        logger.warning("%s has no version field", manifest)
        return UNKNOWN_VERSION
    return version


class RegistryLoader:
    """Loads registry files, caching package versions per registry."""

    def __init__(self, registries: Sequence[RegistrySource]) -> None:
        self.registries = list(registries)
        self._versions: dict[tuple[RegistryKind, str], str] = {}

    def find_source(self, dep_path: str) -> RegistrySource | None:
        """First registry whose module directory holds ``dep_path``."""
        for source in self.registries:
            if (source.root / dep_path).is_file():
                return source
        return None

    def module_version(self, source: RegistrySource, module: str) -> str:
        key = (source.kind, module)
        if key not in self._versions:
            self._versions[key] = read_module_version(source, module)
        return self._versions[key]

    def load(self, dep_paths: Iterable[str]) -> list[FileRecord]:
        """File records for the given registry paths."""
        logger = getAppLogger()
        records: list[FileRecord] = []
        for dep_path in dep_paths:
            source = self.find_source(dep_path)
            if source is None:
                raise RegistryFileNotFoundError(dep_path)

            content = (source.root / dep_path).read_text(encoding="utf-8")
            module = base_module_from_path(dep_path)
            records.append(
                FileRecord(
                    path=dep_path,
                    name=name_from_path(dep_path),
                    content=content,
                    dependencies=extract_imports(content, dep_path),
                    registry=source.kind,
                    module=module,
                    module_version=self.module_version(source, module),
                )
            )
            logger.trace("[REGISTRY] Loaded %s from %s", dep_path, source.kind)
        return records

    def retrieve_nested(
        self,
        files: Sequence[FileRecord],
        known_paths: Iterable[str],
    ) -> list[FileRecord]:
        """Load the imports of ``files`` (and theirs) not already in ``known_paths``."""
        known = list(known_paths)
        nested: list[FileRecord] = []
        frontier = list(files)
        while frontier:
            new_paths: list[str] = []
            for record in frontier:
                for dep_path in record.dependency_paths:
                    if dep_path not in known and dep_path not in new_paths:
                        new_paths.append(dep_path)
            if not new_paths:
                break
            known.extend(new_paths)
            frontier = self.load(new_paths)
            nested.extend(frontier)
        return nested


def load_registry_files(
    dep_paths: Iterable[str],
    registries: Sequence[RegistrySource],
) -> list[FileRecord]:
    return RegistryLoader(registries).load(dep_paths)


def retrieve_nested_deps(
    files: Sequence[FileRecord],
    known_paths: Iterable[str],
    registries: Sequence[RegistrySource],
) -> list[FileRecord]:
    return RegistryLoader(registries).retrieve_nested(files, known_paths)


# --------------------------------------------------------------------------- #
# Catalog
# --------------------------------------------------------------------------- #


def load_catalog(
    src_dir: Path,
    registries: Sequence[RegistrySource] = (),
    exclude: Sequence[str] = (),
) -> Catalog:
    """Load local contract files and every registry file they need.

    Raises:
        ValueError: If contracts import registry packages but no registry
            directory is configured
        RegistryFileNotFoundError: If an imported registry file is missing
    """
    logger = getAppLogger()
    contract_files = collect_contract_files(src_dir, exclude)
    dep_paths = registry_import_paths(contract_files)

    if not dep_paths:
        return Catalog(contract_files=contract_files, all_files=list(contract_files))

    if not registries:
        xmsg = (
            "Found dependencies in contract files, but no dependency folder "
            "(--dep-dir / --ethpm-dir) specified."
        )
        raise ValueError(xmsg)

    loader = RegistryLoader(registries)
    dep_files = loader.load(dep_paths)
    known = [record.path for record in contract_files] + dep_paths
    nested_files = loader.retrieve_nested(dep_files, known)

    all_files = [*contract_files, *dep_files, *nested_files]
    logger.debug(
        "[CATALOG] %d local, %d registry, %d nested file(s)",
        len(contract_files),
        len(dep_files),
        len(nested_files),
    )
    return Catalog(contract_files=contract_files, all_files=all_files)

# tests/utils/contracts.py
"""Helpers for building contract files and records in tests."""

import json
from pathlib import Path

import soljitsu.catalog as mod_catalog
import soljitsu.models as mod_models

from .constants import DEFAULT_PRAGMA


def make_contract_source(
    contract: str,
    *imports: str,
    pragma: str | None = DEFAULT_PRAGMA,
) -> str:
    """Solidity source with a pragma, one import line per target and a body."""
    lines: list[str] = []
    if pragma is not None:
        lines.extend([pragma, ""])
    lines.extend(f"import '{target}';" for target in imports)
    if imports:
        lines.append("")
    lines.append(f"contract {contract} {{}}")
    return "\n".join(lines) + "\n"


def make_record(
    path: str,
    *imports: str,
    content: str | None = None,
    module: str | None = None,
    module_version: str | None = None,
) -> mod_models.FileRecord:
    """FileRecord for ``path``; the contract is named after the file stem."""
    if content is None:
        stem = path.rsplit("/", 1)[-1].removesuffix(".sol")
        content = make_contract_source(stem, *imports)
    return mod_models.FileRecord(
        path=path,
        name=mod_catalog.name_from_path(path),
        content=content,
        dependencies=mod_catalog.extract_imports(content, path),
        registry="npm" if module else "local",
        module=module,
        module_version=module_version,
    )


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write relative path -> content pairs under ``root``."""
    for rel_path, content in files.items():
        target = root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


def write_package(
    registry_root: Path,
    module: str,
    files: dict[str, str],
    *,
    version: str | None = "0.1.2",
    manifest: str = "package.json",
) -> Path:
    """Write an installed registry package (manifest + files)."""
    module_dir = registry_root / module
    write_tree(module_dir, files)
    if version is not None:
        (module_dir / manifest).write_text(
            json.dumps({"name": module, "version": version}), encoding="utf-8"
        )
    return module_dir


def paths_of(records: list[mod_models.FileRecord]) -> list[str]:
    return [record.path for record in records]

# src/soljitsu/ordering.py
"""Dependency ordering for combining contract files.

Given a root file and the catalog of every known file, this module collects
the files the root depends on (directly or through other files), removes
duplicates, and orders the result so that each file comes after everything
it imports. The order is what the combined output is concatenated in, so it
has to be deterministic for a given catalog.
"""

from collections.abc import Iterable, Sequence

from .errors import (
    CircularDependencyError,
    ImportAliasError,
    UnresolvedDependencyError,
)
from .logs import getAppLogger
from .models import FileRecord, index_catalog


# --------------------------------------------------------------------------- #
# Closure
# --------------------------------------------------------------------------- #


def resolve_closure(
    root: FileRecord,
    catalog: Sequence[FileRecord] | dict[str, FileRecord],
) -> list[FileRecord]:
    """Return the root followed by every file it transitively depends on.

    The result is a depth-first preorder walk: each file is followed by the
    closure of its first import, then the closure of its second import, and
    so on. Files reached over several paths appear several times; use
    dedup_files() to collapse them.

    Args:
        root: File to start from
        catalog: Every known file, or an index built with index_catalog()

    Returns:
        List of file records, root first

    Raises:
        UnresolvedDependencyError: If an import points at no catalog entry
        CircularDependencyError: If a file (indirectly) imports itself
    """
    logger = getAppLogger()
    index = catalog if isinstance(catalog, dict) else index_catalog(catalog)

    closure: list[FileRecord] = []
    # each entry carries the chain of paths leading to it, for cycle detection
    stack: list[tuple[FileRecord, tuple[str, ...]]] = [(root, ())]
    while stack:
        record, ancestors = stack.pop()
        closure.append(record)
        chain = (*ancestors, record.path)

        children: list[tuple[FileRecord, tuple[str, ...]]] = []
        for dep in record.dependencies:
            if dep.path in chain:
                raise CircularDependencyError(record.path, dep.path)
            dep_record = index.get(dep.path)
            if dep_record is None:
                raise UnresolvedDependencyError(record.path, dep.path)
            children.append((dep_record, chain))

        # reversed so the first import is popped (and emitted) first
        stack.extend(reversed(children))

    logger.trace(
        "[CLOSURE] %s -> %d file(s) before dedup", root.path, len(closure)
    )
    return closure


def resolve_unique_closure(
    root: FileRecord,
    catalog: Sequence[FileRecord] | dict[str, FileRecord],
) -> list[FileRecord]:
    """Same as ``dedup_files(resolve_closure(root, catalog))``.

    A file already emitted is not walked again, so shared dependencies cost
    one visit instead of one per path leading to them.
    """
    logger = getAppLogger()
    index = catalog if isinstance(catalog, dict) else index_catalog(catalog)

    closure: list[FileRecord] = []
    visited: set[str] = set()
    stack: list[tuple[FileRecord, tuple[str, ...]]] = [(root, ())]
    while stack:
        record, ancestors = stack.pop()
        if record.path in visited:
            continue
        visited.add(record.path)
        closure.append(record)
        chain = (*ancestors, record.path)

        children: list[tuple[FileRecord, tuple[str, ...]]] = []
        for dep in record.dependencies:
            # chain holds exactly the files still being walked
            if dep.path in chain:
                raise CircularDependencyError(record.path, dep.path)
            dep_record = index.get(dep.path)
            if dep_record is None:
                raise UnresolvedDependencyError(record.path, dep.path)
            children.append((dep_record, chain))

        stack.extend(reversed(children))

    logger.trace("[CLOSURE] %s -> %d unique file(s)", root.path, len(closure))
    return closure


def dedup_files(files: Iterable[FileRecord]) -> list[FileRecord]:
    """Keep the first occurrence of every path, preserving order."""
    seen: set[str] = set()
    unique: list[FileRecord] = []
    for record in files:
        if record.path in seen:
            continue
        seen.add(record.path)
        unique.append(record)
    return unique


# --------------------------------------------------------------------------- #
# Sequencing
# --------------------------------------------------------------------------- #


def find_lowest_requirer_pos(ordered: Sequence[FileRecord], target_path: str) -> int:
    """Index of the first file in ``ordered`` that imports ``target_path``."""
    for idx, record in enumerate(ordered):
        if record.depends_on(target_path):
            return idx
    return -1


def find_highest_dependency_pos(
    ordered: Sequence[FileRecord], dep_paths: Iterable[str]
) -> int:
    """Index of the last file in ``ordered`` whose path is in ``dep_paths``."""
    wanted = set(dep_paths)
    highest = -1
    for idx, record in enumerate(ordered):
        if record.path in wanted:
            highest = idx
    return highest


def sort_by_dependency(files: Iterable[FileRecord]) -> list[FileRecord]:
    """Order deduplicated files so dependencies come before their dependents.

    Files are inserted one at a time into a growing list:

    - a file nothing placed so far imports, and that imports nothing, goes
      to the front;
    - a file that some placed file imports goes right before the first such
      file, whatever its own imports are;
    - otherwise a file with imports goes right after the last of its placed
      imports, or at the end when none of them is placed yet.

    The result depends on the input order only where the graph leaves the
    order open, which keeps combined output stable between runs.
    """
    logger = getAppLogger()
    ordered: list[FileRecord] = []

    for record in files:
        lowest_req_pos = find_lowest_requirer_pos(ordered, record.path)

        if not record.dependency_paths:
            pos = 0 if lowest_req_pos == -1 else lowest_req_pos
        elif lowest_req_pos != -1:
            pos = lowest_req_pos
        else:
            highest_dep_pos = find_highest_dependency_pos(
                ordered, record.dependency_paths
            )
            pos = len(ordered) if highest_dep_pos == -1 else highest_dep_pos + 1

        logger.trace("[SORT] insert %s at %d/%d", record.path, pos, len(ordered))
        ordered.insert(pos, record)

    return ordered


def find_order_violations(ordered: Sequence[FileRecord]) -> list[tuple[str, str]]:
    """Return (file, import) pairs where the import is placed after the file."""
    position = {record.path: idx for idx, record in enumerate(ordered)}
    violations: list[tuple[str, str]] = []
    for idx, record in enumerate(ordered):
        for dep_path in record.dependency_paths:
            if position.get(dep_path, -1) > idx:
                violations.append((record.path, dep_path))
    return violations


def order_closure(
    root: FileRecord,
    catalog: Sequence[FileRecord] | dict[str, FileRecord],
) -> list[FileRecord]:
    """Collect, deduplicate and order everything ``root`` needs, root included."""
    logger = getAppLogger()
    ordered = sort_by_dependency(resolve_unique_closure(root, catalog))

    violations = find_order_violations(ordered)
    if violations:
        logger.warning("Possible file misordering detected for %s:", root.path)
        for path, dep_path in violations:
            logger.warning("  - %s appears before its import %s", path, dep_path)

    logger.debug(
        "[ORDER] %s: %s", root.path, ", ".join(record.path for record in ordered)
    )
    return ordered


# --------------------------------------------------------------------------- #
# Preconditions
# --------------------------------------------------------------------------- #


def ensure_no_import_as(files: Iterable[FileRecord]) -> None:
    """Fail if any file uses an aliasing import, which combining cannot keep."""
    offenders = [
        (record.path, dep.target)
        for record in files
        for dep in record.dependencies
        if dep.contains_import_as
    ]
    if offenders:
        raise ImportAliasError(offenders)

# src/soljitsu/flatten.py
"""Rewrite files so they can all live in one directory."""

from collections.abc import Iterable, Sequence

from .assemble import module_version_comments
from .catalog import extract_import_target
from .constants import IMPORT_LINE_PATTERN, IMPORT_TARGET_PATTERN
from .errors import NameCollisionError, UnresolvedDependencyError
from .logs import getAppLogger
from .models import FileRecord, index_catalog


def ensure_unique_names(files: Iterable[FileRecord]) -> None:
    """Fail if two different paths would be written under the same name."""
    owners: dict[str, str] = {}
    for record in files:
        owner = owners.setdefault(record.name, record.path)
        if owner != record.path:
            raise NameCollisionError(record.name, [owner, record.path])


def insert_module_version(record: FileRecord) -> str:
    """Put the registry module version comment right below the first line.

    Local files get an empty comment block, i.e. just the blank lines.
    """
    first_line, _, rest = record.content.partition("\n")
    return "\n".join(
        [
            first_line,
            "",
            module_version_comments([record]),
            rest,
        ]
    )


def rewrite_imports(
    record: FileRecord,
    index: dict[str, FileRecord],
    content: str | None = None,
) -> str:
    """Point every import of ``record`` at its flattened sibling.

    ``import "../access/Ownable.sol";`` becomes ``import './access.Ownable.sol';``
    (single quotes always). Anything around the quoted path, such as an alias
    or a ``from`` clause, is kept.

    Args:
        record: File whose imports are rewritten
        index: Catalog index (see index_catalog())
        content: Text to rewrite, defaults to ``record.content``
    """
    text = record.content if content is None else content
    targets = {dep.target: dep.path for dep in record.dependencies}

    lines: list[str] = []
    for line in text.split("\n"):
        if not IMPORT_LINE_PATTERN.match(line):
            lines.append(line)
            continue

        import_target = extract_import_target(line)
        dep_path = targets.get(import_target)
        dep_record = index.get(dep_path) if dep_path is not None else None
        if dep_record is None:
            raise UnresolvedDependencyError(record.path, dep_path or import_target)

        replacement = f"'./{dep_record.name}'"
        lines.append(
            IMPORT_TARGET_PATTERN.sub(lambda _m: replacement, line, count=1)
        )

    return "\n".join(lines)


def flatten_catalog(catalog: Sequence[FileRecord]) -> dict[str, str]:
    """Return output name -> flattened content for every file in the catalog."""
    logger = getAppLogger()
    ensure_unique_names(catalog)
    index = index_catalog(catalog)

    flattened: dict[str, str] = {}
    for record in catalog:
        content = rewrite_imports(record, index, insert_module_version(record))
        flattened[record.name] = content
        logger.trace("[FLATTEN] %s -> %s", record.path, record.name)
    return flattened

# src/soljitsu/assemble.py
"""Turn an ordered list of contract files into one combined source text."""

from collections.abc import Iterable, Sequence

from .constants import COMBINED_SUFFIX, IMPORT_LINE_PATTERN, PRAGMA_PATTERN, SOURCE_SUFFIX
from .logs import getAppLogger
from .models import FileRecord
from .ordering import order_closure


def _version_key(version: str) -> tuple[int, ...]:
    return tuple(int(part) for part in version.split("."))


def find_lowest_pragma(files: Iterable[FileRecord]) -> str | None:
    """Return the lowest version found in the files' first-line pragma.

    Files without a recognized pragma on their first line are skipped.
    Versions are compared component by component, so 0.4.9 < 0.4.19.

    Returns:
        The version string (e.g. "0.4.19"), or None if no file has a pragma
    """
    lowest: str | None = None
    for record in files:
        first_line = record.content.split("\n", 1)[0]
        match = PRAGMA_PATTERN.match(first_line)
        if not match:
            continue
        version = match.group(1)
        if lowest is None or _version_key(version) < _version_key(lowest):
            lowest = version
    return lowest


def render_pragma(version: str) -> str:
    return f"pragma solidity ^{version};"


def module_version_comments(files: Iterable[FileRecord]) -> str:
    """One ``// module: version`` line per registry module used by the files."""
    lines: list[str] = []
    for record in files:
        if not record.module:
            continue
        line = f"// {record.module}: {record.module_version}"
        if line not in lines:
            lines.append(line)
    return "\n".join(lines)


def strip_directives(content: str) -> str:
    """Remove pragma and import lines, then trim surrounding whitespace."""
    kept = [
        line
        for line in content.split("\n")
        if not PRAGMA_PATTERN.match(line) and not IMPORT_LINE_PATTERN.match(line)
    ]
    return "\n".join(kept).strip()


def combine_files(files: Sequence[FileRecord]) -> str:
    """Concatenate already ordered files into one source text.

    Layout, with one blank line between parts:
    the lowest common pragma, the registry module version comments,
    then each file's body without its pragma and import lines.
    """
    logger = getAppLogger()
    parts: list[str] = []

    lowest = find_lowest_pragma(files)
    if lowest is None:
        logger.warning(
            "No 'pragma solidity' directive found in %s; combined output has none.",
            ", ".join(record.path for record in files) or "(no files)",
        )
    else:
        parts.append(render_pragma(lowest))

    parts.append(module_version_comments(files))
    parts.extend(strip_directives(record.content) for record in files)

    return "\n\n".join(parts)


def combine_closure(
    root: FileRecord,
    catalog: Sequence[FileRecord] | dict[str, FileRecord],
) -> str:
    """Combined source of ``root`` and everything it depends on."""
    return combine_files(order_closure(root, catalog))


def combined_name(name: str) -> str:
    """``Token.sol`` -> ``Token.combined.sol``."""
    if name.endswith(SOURCE_SUFFIX):
        return name[: -len(SOURCE_SUFFIX)] + COMBINED_SUFFIX
    return name + COMBINED_SUFFIX

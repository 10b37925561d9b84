# src/soljitsu/models.py
"""Records for source files and the import edges between them."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal


RegistryKind = Literal["local", "npm", "ethpm"]


@dataclass(frozen=True)
class DependencyEdge:
    """One import line of a file.

    ``target`` is the import string as written, ``path`` the catalog key it
    resolves to.
    """

    target: str
    path: str
    contains_import_as: bool = False


@dataclass
class FileRecord:
    """A source file, either local or from a dependency registry."""

    path: str
    name: str
    content: str
    dependencies: tuple[DependencyEdge, ...] = ()
    registry: RegistryKind = "local"
    module: str | None = None
    module_version: str | None = None
    # cached on first access
    _dep_paths: tuple[str, ...] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def dependency_paths(self) -> tuple[str, ...]:
        if self._dep_paths is None:
            self._dep_paths = tuple(dep.path for dep in self.dependencies)
        return self._dep_paths

    @property
    def is_local(self) -> bool:
        return self.registry == "local"

    def depends_on(self, path: str) -> bool:
        return path in self.dependency_paths


def index_catalog(catalog: Iterable[FileRecord]) -> dict[str, FileRecord]:
    """Map each path to the first record carrying it."""
    index: dict[str, FileRecord] = {}
    for record in catalog:
        index.setdefault(record.path, record)
    return index

# src/soljitsu/errors.py
"""Error types raised while loading, ordering and writing contract files.

All of them derive from RuntimeError so the CLI treats them as controlled
termination and reports them without a traceback.
"""


class SoljitsuError(RuntimeError):
    code: int = 1


class UnresolvedDependencyError(SoljitsuError):
    def __init__(self, importer: str, dep_path: str) -> None:
        self.importer = importer
        self.dep_path = dep_path
        super().__init__(f"{importer} imports {dep_path}, which could not be found")


class CircularDependencyError(SoljitsuError):
    def __init__(self, first: str, second: str) -> None:
        self.first = first
        self.second = second
        super().__init__(f"Circular dependency between {first} and {second}")


class ImportAliasError(SoljitsuError):
    def __init__(self, offenders: list[tuple[str, str]]) -> None:
        self.offenders = offenders
        listing = "\n".join(f"   {path}: {target}" for path, target in offenders)
        super().__init__(
            "Files containing imports using 'as' cannot be combined, "
            'e.g. import { X as Y } from "./Contract.sol"\n' + listing
        )


class NameCollisionError(SoljitsuError):
    def __init__(self, name: str, paths: list[str]) -> None:
        self.name = name
        self.paths = paths
        super().__init__(
            f"Output name {name!r} is shared by several files: {', '.join(paths)}"
        )


class RegistryFileNotFoundError(SoljitsuError):
    def __init__(self, dep_path: str) -> None:
        self.dep_path = dep_path
        super().__init__(
            f"Could not find file {dep_path}, did you forget to install it?"
        )


class BuildError(SoljitsuError):
    pass

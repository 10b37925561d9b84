# src/soljitsu/__init__.py

"""Soljitsu: combine and flatten Solidity contract files.

Full developer API
==================
This package re-exports all non-private symbols from its submodules,
making it suitable for programmatic use or custom integrations.
Anything prefixed with "_" is considered internal and may change.

Highlights:
    - main()              → CLI entrypoint
    - run_build()         → Execute a resolved combine / flatten job
    - load_catalog()      → Load contract files and their registry dependencies
    - order_closure()     → Dependency-ordered files a contract needs
    - combine_closure()   → One combined source text for a contract
    - flatten_catalog()   → Every file rewritten for a single directory
"""

from .assemble import (
    combine_closure,
    combine_files,
    combined_name,
    find_lowest_pragma,
    module_version_comments,
    render_pragma,
    strip_directives,
)
from .build import run_build, run_combine, run_flatten, write_outputs
from .catalog import (
    Catalog,
    RegistryLoader,
    RegistrySource,
    base_module_from_path,
    collect_contract_files,
    extract_import_target,
    extract_imports,
    load_catalog,
    load_registry_files,
    name_from_path,
    registry_import_paths,
    remove_relative_dots,
    retrieve_nested_deps,
)
from .cli import main
from .config import (
    PathResolved,
    RegistryResolved,
    RootConfig,
    RootConfigResolved,
    find_config,
    load_and_validate_config,
    load_config,
    resolve_config,
    validate_config,
)
from .constants import (
    COMBINED_SUFFIX,
    COMMANDS,
    DEFAULT_ENV_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STRICT_CONFIG,
    SOURCE_SUFFIX,
)
from .errors import (
    BuildError,
    CircularDependencyError,
    ImportAliasError,
    NameCollisionError,
    RegistryFileNotFoundError,
    SoljitsuError,
    UnresolvedDependencyError,
)
from .flatten import (
    ensure_unique_names,
    flatten_catalog,
    insert_module_version,
    rewrite_imports,
)
from .logs import getAppLogger
from .meta import Metadata, get_metadata
from .models import DependencyEdge, FileRecord, RegistryKind, index_catalog
from .ordering import (
    dedup_files,
    ensure_no_import_as,
    find_highest_dependency_pos,
    find_lowest_requirer_pos,
    find_order_violations,
    order_closure,
    resolve_closure,
    resolve_unique_closure,
    sort_by_dependency,
)


__all__ = [  # noqa: RUF022
    # assemble
    "combine_closure",
    "combine_files",
    "combined_name",
    "find_lowest_pragma",
    "module_version_comments",
    "render_pragma",
    "strip_directives",
    # build
    "run_build",
    "run_combine",
    "run_flatten",
    "write_outputs",
    # catalog
    "Catalog",
    "RegistryLoader",
    "RegistrySource",
    "base_module_from_path",
    "collect_contract_files",
    "extract_import_target",
    "extract_imports",
    "load_catalog",
    "load_registry_files",
    "name_from_path",
    "registry_import_paths",
    "remove_relative_dots",
    "retrieve_nested_deps",
    # cli
    "main",
    # config
    "PathResolved",
    "RegistryResolved",
    "RootConfig",
    "RootConfigResolved",
    "find_config",
    "load_and_validate_config",
    "load_config",
    "resolve_config",
    "validate_config",
    # constants
    "COMBINED_SUFFIX",
    "COMMANDS",
    "DEFAULT_ENV_LOG_LEVEL",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_STRICT_CONFIG",
    "SOURCE_SUFFIX",
    # errors
    "BuildError",
    "CircularDependencyError",
    "ImportAliasError",
    "NameCollisionError",
    "RegistryFileNotFoundError",
    "SoljitsuError",
    "UnresolvedDependencyError",
    # flatten
    "ensure_unique_names",
    "flatten_catalog",
    "insert_module_version",
    "rewrite_imports",
    # logs
    "getAppLogger",
    # meta
    "Metadata",
    "get_metadata",
    # models
    "DependencyEdge",
    "FileRecord",
    "RegistryKind",
    "index_catalog",
    # ordering
    "dedup_files",
    "ensure_no_import_as",
    "find_highest_dependency_pos",
    "find_lowest_requirer_pos",
    "find_order_violations",
    "order_closure",
    "resolve_closure",
    "resolve_unique_closure",
    "sort_by_dependency",
]

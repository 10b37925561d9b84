# src/soljitsu/config/__init__.py

"""Configuration handling for soljitsu.

This module provides configuration loading, validation, and resolution.
"""

from .config_loader import (
    find_config,
    load_and_validate_config,
    load_config,
    validate_config,
)
from .config_resolve import make_pathresolved, resolve_config
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


__all__ = [  # noqa: RUF022
    # config_loader
    "find_config",
    "load_and_validate_config",
    "load_config",
    "validate_config",
    # config_resolve
    "make_pathresolved",
    "resolve_config",
    # config_types
    "CommandName",
    "MetaConfigResolved",
    "OriginType",
    "PathResolved",
    "RegistryName",
    "RegistryResolved",
    "RootConfig",
    "RootConfigResolved",
]

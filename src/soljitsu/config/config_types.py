# src/soljitsu/config/config_types.py


from pathlib import Path
from typing import Literal, TypedDict

from typing_extensions import NotRequired


OriginType = Literal["cli", "config", "default", "truffle", "test"]
CommandName = Literal["combine", "flatten"]
RegistryName = Literal["npm", "ethpm"]


class RootConfig(TypedDict, total=False):
    # sources
    src_dir: str
    truffle: str  # truffle project root, implies src/dep/ethpm dirs
    dep_dir: str  # node_modules
    ethpm_dir: str  # installed_contracts
    exclude: list[str]

    # output
    dest_dir: str

    # runtime behavior
    log_level: str
    strict_config: bool


class PathResolved(TypedDict):
    path: Path  # absolute
    # meta only
    origin: OriginType  # provenance


class RegistryResolved(PathResolved):
    kind: RegistryName


class MetaConfigResolved(TypedDict):
    # sources of parameters
    cli_root: Path
    config_root: Path
    config_path: NotRequired[Path]


class RootConfigResolved(TypedDict):
    command: CommandName
    src_dir: PathResolved
    dest_dir: PathResolved
    registries: list[RegistryResolved]
    exclude: list[str]

    log_level: str
    strict_config: bool

    # runtime flag (CLI only, not persisted in configs)
    dry_run: bool

    # global provenance (optional, for audit/debug)
    __meta__: MetaConfigResolved

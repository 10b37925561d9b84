# src/soljitsu/constants.py
"""Central constants used across the project."""

import re


COMMANDS = ("combine", "flatten")

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"
DEFAULT_STRICT_CONFIG: bool = True
DEFAULT_DRY_RUN: bool = False

# --- source files ---
SOURCE_SUFFIX: str = ".sol"
COMBINED_SUFFIX: str = ".combined.sol"

# --- truffle project layout ---
TRUFFLE_CONTRACTS_DIR: str = "contracts"
TRUFFLE_NPM_DIR: str = "node_modules"
TRUFFLE_ETHPM_DIR: str = "installed_contracts"

# --- registry manifests (kind -> manifest file holding "version") ---
REGISTRY_MANIFESTS: dict[str, str] = {
    "npm": "package.json",
    "ethpm": "ethpm.json",
}
UNKNOWN_VERSION: str = "unknown"

# --- line patterns ---
# first-line version directive, e.g. "pragma solidity ^0.4.19;"
PRAGMA_PATTERN = re.compile(r"^pragma solidity \^?(\d{1,2}\.\d{1,2}\.\d{1,3})")
IMPORT_LINE_PATTERN = re.compile(r"^import")
# quoted import target, single or double quotes
IMPORT_TARGET_PATTERN = re.compile(r"""(["'])(?P<target>[^"']*)\1""")
# aliasing forms: import "x" as y; import {A as B} from "x"; import * as X from "x";
IMPORT_AS_PATTERN = re.compile(r"\bas\b")

# tests/utils/__init__.py

from .buildconfig import make_args, make_registry, make_resolved, write_config_file
from .constants import DEFAULT_PRAGMA, DEFAULT_TEST_LOG_LEVEL
from .contracts import (
    make_contract_source,
    make_record,
    paths_of,
    write_package,
    write_tree,
)
from .patch_everywhere import patch_everywhere
from .trace import TEST_TRACE, make_test_trace


__all__ = [  # noqa: RUF022
    # buildconfig
    "make_args",
    "make_registry",
    "make_resolved",
    "write_config_file",
    # constants
    "DEFAULT_PRAGMA",
    "DEFAULT_TEST_LOG_LEVEL",
    # contracts
    "make_contract_source",
    "make_record",
    "paths_of",
    "write_package",
    "write_tree",
    # patch_everywhere
    "patch_everywhere",
    # trace
    "TEST_TRACE",
    "make_test_trace",
]

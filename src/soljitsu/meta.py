# src/soljitsu/meta.py
"""Program identity and metadata lookup."""

from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version


PROGRAM_PACKAGE = "soljitsu"
PROGRAM_SCRIPT = "soljitsu"
PROGRAM_DISPLAY = "Soljitsu"
PROGRAM_ENV = "SOLJITSU"
PROGRAM_CONFIG = "soljitsu"


@dataclass(frozen=True)
class Metadata:
    version: str
    commit: str


def get_metadata() -> Metadata:
    """Return installed version info, or "unknown" when running from source."""
    try:
        pkg_version = version(PROGRAM_PACKAGE)
    except PackageNotFoundError:
        pkg_version = "unknown"
    return Metadata(version=pkg_version, commit="unknown (local build)")

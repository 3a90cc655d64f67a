"""Version lookup for ditasmith."""

from __future__ import annotations

from importlib import metadata


DISTRIBUTION = "ditasmith"
FALLBACK_VERSION = "0.1.0"


def get_version() -> str:
    """Return the version of the installed distribution.

    Source checkouts that were never installed report ``FALLBACK_VERSION``.
    """
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return FALLBACK_VERSION


__all__ = ["DISTRIBUTION", "FALLBACK_VERSION", "get_version"]

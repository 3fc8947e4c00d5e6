"""piggybank.version: the installed distribution version.

``PIGGYBANK_VERSION`` overrides the value; without an installed distribution
(running from a source checkout) BASE_VERSION is reported.
"""

from __future__ import annotations

import os
from importlib import metadata as importlib_metadata

# Bump when the state byte layout or the parameter wire format changes.
BASE_VERSION = "0.1.0"

DIST_NAME = "piggybank"


def compute_version() -> str:
    override = os.getenv("PIGGYBANK_VERSION")
    if override:
        return override
    try:
        return importlib_metadata.version(DIST_NAME)
    except importlib_metadata.PackageNotFoundError:
        return BASE_VERSION


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "compute_version"]

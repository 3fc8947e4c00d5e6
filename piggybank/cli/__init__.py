"""
piggybank.cli
-------------

Command-line entrypoint for the piggy bank tools, exposed as the
`piggybank` console script (piggybank.cli.main:main).
"""

from __future__ import annotations

from .main import app, main

__all__ = ["app", "main"]

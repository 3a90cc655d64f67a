"""CLI command implementations exposed via `ditasmith.ui.cli`."""

from __future__ import annotations

from .job import job
from .run import run


__all__ = ["job", "run"]

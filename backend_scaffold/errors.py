from __future__ import annotations


class ScaffoldError(Exception):
    """Base error for the scaffolder."""


class PreconditionError(ScaffoldError):
    """Raised before any write when the environment or input is not usable."""

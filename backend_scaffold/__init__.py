"""
backend-scaffold: generates a Node · TypeScript · PostgreSQL backend skeleton.
"""
from __future__ import annotations

from backend_scaffold.errors import PreconditionError, ScaffoldError
from backend_scaffold.structure import (
    Directory,
    FileGroup,
    FileSpec,
    InlineFiles,
    create_structure,
    materialize,
    parse_structure,
)

__version__ = "1.0.0"

__all__ = [
    "Directory",
    "FileGroup",
    "FileSpec",
    "InlineFiles",
    "PreconditionError",
    "ScaffoldError",
    "create_structure",
    "materialize",
    "parse_structure",
]

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from backend_scaffold.errors import PreconditionError

Extra = Literal["docker", "githooks"]

EXTRAS: dict[str, str] = {
    "docker": "Docker (Dockerfile · docker-compose · .dockerignore)",
    "githooks": "Git Hooks (Husky · commitlint · lint-staged)",
}

DEFAULTS = {
    "version": "1.0.0",
    "license": "MIT",
    "min_node": 20,
}


@dataclass
class ProjectMetadata:
    name: str
    version: str = DEFAULTS["version"]
    description: str = ""
    author: str = ""
    license: str = DEFAULTS["license"]
    extras: list[str] = field(default_factory=list)

    @property
    def docker(self) -> bool:
        return "docker" in self.extras

    @property
    def githooks(self) -> bool:
        return "githooks" in self.extras

    def as_vars(self) -> dict[str, str]:
        """Placeholders available to ``string.Template`` based files."""
        return {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "license": self.license,
        }


def validate_project_name(value: str | None) -> str:
    name = (value or "").strip()
    if not name:
        raise PreconditionError("Project name is required")
    # the name is also the directory created under cwd
    if name in (".", "..") or any(sep in name for sep in ("/", "\\")):
        raise PreconditionError(f"Invalid project name \"{name}\": it must be a plain directory name")
    return name

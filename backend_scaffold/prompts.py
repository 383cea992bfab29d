"""
Interactive metadata collection.

``PromptSession`` owns the input side of the conversation for the duration of
a ``with`` block; it is released on exit whether the block succeeded or not.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, TextIO

from rich.console import Console
from rich.prompt import Confirm, Prompt

from backend_scaffold.errors import PreconditionError, ScaffoldError
from backend_scaffold.metadata import DEFAULTS, EXTRAS, ProjectMetadata, validate_project_name

logger = logging.getLogger(__name__)

MAX_NAME_ATTEMPTS = 3


class PromptSession:
    def __init__(
        self,
        console: Console | None = None,
        stream: TextIO | None = None,
        owns_stream: bool = False,
    ):
        self.console = console or Console()
        self._stream = stream
        self._owns_stream = owns_stream
        self._open = False

    @property
    def closed(self) -> bool:
        return not self._open

    def __enter__(self) -> "PromptSession":
        self._open = True
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        if self._owns_stream and self._stream is not None:
            self._stream.close()
        logger.debug("prompt session closed")

    def _ensure_open(self) -> None:
        if not self._open:
            raise ScaffoldError("prompt session is closed")

    def ask(self, question: str, default: str | None = None) -> str:
        self._ensure_open()
        kwargs: dict[str, Any] = {"console": self.console, "stream": self._stream}
        if default is not None:
            kwargs["default"] = default
            kwargs["show_default"] = default != ""
        answer = (Prompt.ask(question, **kwargs) or "").strip()
        # a blank line read from a stream is not always mapped to the default
        if not answer and default is not None:
            return default
        return answer

    def confirm(self, question: str, default: bool = False) -> bool:
        self._ensure_open()
        return Confirm.ask(question, console=self.console, default=default, stream=self._stream)


def ask_project_name(session: PromptSession) -> str:
    for _ in range(MAX_NAME_ATTEMPTS):
        try:
            return validate_project_name(session.ask("Project name"))
        except PreconditionError as exc:
            session.console.print(f"[red]{exc}[/red]")
    raise PreconditionError("Project name is required")


def collect_metadata(session: PromptSession, preset: Mapping[str, Any] | None = None) -> ProjectMetadata:
    """
    Ask for every field not already present in ``preset``.

    ``preset["extras"]`` set to a list (even empty) skips the extras questions.
    """
    preset = dict(preset or {})

    if preset.get("name"):
        name = validate_project_name(preset["name"])
    else:
        name = ask_project_name(session)

    def field(key: str, question: str, default: str = "") -> str:
        if preset.get(key) is not None:
            return preset[key]
        return session.ask(question, default=default)

    version = field("version", "Version", DEFAULTS["version"])
    description = field("description", "Description")
    author = field("author", "Author")
    license = field("license", "License", DEFAULTS["license"])

    extras = preset.get("extras")
    if extras is None:
        extras = [key for key, label in EXTRAS.items() if session.confirm(f"Add {label}?", default=False)]

    metadata = ProjectMetadata(
        name=name,
        version=version,
        description=description,
        author=author,
        license=license,
        extras=list(extras),
    )
    logger.debug("metadata collected: %s", metadata)
    return metadata

"""
Checks that run before anything is written to disk.

None of these functions create, modify or delete files.
"""
from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path

from backend_scaffold.errors import PreconditionError
from backend_scaffold.metadata import DEFAULTS

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^\s*v?(\d+)(?:\.\d+)*")


def detect_node_version() -> str | None:
    try:
        proc = subprocess.run(
            ["node", "--version"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.debug("node --version failed: %s", exc)
        return None
    return proc.stdout.strip()


def parse_major(version: str) -> int | None:
    m = _VERSION_RE.match(version or "")
    return int(m.group(1)) if m else None


def check_node_version(version: str | None = None, minimum: int = DEFAULTS["min_node"]) -> str:
    """
    Fail unless the Node.js major version is at least ``minimum``.

    ``version`` is a string like ``v20.11.1``; when omitted it is read from
    ``node --version``. Returns the version that was checked.
    """
    if version is None:
        version = detect_node_version()
        if version is None:
            raise PreconditionError(
                f"Node.js {minimum} or higher is required. Node.js was not found on PATH."
            )

    major = parse_major(version)
    if major is None or major < minimum:
        raise PreconditionError(
            f"Node.js {minimum} or higher is required. Current version: {version}"
        )

    logger.info("node version ok: %s (>= %d)", version, minimum)
    return version


def check_existing_project(project_path: Path | str) -> None:
    path = Path(project_path)
    if path.exists():
        raise PreconditionError(f'Directory "{path}" already exists.')

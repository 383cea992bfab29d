"""
Declarative directory trees and the materializer that writes them to disk.

A structure is an ordered mapping ``name -> node`` where each node is one of:

- ``FileGroup``   -> creates ``<base>/<name>/`` and writes the files inside it
- ``Directory``   -> creates ``<base>/<name>/`` and recurses into the children
- ``InlineFiles`` -> writes the files straight into ``<base>`` (by convention
  stored under the ``_files`` key)

Shapes are resolved once, when the descriptor is built (``file_specs`` /
``parse_structure``); the materializer never sniffs raw lists or dicts.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

from backend_scaffold.errors import ScaffoldError

logger = logging.getLogger(__name__)

INLINE_FILES_KEY = "_files"


@dataclass(frozen=True)
class FileSpec:
    file: str
    template: str = ""


@dataclass(frozen=True)
class FileGroup:
    files: tuple[FileSpec, ...] = ()


@dataclass(frozen=True)
class InlineFiles:
    files: tuple[FileSpec, ...] = ()


@dataclass(frozen=True)
class Directory:
    children: Mapping[str, "Node"] = field(default_factory=dict)


Node = Union[FileGroup, Directory, InlineFiles]
StructureNode = Mapping[str, Node]


# ---------------------- authoring helpers ----------------------

def file_specs(*items: Any) -> tuple[FileSpec, ...]:
    """
    Normalize file declarations into ``FileSpec``.

    Accepts ``FileSpec``, bare filenames (empty content), ``(name, template)``
    pairs and ``{"file": ..., "template": ...}`` mappings.
    """
    out: list[FileSpec] = []
    for item in items:
        if isinstance(item, FileSpec):
            out.append(item)
        elif isinstance(item, str):
            out.append(FileSpec(item))
        elif isinstance(item, tuple) and len(item) == 2:
            out.append(FileSpec(str(item[0]), item[1] or ""))
        elif isinstance(item, Mapping):
            if "file" not in item:
                raise ScaffoldError(f"file declaration without 'file': {item!r}")
            out.append(FileSpec(str(item["file"]), item.get("template") or ""))
        else:
            raise ScaffoldError(f"unsupported file declaration: {item!r}")
    return tuple(out)


def group(*items: Any) -> FileGroup:
    return FileGroup(file_specs(*items))


def inline(*items: Any) -> InlineFiles:
    return InlineFiles(file_specs(*items))


def parse_structure(raw: Mapping[str, Any]) -> dict[str, Node]:
    """Convert a raw nested mapping (``_files`` key, lists, dicts) into tagged nodes."""
    nodes: dict[str, Node] = {}
    for key, value in raw.items():
        if key == INLINE_FILES_KEY:
            if not isinstance(value, (list, tuple)):
                raise ScaffoldError(f"'{INLINE_FILES_KEY}' must be a list, got {type(value).__name__}")
            nodes[key] = InlineFiles(file_specs(*value))
        elif isinstance(value, (list, tuple)):
            nodes[key] = FileGroup(file_specs(*value))
        elif isinstance(value, Mapping):
            nodes[key] = Directory(parse_structure(value))
        else:
            raise ScaffoldError(f"invalid structure entry {key!r}: {value!r}")
    return nodes


# ---------------------- materializer ----------------------

def _write_files(dir_path: Path, files: Iterable[FileSpec]) -> None:
    for spec in files:
        target = dir_path / spec.file
        target.write_text(spec.template, encoding="utf-8", newline="")
        logger.debug("file written: %s (%d bytes)", target, len(spec.template))


def _make_dir(dir_path: Path) -> None:
    dir_path.mkdir(parents=True, exist_ok=True)
    logger.debug("directory created: %s", dir_path)


def create_structure(base_path: Path | str, struct: StructureNode) -> None:
    """
    Reproduce ``struct`` under ``base_path`` (which must already exist).

    Existing files are truncated. OSError propagates as-is; nothing written
    before the failure is removed.
    """
    base = Path(base_path)
    for key, node in struct.items():
        if isinstance(node, InlineFiles):
            _write_files(base, node.files)
        elif isinstance(node, FileGroup):
            dir_path = base / key
            _make_dir(dir_path)
            _write_files(dir_path, node.files)
        elif isinstance(node, Directory):
            dir_path = base / key
            _make_dir(dir_path)
            create_structure(dir_path, node.children)
        else:
            raise ScaffoldError(f"invalid structure node {key!r}: {node!r}")


def materialize(project_path: Path | str, struct: StructureNode) -> None:
    """
    Top-level driver: every named entry gets its own directory, even when empty.

    ``InlineFiles`` at this level are written into ``project_path`` itself; no
    ``_files`` directory is ever created.
    """
    project = Path(project_path)
    for key, node in struct.items():
        if isinstance(node, InlineFiles):
            _write_files(project, node.files)
            continue

        dir_path = project / key
        _make_dir(dir_path)

        if isinstance(node, Directory):
            create_structure(dir_path, node.children)
        elif isinstance(node, FileGroup):
            _write_files(dir_path, node.files)
        else:
            raise ScaffoldError(f"invalid structure node {key!r}: {node!r}")

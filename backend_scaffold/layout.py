from __future__ import annotations

from typing import Mapping

from backend_scaffold.structure import (
    INLINE_FILES_KEY,
    Directory,
    FileSpec,
    Node,
    group,
    inline,
)
from backend_scaffold.templates import TEMPLATES

# empty directories of src/, created in this order
SRC_EMPTY_DIRS = (
    "controllers",
    "entities",
    "services",
    "repositories",
    "validators",
    "decorators",
    "types",
    "utils",
    "subscribers",
)

EXCEPTION_FILES = {
    "index.ts": "exceptions_index",
    "base-exception.ts": "base_exception",
    "validation-exception.ts": "validation_exception",
    "unauthorized-exception.ts": "unauthorized_exception",
    "forbidden-exception.ts": "forbidden_exception",
    "notfound-exception.ts": "notfound_exception",
    "conflict-exception.ts": "conflict_exception",
    "bad-request-exception.ts": "bad_request_exception",
}


def _tpl(catalog: Mapping[str, str], filename: str, name: str) -> FileSpec:
    return FileSpec(filename, catalog[name])


def build_structure(catalog: Mapping[str, str] = TEMPLATES) -> dict[str, Node]:
    """Directory tree of a freshly generated service, filled from ``catalog``."""
    src: dict[str, Node] = {
        "config": group(
            _tpl(catalog, "logger.ts", "logger"),
            _tpl(catalog, "environment.ts", "environment"),
            _tpl(catalog, "swagger.ts", "swagger"),
            _tpl(catalog, "database.ts", "datasource_app"),
        ),
    }
    for name in SRC_EMPTY_DIRS:
        src[name] = group()

    src["middlewares"] = group(
        _tpl(catalog, "index.ts", "middlewares_index"),
        _tpl(catalog, "error-handler.ts", "error_handler_middleware"),
        _tpl(catalog, "dto-validation.ts", "validation_middleware"),
    )
    src["exceptions"] = group(*(_tpl(catalog, f, n) for f, n in EXCEPTION_FILES.items()))
    src["routes"] = Directory({
        "v1": group(_tpl(catalog, "index.ts", "v1_routes")),
        INLINE_FILES_KEY: inline(_tpl(catalog, "index.ts", "routes")),
    })
    # package.json migration and db scripts point at src/database/data-source.ts
    src["database"] = Directory({
        "migrations": group(),
        "seeds": group(),
        INLINE_FILES_KEY: inline(_tpl(catalog, "data-source.ts", "datasource_cli")),
    })
    src["scripts"] = group(_tpl(catalog, "seed.ts", "seed"))
    src["docs"] = Directory({"schemas": group()})
    src[INLINE_FILES_KEY] = inline(
        _tpl(catalog, "app.ts", "app"),
        _tpl(catalog, "server.ts", "server"),
    )

    tests: dict[str, Node] = {
        "unit": group(),
        "integration": group(),
        "e2e": group(),
        INLINE_FILES_KEY: inline(_tpl(catalog, "setup.ts", "test_setup")),
    }

    return {
        "src": Directory(src),
        "tests": Directory(tests),
        "logs": group(),
    }

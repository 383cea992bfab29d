# tests/test_config_files.py
import json
import os
import stat

import pytest

from backend_scaffold.config_files import (
    EXECUTABLE_MODE,
    GITHOOKS_DEV_DEPENDENCIES,
    config_structure,
    package_json,
    write_config_files,
)
from backend_scaffold.metadata import ProjectMetadata

BASE_FILES = [
    ".env.example",
    ".gitignore",
    ".prettierrc",
    "eslint.config.js",
    "jest.config.js",
    "nodemon.json",
    "package.json",
    "tsconfig.dev.json",
    "tsconfig.json",
]


def _meta(**kwargs) -> ProjectMetadata:
    base = {
        "name": "orders-api",
        "version": "0.2.0",
        "description": "Orders service",
        "author": "Jane Doe",
        "license": "Apache-2.0",
    }
    base.update(kwargs)
    return ProjectMetadata(**base)


# -----------------------------------------------------------------------------
# package.json
# -----------------------------------------------------------------------------

def test_package_json_carries_metadata():
    pkg = package_json(_meta())

    assert pkg["name"] == "orders-api"
    assert pkg["version"] == "0.2.0"
    assert pkg["description"] == "Orders service"
    assert pkg["author"] == "Jane Doe"
    assert pkg["license"] == "Apache-2.0"
    assert pkg["main"] == "dist/server.js"
    assert pkg["engines"]["node"] == ">=20.0.0"


def test_package_json_without_githooks_has_no_husky():
    pkg = package_json(_meta())

    assert "prepare" not in pkg["scripts"]
    assert not set(GITHOOKS_DEV_DEPENDENCIES) & set(pkg["devDependencies"])


def test_package_json_with_githooks():
    pkg = package_json(_meta(extras=["githooks"]))

    assert pkg["scripts"]["prepare"] == "husky install"
    assert set(GITHOOKS_DEV_DEPENDENCIES) <= set(pkg["devDependencies"])


def test_package_json_engine_follows_min_node():
    assert package_json(_meta(), min_node=18)["engines"]["node"] == ">=18.0.0"


# -----------------------------------------------------------------------------
# Written files
# -----------------------------------------------------------------------------

def test_base_files_only(tmp_path):
    write_config_files(tmp_path, _meta())

    assert sorted(p.name for p in tmp_path.iterdir()) == BASE_FILES


def test_json_files_are_valid_and_indented(tmp_path):
    write_config_files(tmp_path, _meta())

    text = (tmp_path / "package.json").read_text(encoding="utf-8")
    assert text.startswith('{\n  "name": "orders-api"')
    for name in ("package.json", "tsconfig.json", "tsconfig.dev.json", "nodemon.json", ".prettierrc"):
        json.loads((tmp_path / name).read_text(encoding="utf-8"))

    tsconfig = json.loads((tmp_path / "tsconfig.json").read_text(encoding="utf-8"))
    assert tsconfig["compilerOptions"]["paths"]["@config/*"] == ["src/config/*"]


def test_jest_config_keeps_regex_escapes(tmp_path):
    write_config_files(tmp_path, _meta())

    jest = (tmp_path / "jest.config.js").read_text(encoding="utf-8")
    assert "'^.+\\.ts$': 'ts-jest'" in jest
    assert "'^@decorators/(.*)$': '<rootDir>/src/decorators/$1'," in jest


def test_env_example_uses_project_database_name(tmp_path):
    write_config_files(tmp_path, _meta())

    assert "DB_NAME=orders_api\n" in (tmp_path / ".env.example").read_text(encoding="utf-8")


def test_docker_extra(tmp_path):
    write_config_files(tmp_path, _meta(extras=["docker"]))

    names = {p.name for p in tmp_path.iterdir()}
    assert {"Dockerfile", "docker-compose.yml", ".dockerignore"} <= names
    assert "FROM node:20-alpine" in (tmp_path / "Dockerfile").read_text(encoding="utf-8")
    compose = (tmp_path / "docker-compose.yml").read_text(encoding="utf-8")
    assert "container_name: orders-api-api" in compose
    assert "POSTGRES_DB: orders_api" in compose
    assert not (tmp_path / ".husky").exists()


def test_githooks_extra(tmp_path):
    write_config_files(tmp_path, _meta(extras=["githooks"]))

    assert (tmp_path / "commitlint.config.js").is_file()
    assert (tmp_path / "lint-staged.config.js").is_file()
    commit_msg = (tmp_path / ".husky" / "commit-msg").read_text(encoding="utf-8")
    assert 'commitlint --edit "$1"' in commit_msg
    assert "lint-staged" in (tmp_path / ".husky" / "pre-commit").read_text(encoding="utf-8")
    assert not (tmp_path / "Dockerfile").exists()


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_hook_scripts_are_executable(tmp_path):
    write_config_files(tmp_path, _meta(extras=["githooks"]))

    for hook in ("commit-msg", "pre-commit"):
        mode = stat.S_IMODE((tmp_path / ".husky" / hook).stat().st_mode)
        assert mode == EXECUTABLE_MODE == 0o755


def test_config_structure_keeps_husky_out_of_root_files():
    struct = config_structure(_meta(extras=["githooks", "docker"]))

    assert list(struct) == [".husky", "_files"]
    root_names = [spec.file for spec in struct["_files"].files]
    assert "commit-msg" not in root_names
    assert root_names[0] == "package.json"

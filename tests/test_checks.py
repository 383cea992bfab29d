# tests/test_checks.py
import subprocess
from types import SimpleNamespace

import pytest

from backend_scaffold import checks
from backend_scaffold.checks import check_existing_project, check_node_version, parse_major
from backend_scaffold.errors import PreconditionError
from backend_scaffold.metadata import validate_project_name


# -----------------------------------------------------------------------------
# Node.js version
# -----------------------------------------------------------------------------

def test_old_node_version_fails_without_touching_the_file_system(fs_writes):
    with pytest.raises(PreconditionError) as exc:
        check_node_version("v18.19.0", minimum=20)

    assert str(exc.value) == "Node.js 20 or higher is required. Current version: v18.19.0"
    assert fs_writes == []


def test_threshold_is_inclusive():
    assert check_node_version("v20.0.0", minimum=20) == "v20.0.0"


def test_threshold_is_configurable():
    assert check_node_version("v18.19.0", minimum=18) == "v18.19.0"


@pytest.mark.parametrize("version", ["", "node", "vX.1.2"])
def test_unparsable_version_fails(version):
    with pytest.raises(PreconditionError):
        check_node_version(version)


@pytest.mark.parametrize(
    "version,major",
    [("v20.11.1", 20), ("22.1.0", 22), ("  v18\n", 18), ("garbage", None)],
)
def test_parse_major(version, major):
    assert parse_major(version) == major


def test_version_is_read_from_node_when_not_given(monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return SimpleNamespace(stdout="v22.3.0\n")

    monkeypatch.setattr(checks.subprocess, "run", fake_run)

    assert check_node_version() == "v22.3.0"
    assert calls == [["node", "--version"]]


@pytest.mark.parametrize(
    "error",
    [FileNotFoundError("node"), subprocess.CalledProcessError(1, ["node", "--version"])],
)
def test_missing_node_is_a_precondition_error(monkeypatch, fs_writes, error):
    def fake_run(cmd, **kwargs):
        raise error

    monkeypatch.setattr(checks.subprocess, "run", fake_run)

    with pytest.raises(PreconditionError, match="not found"):
        check_node_version()
    assert fs_writes == []


# -----------------------------------------------------------------------------
# Target directory
# -----------------------------------------------------------------------------

def test_existing_directory_fails_before_any_write(tmp_path, fs_writes):
    target = tmp_path / "orders-api"
    target.mkdir()
    fs_writes.clear()

    with pytest.raises(PreconditionError, match="already exists"):
        check_existing_project(target)

    assert fs_writes == []


def test_existing_file_also_blocks(tmp_path):
    target = tmp_path / "orders-api"
    target.write_text("", encoding="utf-8")

    with pytest.raises(PreconditionError):
        check_existing_project(target)


def test_missing_directory_passes(tmp_path, fs_writes):
    check_existing_project(tmp_path / "fresh")

    assert fs_writes == []
    assert not (tmp_path / "fresh").exists()


# -----------------------------------------------------------------------------
# Project name
# -----------------------------------------------------------------------------

def test_project_name_is_trimmed():
    assert validate_project_name("  orders-api \n") == "orders-api"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_project_name_is_required(value):
    with pytest.raises(PreconditionError, match="Project name is required"):
        validate_project_name(value)


@pytest.mark.parametrize("value", ["../x", "a/b", "a\\b", "/tmp/app", ".", ".."])
def test_project_name_must_be_a_plain_directory_name(value):
    with pytest.raises(PreconditionError, match="plain directory name"):
        validate_project_name(value)

# tests/test_prompts.py
import io

import pytest

from backend_scaffold.errors import PreconditionError, ScaffoldError
from backend_scaffold.prompts import PromptSession, collect_metadata


def _session(console, answers: str) -> PromptSession:
    return PromptSession(console=console, stream=io.StringIO(answers))


# -----------------------------------------------------------------------------
# Metadata flow
# -----------------------------------------------------------------------------

def test_collects_every_field(quiet_console):
    answers = "orders-api\n2.0.0\nOrders service\nJane Doe\nApache-2.0\ny\nn\n"

    with _session(quiet_console, answers) as session:
        meta = collect_metadata(session)

    assert meta.name == "orders-api"
    assert meta.version == "2.0.0"
    assert meta.description == "Orders service"
    assert meta.author == "Jane Doe"
    assert meta.license == "Apache-2.0"
    assert meta.extras == ["docker"]
    assert meta.docker and not meta.githooks


def test_defaults_apply_when_nothing_is_typed(quiet_console):
    with _session(quiet_console, "orders-api\n") as session:
        meta = collect_metadata(session)

    assert meta.version == "1.0.0"
    assert meta.license == "MIT"
    assert meta.description == ""
    assert meta.author == ""
    assert meta.extras == []


def test_name_is_trimmed_and_reasked_when_blank(quiet_console):
    answers = "   \n  orders-api  \n1.0.0\n\n\nMIT\nn\ny\n"

    with _session(quiet_console, answers) as session:
        meta = collect_metadata(session)

    assert meta.name == "orders-api"
    assert meta.extras == ["githooks"]


def test_name_never_given_fails(quiet_console):
    with _session(quiet_console, "\n\n\n") as session:
        with pytest.raises(PreconditionError, match="Project name is required"):
            collect_metadata(session)


def test_preset_fields_are_not_asked(quiet_console):
    preset = {"name": "orders-api", "author": "Jane Doe", "extras": ["githooks"]}

    with _session(quiet_console, "3.1.4\nA service\nBSD-3-Clause\n") as session:
        meta = collect_metadata(session, preset)

    assert meta.name == "orders-api"
    assert meta.version == "3.1.4"
    assert meta.description == "A service"
    assert meta.author == "Jane Doe"
    assert meta.license == "BSD-3-Clause"
    assert meta.extras == ["githooks"]


# -----------------------------------------------------------------------------
# Session lifecycle
# -----------------------------------------------------------------------------

def test_ask_outside_the_session_fails(quiet_console):
    session = _session(quiet_console, "x\n")
    with pytest.raises(ScaffoldError):
        session.ask("Project name")

    with session:
        assert session.ask("Project name") == "x"
    assert session.closed

    with pytest.raises(ScaffoldError):
        session.confirm("Docker?")


def test_owned_stream_is_released_on_error(quiet_console):
    stream = io.StringIO("orders-api\n")

    with pytest.raises(RuntimeError):
        with PromptSession(console=quiet_console, stream=stream, owns_stream=True) as session:
            session.ask("Project name")
            raise RuntimeError("boom")

    assert stream.closed
    assert session.closed


def test_borrowed_stream_is_left_open(quiet_console):
    stream = io.StringIO("orders-api\n")

    with PromptSession(console=quiet_console, stream=stream):
        pass

    assert not stream.closed

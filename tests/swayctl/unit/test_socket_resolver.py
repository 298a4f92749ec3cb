"""Tests for control socket discovery."""

import os

import pytest

from swayctl.core.socket_resolver import (
    SessionContext,
    SocketResolver,
    is_valid_socket,
    resolve_socket,
)
from swayctl.errors import ErrorCode, SocketNotFound


@pytest.fixture
def sockets(tmp_path):
    """Three distinct valid socket files."""
    paths = {}
    for name in ("session", "surface", "process"):
        path = tmp_path / f"{name}.sock"
        path.write_text("")
        paths[name] = str(path)
    return paths


class TestValidation:
    """Test the candidate validation predicate."""

    def test_accepts_readable_regular_file(self, fake_socket):
        assert is_valid_socket(fake_socket)

    @pytest.mark.parametrize("candidate", [None, ""])
    def test_rejects_empty(self, candidate):
        assert not is_valid_socket(candidate)

    def test_rejects_missing_path(self, tmp_path):
        assert not is_valid_socket(str(tmp_path / "missing.sock"))

    def test_rejects_directory(self, tmp_path):
        assert not is_valid_socket(str(tmp_path))


class TestResolveOrder:
    """Test the fixed session → surface → process priority."""

    def test_session_environment_wins(self, sockets):
        session = SessionContext(
            environment={"SWAYSOCK": sockets["session"]},
            surface_attributes={"sway-socket": sockets["surface"]},
        )
        result = resolve_socket(session, environ={"SWAYSOCK": sockets["process"]})
        assert result == sockets["session"]

    def test_surface_attribute_used_when_session_missing(self, sockets):
        session = SessionContext(
            environment={},
            surface_attributes={"sway-socket": sockets["surface"]},
        )
        result = resolve_socket(session, environ={"SWAYSOCK": sockets["process"]})
        assert result == sockets["surface"]

    def test_surface_attribute_used_when_session_invalid(self, sockets, tmp_path):
        session = SessionContext(
            environment={"SWAYSOCK": str(tmp_path / "stale.sock")},
            surface_attributes={"sway-socket": sockets["surface"]},
        )
        result = resolve_socket(session, environ={"SWAYSOCK": sockets["process"]})
        assert result == sockets["surface"]

    def test_process_environment_is_last_resort(self, sockets, tmp_path):
        session = SessionContext(
            environment={"SWAYSOCK": ""},
            surface_attributes={"sway-socket": str(tmp_path)},
        )
        result = resolve_socket(session, environ={"SWAYSOCK": sockets["process"]})
        assert result == sockets["process"]

    def test_empty_session_context(self, sockets):
        assert resolve_socket(None, environ={"SWAYSOCK": sockets["process"]}) == sockets["process"]

    def test_custom_env_var_and_attribute(self, sockets):
        session = SessionContext(
            environment={"SWAYSOCK": sockets["session"]},
            surface_attributes={"i3-socket": sockets["surface"]},
        )
        result = resolve_socket(session, environ={}, env_var="I3SOCK", surface_attribute="i3-socket")
        assert result == sockets["surface"]

    def test_defaults_to_os_environ(self, swaysock):
        assert resolve_socket() == swaysock


class TestSocketNotFound:
    """Test the failure path when nothing validates."""

    def test_no_candidates(self):
        with pytest.raises(SocketNotFound) as exc_info:
            resolve_socket(SessionContext.empty(), environ={})

        error = exc_info.value
        assert error.code == ErrorCode.SOCKET_NOT_FOUND
        assert str(error) == "Could not find a sway control socket"

    def test_all_candidates_invalid(self, tmp_path):
        session = SessionContext(
            environment={"SWAYSOCK": str(tmp_path / "gone.sock")},
            surface_attributes={"sway-socket": ""},
        )
        with pytest.raises(SocketNotFound) as exc_info:
            resolve_socket(session, environ={"SWAYSOCK": str(tmp_path)})

        tried = exc_info.value.context["tried"]
        assert list(tried) == ["session environment", "surface attribute", "process environment"]
        assert tried["process environment"] == str(tmp_path)


class TestSocketResolver:
    """Test the resolver object used by the invoker."""

    def test_re_resolves_every_call(self, sockets, monkeypatch):
        resolver = SocketResolver()
        monkeypatch.setenv("SWAYSOCK", sockets["session"])
        assert resolver.resolve() == sockets["session"]

        monkeypatch.setenv("SWAYSOCK", sockets["process"])
        assert resolver.resolve() == sockets["process"]

    def test_removed_socket_is_noticed(self, fake_socket, monkeypatch):
        monkeypatch.setenv("SWAYSOCK", fake_socket)
        resolver = SocketResolver()
        assert resolver.resolve() == fake_socket

        os.unlink(fake_socket)
        with pytest.raises(SocketNotFound):
            resolver.resolve()

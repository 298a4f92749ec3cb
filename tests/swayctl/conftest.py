"""Pytest configuration and shared fixtures for swayctl tests."""

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

from swayctl.config import ClientConfig
from swayctl.core.client import ControlClient


FIXTURES_DIR = Path(__file__).parent / "fixtures"

MOCK_BINARY_TEMPLATE = """#!{python}
import json
import os
import sys
import time

with open({record!r}, "w") as f:
    json.dump({{"argv": sys.argv[1:], "env": dict(os.environ)}}, f)

time.sleep({sleep!r})
sys.stdout.write({stdout!r})
sys.stderr.write({stderr!r})
sys.exit({exit_code!r})
"""


class MockBinary:
    """A generated control binary that prints a canned payload.

    Each run records its arguments and environment to ``record_file``.
    """

    def __init__(self, path: Path, record_file: Path):
        self.path = path
        self.record_file = record_file

    @property
    def last_call(self) -> Dict[str, Any]:
        return json.loads(self.record_file.read_text())

    @property
    def called(self) -> bool:
        return self.record_file.exists()


@pytest.fixture
def load_fixture() -> Callable[[str], Any]:
    """Load a JSON fixture file by name."""
    def _load(name: str) -> Any:
        return json.loads((FIXTURES_DIR / name).read_text())
    return _load


@pytest.fixture
def sample_tree(load_fixture) -> Dict[str, Any]:
    """Raw tree query output with two outputs, three workspaces and four windows."""
    return load_fixture("tree.json")


@pytest.fixture
def fake_socket(tmp_path: Path) -> str:
    """A readable regular file standing in for the control socket."""
    socket_path = tmp_path / "sway-ipc.1000.1234.sock"
    socket_path.write_text("")
    return str(socket_path)


@pytest.fixture
def swaysock(fake_socket: str, monkeypatch) -> str:
    """Point the process-wide SWAYSOCK at the fake socket."""
    monkeypatch.setenv("SWAYSOCK", fake_socket)
    return fake_socket


@pytest.fixture
def make_binary(tmp_path: Path) -> Callable[..., MockBinary]:
    """Factory for mock control binaries.

    Args (of the returned factory):
        name: File name of the binary
        payload: JSON-serializable value printed on stdout
        raw: Raw stdout text, used instead of payload
        exit_code: Exit status
        stderr: Text printed on stderr
        sleep: Seconds to sleep before printing
    """
    def _make(
        name: str = "swaymsg",
        payload: Any = None,
        raw: Optional[str] = None,
        exit_code: int = 0,
        stderr: str = "",
        sleep: float = 0,
    ) -> MockBinary:
        path = tmp_path / name
        record_file = tmp_path / f"{name}.call.json"
        stdout = raw if raw is not None else json.dumps(payload)
        path.write_text(MOCK_BINARY_TEMPLATE.format(
            python=sys.executable,
            record=str(record_file),
            sleep=sleep,
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
        ))
        path.chmod(0o755)
        return MockBinary(path, record_file)

    return _make


@pytest.fixture
def make_client(make_binary) -> Callable[..., ControlClient]:
    """Build a ControlClient whose binaries are mock binaries.

    Args (of the returned factory):
        payload/raw/exit_code/stderr/sleep: passed to the primary binary
        version_payload: payload of the secondary binary
        timeout: ClientConfig timeout
        session: SessionContext for socket discovery
    """
    def _make(
        payload: Any = None,
        raw: Optional[str] = None,
        exit_code: int = 0,
        stderr: str = "",
        sleep: float = 0,
        version_payload: Any = None,
        timeout: float = 10.0,
        session=None,
    ) -> ControlClient:
        primary = make_binary("swaymsg", payload=payload, raw=raw, exit_code=exit_code, stderr=stderr, sleep=sleep)
        secondary = make_binary("sway", payload=version_payload)
        config = ClientConfig(
            command_binary=str(primary.path),
            version_binary=str(secondary.path),
            timeout=timeout,
        )
        client = ControlClient(config, session=session)
        client.primary = primary
        client.secondary = secondary
        return client

    return _make

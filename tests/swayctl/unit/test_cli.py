"""Tests for the swayctl command-line interface."""

import json
import logging

import pytest

from swayctl.cli.commands import EXIT_COMMAND_FAILED, EXIT_ENVIRONMENT_ERROR, cli_main


@pytest.fixture(autouse=True)
def reset_logging():
    """cli_main installs a stderr handler bound to the captured stream."""
    yield
    logger = logging.getLogger("swayctl")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def cli(make_binary, swaysock, tmp_path, monkeypatch):
    """Run cli_main with mock binaries configured through the environment."""
    def _run(*argv, payload=None, version_payload=None, exit_code=0):
        primary = make_binary("swaymsg", payload=payload, exit_code=exit_code)
        secondary = make_binary("sway", payload=version_payload)
        monkeypatch.setenv("SWAYCTL_COMMAND_BINARY", str(primary.path))
        monkeypatch.setenv("SWAYCTL_VERSION_BINARY", str(secondary.path))
        return cli_main(["--config", str(tmp_path / "absent.json"), *argv])
    return _run


class TestRun:
    def test_success(self, cli, capsys):
        assert cli("run", "focus left", payload=[{"success": True}]) == 0
        assert "Command succeeded" in capsys.readouterr().out

    def test_failure_exit_code(self, cli, capsys):
        code = cli("run", "a", "b", payload=[{"success": True}, {"success": False, "error": "nope"}], exit_code=2)

        assert code == EXIT_COMMAND_FAILED
        err = capsys.readouterr().err
        assert "Sway command failed: a; b" in err
        assert "nope" in err

    def test_ignore_errors(self, cli, capsys):
        code = cli("run", "--ignore-errors", "bogus", payload=[{"success": False, "error": "nope"}])

        assert code == 0
        assert "ignored" in capsys.readouterr().err


class TestQueries:
    def test_windows_json(self, cli, capsys, sample_tree):
        assert cli("windows", "--visible", "--json", payload=sample_tree) == 0

        windows = json.loads(capsys.readouterr().out)
        assert [w["id"] for w in windows] == [10, 12, 13]

    def test_windows_table(self, cli, capsys, sample_tree):
        assert cli("windows", payload=sample_tree) == 0
        assert "Windows" in capsys.readouterr().out

    def test_tree_json(self, cli, capsys, sample_tree):
        assert cli("tree", "--json", payload=sample_tree) == 0
        tree = json.loads(capsys.readouterr().out)
        assert tree["type"] == "root"
        assert "children" not in tree
        assert [child["name"] for child in tree["nodes"]] == ["__i3", "eDP-1"]

    def test_version(self, cli, capsys, load_fixture):
        assert cli("version", version_payload=load_fixture("version.json")) == 0
        assert capsys.readouterr().out.strip() == "1.9.0"

    def test_socket(self, cli, capsys, swaysock):
        assert cli("socket") == 0
        assert capsys.readouterr().out.strip() == swaysock


class TestErrors:
    def test_socket_not_found(self, cli, capsys, monkeypatch):
        monkeypatch.delenv("SWAYSOCK")

        assert cli("run", "nop", payload=[{"success": True}]) == EXIT_ENVIRONMENT_ERROR
        assert "Could not find a sway control socket" in capsys.readouterr().err

    def test_missing_binary(self, tmp_path, swaysock, monkeypatch, capsys):
        monkeypatch.setenv("SWAYCTL_COMMAND_BINARY", str(tmp_path / "missing-swaymsg"))

        code = cli_main(["--config", str(tmp_path / "absent.json"), "tree"])

        assert code == EXIT_ENVIRONMENT_ERROR

    def test_no_command_prints_help(self, capsys):
        assert cli_main([]) == 0
        assert "usage: swayctl" in capsys.readouterr().out

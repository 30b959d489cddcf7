"""Tests for the command-line entry point."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from kodiremote.cli import run, split_arguments
from kodiremote.services.config import ConfigService


def make_response(body):
    text = json.dumps(body)
    response = MagicMock()
    response.content = text.encode()
    response.text = text
    response.status_code = 200
    response.ok = True
    return response


@pytest.fixture
def config_service(tmp_path):
    return ConfigService(tmp_path / "kodiremote.conf")


@pytest.fixture
def configured(config_service):
    config_service.update(host="kodi.local", port=8080)
    return ConfigService(config_service.config_file)


@pytest.fixture
def post():
    with patch("kodiremote.services.kodi.requests.post") as mock_post:
        mock_post.return_value = make_response({"id": 1, "jsonrpc": "2.0", "result": "OK"})
        yield mock_post


class TestSplitArguments:

    def test_options_separated(self):
        assert split_arguments(["--host=kodi", "-v", "seek", "--", "--port=1"]) == (
            ["--host=kodi", "-v", "--port=1"],
            ["seek", "--"],
        )

    def test_seek_steps_are_not_options(self):
        assert split_arguments(["seek", "-"]) == ([], ["seek", "-"])


class TestHelp:

    def test_no_arguments_prints_usage(self, capsys, config_service):
        assert run([], config_service) == 1
        out = capsys.readouterr().out
        assert "Usage: krm command" in out
        assert "seek" in out

    def test_general_help(self, capsys, config_service):
        assert run(["help"], config_service) == 0
        out = capsys.readouterr().out
        assert "--host=<kodi-address>" in out
        assert "List of all available commands:" in out

    def test_command_help(self, capsys, config_service):
        assert run(["help", "seek"], config_service) == 0
        out = capsys.readouterr().out
        assert "Help for command seek" in out
        assert "[hh:]mm:ss" in out

    def test_command_help_without_parameters(self, capsys, config_service):
        assert run(["help", "home"], config_service) == 0
        out = capsys.readouterr().out
        assert "Returns to the home screen." in out
        assert "Parameters" not in out

    def test_unknown_command_help(self, capsys, config_service):
        assert run(["help", "rewind"], config_service) == 1
        assert "The command rewind is not supported." in capsys.readouterr().out

    def test_help_does_not_touch_config(self, config_service):
        run(["help"], config_service)
        assert not config_service.config_file.exists()


class TestConfigure:

    def test_host_and_port_saved(self, capsys, config_service):
        assert run(["--host=192.168.0.10", "--port=8081"], config_service) == 0

        saved = json.loads(config_service.config_file.read_text())
        assert saved["host"] == "192.168.0.10"
        assert saved["port"] == 8081
        assert "Configuration saved" in capsys.readouterr().out

    def test_command_not_run_when_configuring(self, config_service, post):
        assert run(["--host=kodi.local", "stop"], config_service) == 0
        post.assert_not_called()

    def test_invalid_port(self, capsys, config_service):
        assert run(["--port=99999"], config_service) == 1
        assert "Error: Invalid configuration" in capsys.readouterr().err


class TestExecute:

    def test_success_is_silent(self, capsys, configured, post):
        assert run(["pause"], configured) == 0
        assert capsys.readouterr().out == ""
        assert post.call_args.args[0] == "http://kodi.local:8080/jsonrpc"

    def test_seek_big_step_back(self, configured, post):
        assert run(["seek", "--"], configured) == 0
        payload = json.loads(post.call_args.kwargs["data"])
        assert payload["params"] == {"playerid": 1, "value": "bigbackward"}

    def test_repeat(self, configured, post):
        assert run(["down", "3"], configured) == 0
        assert post.call_count == 3

    def test_no_host_configured(self, capsys, config_service, post):
        assert run(["pause"], config_service) == 1
        assert "No host configured" in capsys.readouterr().err
        post.assert_not_called()

    def test_unknown_command(self, capsys, configured, post):
        assert run(["rewind"], configured) == 1
        assert 'unknown command "rewind"' in capsys.readouterr().err
        post.assert_not_called()

    def test_invalid_parameters(self, capsys, configured, post):
        assert run(["seek"], configured) == 1
        assert "not enough parameters" in capsys.readouterr().err

    def test_remote_error_reports_repeats(self, capsys, configured, post):
        error = {"error": {"code": 402, "data": {"message": "Invalid params"}}, "id": 1}
        post.side_effect = [make_response({"id": 1, "result": "OK"}), make_response(error)]

        assert run(["left", "3"], configured) == 1
        err = capsys.readouterr().err
        assert "Error: Invalid params" in err
        assert "stopped after 1 of 3 repeats" in err

    def test_transport_error(self, capsys, configured, post):
        post.side_effect = requests.ConnectionError("refused")
        assert run(["home"], configured) == 1
        assert "Connection refused" in capsys.readouterr().err

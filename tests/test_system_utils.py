"""system_utils tests; subprocess.run is replaced so no real binaries are needed"""

import subprocess

import pytest

from xdebug_toolkit.core import system_utils
from xdebug_toolkit.core.system_utils import get_loaded_ini_path, run_command


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def fake_run(monkeypatch):
    calls = []
    state = {"result": _completed()}

    def _run(command, **kwargs):
        calls.append((command, kwargs))
        result = state["result"]
        if isinstance(result, BaseException):
            raise result
        return result

    monkeypatch.setattr(system_utils.subprocess, "run", _run)
    _run.calls = calls
    _run.state = state
    return _run


class TestRunCommand:

    def test_success(self, fake_run):
        fake_run.state["result"] = _completed(0, "out\n", "")
        assert run_command(["valet", "restart"], timeout=5) == (0, "out", "")
        assert fake_run.calls[0][1]["timeout"] == 5

    def test_failure_code_passed_through(self, fake_run):
        fake_run.state["result"] = _completed(3, "", "boom\n")
        assert run_command(["valet", "restart"]) == (3, "", "boom")

    def test_missing_binary(self, fake_run):
        fake_run.state["result"] = FileNotFoundError("valet")
        code, _, message = run_command(["valet", "restart"])
        assert code == -1
        assert "not found" in message

    def test_timeout(self, fake_run):
        fake_run.state["result"] = subprocess.TimeoutExpired(["valet"], 2)
        code, _, message = run_command(["valet", "restart"], timeout=2)
        assert code == -3
        assert "timed out" in message

    def test_os_error(self, fake_run):
        fake_run.state["result"] = PermissionError("denied")
        assert run_command(["valet"])[0] == -2


class TestLoadedIniPath:

    def test_reports_path(self, fake_run):
        fake_run.state["result"] = _completed(0, "/etc/php/8.3/cli/php.ini", "")
        assert str(get_loaded_ini_path("php8.3")) == "/etc/php/8.3/cli/php.ini"
        assert fake_run.calls[0][0] == ["php8.3", "-r", system_utils.LOADED_INI_SNIPPET]

    def test_no_loaded_ini(self, fake_run):
        fake_run.state["result"] = _completed(0, "", "")
        assert get_loaded_ini_path() is None

    def test_php_missing(self, fake_run):
        fake_run.state["result"] = FileNotFoundError("php")
        assert get_loaded_ini_path() is None

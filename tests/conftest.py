"""shared fixtures: temporary ini files, a capturing reporter, default settings"""

import copy
import io

import pytest
from rich.console import Console

from xdebug_toolkit.core import config
from xdebug_toolkit.ui.reporter import Reporter


COMMENTED = ';zend_extension="xdebug.so"'
ACTIVE = 'zend_extension="xdebug.so"'

SAMPLE_INI = (
    "[PHP]\n"
    "memory_limit = 512M\n"
    "; Xdebug\n"
    f"{COMMENTED}\n"
    "xdebug.mode = debug\n"
)


class CapturingReporter(Reporter):
    """reporter writing into a string buffer"""

    def __init__(self):
        self.buffer = io.StringIO()
        super().__init__(console=Console(file=self.buffer, soft_wrap=True, color_system=None))

    @property
    def output(self) -> str:
        return self.buffer.getvalue()


class FakeRunner:
    """records commands instead of spawning them"""

    def __init__(self, result=(0, "Restarted", "")):
        self.result = result
        self.calls = []

    def __call__(self, command, timeout=None):
        self.calls.append((command, timeout))
        return self.result


@pytest.fixture
def reporter():
    return CapturingReporter()


@pytest.fixture
def settings():
    return copy.deepcopy(config.DEFAULT_SETTINGS)


@pytest.fixture
def write_ini(tmp_path):
    """write an ini file into tmp_path and return its path"""

    def _write(name="php.ini", content=SAMPLE_INI):
        path = tmp_path / name
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write

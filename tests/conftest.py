import importlib
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

CORE_DIR = Path(__file__).resolve().parents[1] / 'poc' / 'core'
FIXTURES_DIR = Path(__file__).resolve().parent / 'fixtures'

if str(CORE_DIR) not in sys.path:
    sys.path.insert(0, str(CORE_DIR))

from extraction.command_runner import CommandFailure, CommandResult, CommandRunner  # noqa: E402


def load_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding='utf-8')


class FakeRunner(CommandRunner):
    """
    Canned command outputs keyed by exact command line.

    A str value is returned as successful stdout, a CommandFailure value
    simulates that failure. Unknown commands behave like a missing tool.
    """

    def __init__(self, outputs: Optional[Dict[str, Union[str, CommandFailure]]] = None):
        self.outputs = dict(outputs or {})
        self.calls: List[str] = []

    async def run(self, command_line: str, timeout: Optional[float] = None) -> CommandResult:
        self.calls.append(command_line)
        value = self.outputs.get(command_line, CommandFailure.NOT_FOUND)
        if isinstance(value, CommandFailure):
            return CommandResult(command_line, failure=value, detail='simulated')
        return CommandResult(command_line, stdout=value, returncode=0)


@pytest.fixture()
def add_core_to_path():
    if str(CORE_DIR) not in sys.path:
        sys.path.insert(0, str(CORE_DIR))
    yield CORE_DIR


@pytest.fixture()
def fixture_text():
    return load_fixture


@pytest.fixture()
def fake_runner():
    def make(outputs=None) -> FakeRunner:
        return FakeRunner(outputs)
    return make


@pytest.fixture()
def server_module(add_core_to_path):
    srv = importlib.import_module('wifiscout_server')
    yield srv


@pytest.fixture()
def flask_client(server_module):
    app = server_module.app
    app.config['TESTING'] = True
    with app.test_client() as c:
        yield c


@pytest.fixture()
def template_client(flask_client):
    yield flask_client

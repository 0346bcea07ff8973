import pytest
import sys
from pathlib import Path

# Ensure src/ is in the python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from practiceops.runtime.commands import CommandResult
from practiceops.utils.diagnostics import CommandExecutionError


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def root_dir(tmp_path):
    """
    Returns a temporary directory to act as the repository root for tests.
    """
    return tmp_path


class FakeRunner:
    """
    Stand-in for CommandRunner. Responses are matched by the first registered
    key that appears in the space-joined command; a response is either a
    CommandResult field dict or an exception to raise.
    """

    def __init__(self, responses=None):
        self.responses = list((responses or {}).items())
        self.calls = []

    def add(self, needle, response):
        self.responses.append((needle, response))

    async def run(self, command, timeout_seconds):
        argv = [str(part) for part in command]
        self.calls.append((argv, timeout_seconds))
        joined = " ".join(argv)
        for needle, response in self.responses:
            if needle in joined:
                if isinstance(response, Exception):
                    raise response
                return CommandResult(command=argv, **response)
        return CommandResult(command=argv)

    def commands_containing(self, needle):
        return [argv for argv, _ in self.calls if needle in " ".join(argv)]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def unreachable_runner():
    error = CommandExecutionError("Command failed: docker-compose\nCannot connect to the Docker daemon")
    return FakeRunner({"": error})

import io

import pytest
from rich.console import Console


class ScriptedInput:
    """Line-by-line stdin replacement for rich prompts; raises EOFError when exhausted."""

    def __init__(self, lines):
        self.lines = list(lines)

    def readline(self):
        if not self.lines:
            raise EOFError("scripted input exhausted")
        return self.lines.pop(0) + "\n"


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def scripted():
    return ScriptedInput

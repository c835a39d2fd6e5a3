import io

import pytest

from tinybasic import BasicRuntime


@pytest.fixture
def runtime():
    return BasicRuntime(out=io.StringIO(), err=io.StringIO())


@pytest.fixture
def run(runtime):
    """Load program text, run it, return (result, output lines)."""
    def _run(text):
        runtime.load_text(text)
        runtime.out.seek(0)
        runtime.out.truncate()
        result = runtime.run()
        return result, runtime.out.getvalue().splitlines()
    return _run

import io

import pytest


@pytest.fixture
def output():
    """Captures everything a program prints."""
    return io.StringIO()

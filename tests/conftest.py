import pytest
from asimpy import Environment


@pytest.fixture
def env():
    return Environment()

import pytest

from tests.helpers import FakeStore


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()

import pytest

from decolower.core.config import config


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from the default configuration."""
    config.reset()
    yield
    config.reset()

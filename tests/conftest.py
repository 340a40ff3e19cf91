import pytest

from nino.interpreter import Interpreter
from nino.types.environment import Environment


# Most tests run whole programs through an Interpreter; a few work on a bare
# Environment. NINO_* variables from the host shell must not leak into either.


@pytest.fixture(autouse=True)
def _clean_nino_env(monkeypatch):
    for var in ("NINO_STRICT_TYPES", "NINO_RECURSION_LIMIT", "NINO_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def interp():
    """Fresh interpreter with an empty root environment."""
    return Interpreter(strict_types=False)


@pytest.fixture
def env():
    return Environment()

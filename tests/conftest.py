import pytest

from motescript.Config import Config
from motescript.ScriptHost import ScriptHost
from motescript.Simulation import Simulation
from motescript.TestLog import TestLog


@pytest.fixture(autouse=True)
def restore_config():
    saved = {k: v for k, v in vars(Config).items() if k.isupper()}
    yield
    for k, v in saved.items():
        setattr(Config, k, v)


@pytest.fixture
def sim():
    return Simulation(seed=7)


@pytest.fixture
def attach(sim):
    """Attach a script to the shared simulation and start it."""
    def _attach(script):
        host = ScriptHost(sim, script, TestLog(echo=False))
        host.start()
        return host
    return _attach

import warnings
import pytest

from elevator_sim.controller import ElevatorController

def pytest_configure():
    # flask-restx still imports deprecated helpers on some Python versions
    warnings.filterwarnings("ignore", category=DeprecationWarning)

@pytest.fixture
def controller():
    """Two elevators serving floors 0-10, torn down after the test."""
    controller = ElevatorController(2, 0, 10)
    yield controller
    controller.shutdown()

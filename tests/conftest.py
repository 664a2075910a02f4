"""
Global pytest configuration and fixtures for Threadrunner tests
"""

import logging
import sys
from pathlib import Path

import pytest

# Make the src/ layout importable without installing the package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from threadrunner.core.models import TaskRecord  # noqa: E402
from threadrunner.core.reporter import MemoryReporter  # noqa: E402
from threadrunner.core.work import SimulatedWork  # noqa: E402

# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)

# One task "second" lasts this many real seconds in tests
TIME_SCALE = 0.05


def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "timing: Tests asserting on wall-clock run time")


@pytest.fixture
def reporter():
    """Reporter that keeps messages in memory"""
    return MemoryReporter()


@pytest.fixture
def fast_work():
    """Simulated work with task seconds scaled down"""
    return SimulatedWork(TIME_SCALE)


@pytest.fixture
def make_task():
    """Build a TaskRecord from positional shorthand"""
    def _make(task_id, duration=0, blocking_task=None):
        return TaskRecord(task_id=task_id, duration=duration, blocking_task=blocking_task)
    return _make


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for test files"""
    return tmp_path

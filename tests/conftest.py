"""Shared pytest fixtures for PeakRush tests."""

import sys
import pytest

from loguru import logger
from PyQt6.QtCore import QCoreApplication

from peakrush.timer.config import CueTiming, Intensity, WorkoutConfig
from peakrush.timer.engine import TimerEngine

from helpers import FakeClock


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture
def clock():
    return FakeClock(start=1000.0)


@pytest.fixture
def scenario_config():
    """D=10s, 2 sets, low first."""
    return WorkoutConfig(phase_duration_seconds=10, total_sets=2, start_intensity=Intensity.LOW)


@pytest.fixture
def make_engine(qapp, clock):
    """Factory for engines bound to the fake clock."""
    created = []

    def factory(config=None, **timing_overrides):
        config = config or WorkoutConfig(10, 2, Intensity.LOW)
        engine = TimerEngine(
            config, parent=None, timing=CueTiming(**timing_overrides), clock=clock
        )
        created.append(engine)
        return engine

    yield factory
    for engine in created:
        engine.stop()


@pytest.fixture
def engine(make_engine, scenario_config):
    return make_engine(scenario_config)


@pytest.fixture
def log_records():
    """Capture loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)

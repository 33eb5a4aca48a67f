"""
Shared pytest fixtures for queuesim tests.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Files here persist after tests complete for easy access.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/
    """
    module_name = request.module.__name__.split(".")[-1]
    test_name = request.node.name

    test_dir = test_output_root / module_name / test_name
    test_dir.mkdir(parents=True, exist_ok=True)
    return test_dir


@pytest.fixture(autouse=True)
def reset_queuesim_logging():
    """Reset the queuesim logger to its silent library default around each test."""
    logger = logging.getLogger("queuesim")

    def reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            if not isinstance(handler, logging.NullHandler):
                handler.close()
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.NOTSET)

    reset()
    yield
    reset()


class ScriptedRng:
    """Stand-in for numpy.random.Generator that replays fixed draws.

    ``exponential(scale)`` returns the next arrival gap when called with the
    arrival scale and the next service time otherwise. Once the arrival gaps
    are used up it returns a huge gap so no further arrivals happen.
    ``normal(loc, scale)`` also replays ``service_times``.
    ``random()`` replays ``uniforms``.
    """

    def __init__(
        self,
        arrival_scale: float,
        arrival_gaps: Iterable[float] = (),
        service_times: Iterable[float] = (),
        uniforms: Iterable[float] = (),
    ):
        self.arrival_scale = arrival_scale
        self._gaps = list(arrival_gaps)
        self._services = list(service_times)
        self._uniforms = list(uniforms)
        self.service_scales: list[float] = []
        self.normal_params: list[tuple[float, float]] = []

    def exponential(self, scale: float) -> float:
        if scale == self.arrival_scale:
            return self._gaps.pop(0) if self._gaps else 1e12
        self.service_scales.append(scale)
        if not self._services:
            raise AssertionError("ScriptedRng ran out of service times")
        return self._services.pop(0)

    def normal(self, loc: float, scale: float) -> float:
        self.normal_params.append((loc, scale))
        if not self._services:
            raise AssertionError("ScriptedRng ran out of service times")
        return self._services.pop(0)

    def random(self) -> float:
        if not self._uniforms:
            raise AssertionError("ScriptedRng ran out of uniform draws")
        return self._uniforms.pop(0)


@pytest.fixture
def scripted_rng():
    """Factory fixture building a ScriptedRng."""
    return ScriptedRng

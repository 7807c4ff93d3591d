"""Pytest configuration and shared fixtures for membrane planning tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from foilplan.domain import (
    PlannerSettings,
    StairsSpec,
    VesselGeometry,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "configs"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "scenario: end-to-end planning scenarios")
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


@pytest.fixture
def settings() -> PlannerSettings:
    """Standard roll catalogue: 1.65/2.05 m wide, 25 m long."""
    return PlannerSettings()


@pytest.fixture
def family_pool() -> VesselGeometry:
    """10 x 5 x 1.5 m pool, the reference mixed-width vessel."""
    return VesselGeometry(length=10.0, width=5.0, depth=1.5)


@pytest.fixture
def small_pool() -> VesselGeometry:
    """8 x 4 x 1.5 m pool whose floor is covered exactly by two wide strips."""
    return VesselGeometry(length=8.0, width=4.0, depth=1.5)


@pytest.fixture
def pool_with_stairs() -> VesselGeometry:
    """10 x 5 x 1.5 m pool with 1.5 m wide entry stairs."""
    return VesselGeometry(length=10.0, width=5.0, depth=1.5, stairs=StairsSpec(width=1.5))


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR

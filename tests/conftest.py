"""Shared fixtures for the gridfarm test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from gridfarm.scenario.scenario import Scenario
from gridfarm.simulation.config import GameConfig
from gridfarm.simulation.session import Session
from gridfarm.world.grid import TileGrid


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_grid() -> TileGrid:
    """A small 6x6 grid for fast tests."""
    return TileGrid(rows=6, cols=6)


@pytest.fixture
def small_config() -> GameConfig:
    """An 8x8 config (no YAML file needed)."""
    return GameConfig(seed=7, viewport_width=256, viewport_height=256, cell_size=32)


@pytest.fixture
def basic_scenario() -> Scenario:
    """The shipped three-period scenario."""
    return Scenario.basic_farming()


@pytest.fixture
def session(small_config: GameConfig, basic_scenario: Scenario) -> Session:
    """A fresh 8x8 session with the basic scenario."""
    return Session(config=small_config, scenario=basic_scenario)

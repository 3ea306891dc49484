"""
Shared pytest fixtures for ForceBubbles tests

Supports both development mode (python -m forcebubbles) and installed mode (pip install -e .)
"""
import pytest
from pathlib import Path
import sys


@pytest.fixture(scope="session", autouse=True)
def setup_forcebubbles_path():
    """
    Add repository root to Python path for development mode

    Structure:
      forcebubbles-repo/            <- repo root (need to add this to sys.path)
      └── forcebubbles/             <- package
          ├── __init__.py
          ├── layout/
          └── tests/
              └── conftest.py       <- we are here
    """
    repo_root = Path(__file__).parent.parent.parent

    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


@pytest.fixture(scope="session", autouse=True)
def headless_matplotlib():
    """Render off-screen"""
    import matplotlib
    matplotlib.use("Agg")


@pytest.fixture(scope="session")
def sample_csv() -> Path:
    """Built-in World Bank style sample (2000-2004)"""
    from forcebubbles.data import DEFAULT_POPULATION_CSV
    return Path(DEFAULT_POPULATION_CSV)


@pytest.fixture
def unit_config():
    """
    Small canvas with k = 1 so radii equal sqrt(value)

    Values 100, 400, 900 give radii 10, 20, 30.
    """
    from forcebubbles.config import PlotConfig
    config = PlotConfig()
    config.layout.width = 200.0
    config.layout.height = 200.0
    config.layout.radius_scale = 1.0
    return config


@pytest.fixture
def usa_rows():
    """Single entity over 2000-2002 plus an aggregate that must be dropped"""
    return [
        {'code': 'USA', 'name': 'United States', 'dseries': [100, 400, 900]},
        {'code': 'WLD', 'name': 'World', 'dseries': [10000, 10000, 10000]},
    ]


@pytest.fixture
def neighbour_rows():
    """Two entities that end up touching in the settled layout"""
    return [
        {'code': 'USA', 'name': 'United States', 'dseries': [400, 400, 400]},
        {'code': 'CAN', 'name': 'Canada', 'dseries': [225, 225, 225]},
    ]


@pytest.fixture
def started_vis(unit_config, usa_rows):
    """Visualisation started on usa_rows, entrance not yet played"""
    from forcebubbles.session import Visualisation
    vis = Visualisation(unit_config)
    vis.set_year_range(2000, 2002)
    vis.start(usa_rows)
    return vis


# Pytest configuration
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests driving a full visualisation session"
    )
    config.addinivalue_line(
        "markers", "rendering: Tests writing PNG or GIF output"
    )

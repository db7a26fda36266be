"""
Pytest configuration and shared fixtures.

Test categories:
- Unit tests: run by default, no external services
- Integration tests: SQLAlchemy stores against a real database engine

Running tests:
    pytest                        # Unit tests only (default)
    pytest --run-integration      # Include integration tests
    pytest --run-all              # Run everything
    RUN_INTEGRATION=1 pytest      # Via environment variable
"""

import os

import pytest
from dotenv import load_dotenv

from veris_config import clear_settings_cache, get_config_dir

# Load test environment if present, then make sure the required secrets
# exist so that Settings() can be constructed in every test.
_env_file = get_config_dir() / ".env.test"
if _env_file.exists():
    load_dotenv(_env_file, override=False)

os.environ.setdefault("JWT_SECRET_KEY", "test-access-secret-0123456789")
os.environ.setdefault("JWT_REFRESH_SECRET_KEY", "test-refresh-secret-9876543210")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests (SQLAlchemy stores on aiosqlite)",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests including integration",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that need a database engine",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly requested."""
    run_all = config.getoption("--run-all") or os.environ.get(
        "RUN_ALL_TESTS",
        "",
    ).lower() in ("1", "true", "yes")

    run_integration = (
        run_all
        or config.getoption("--run-integration")
        or os.environ.get("RUN_INTEGRATION", "").lower() in ("1", "true", "yes")
    )

    skip_integration = pytest.mark.skip(
        reason="Integration test - use --run-integration or RUN_INTEGRATION=1",
    )

    for item in items:
        markers = {marker.name for marker in item.iter_markers()}
        if "integration" in markers and not run_integration:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so env changes in one test don't leak into the next."""
    clear_settings_cache()
    yield
    clear_settings_cache()

"""
Test Configuration and Fixtures

- Environment is set before any src module is imported (settings read env at import)
- Lock store runs in-memory; the order ledger uses a per-test SQLite file
- Unit tests (test/**/unit/) use mocks; integration tests use real SQLite + the in-memory store
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    os.environ['SEAT_LOCK_KEY_PREFIX'] = 'test_' if worker_id == 'master' else f'test_{worker_id}_'
    os.environ['SEAT_LOCK_BACKEND'] = 'memory'
    os.environ.setdefault('DEBUG', 'true')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['VENUE_LAYOUT_PATH'] = str(Path(__file__).parent / 'fixture' / 'venue_layout.json')


_early_setup_test_environment()

from collections.abc import Generator  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    # File, not :memory:, so every pooled connection sees the same tables
    return f'sqlite+aiosqlite:///{tmp_path / "orders.db"}'


@pytest.fixture
def client(sqlite_url: str, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """Full app (lifespan included) on the in-memory lock store and a fresh ledger"""
    monkeypatch.setenv('DATABASE_URL', sqlite_url)

    from src.platform.config.di import container
    from src.main import app

    container.reset_singletons()
    with TestClient(app) as test_client:
        yield test_client

"""
Pytest configuration for tests.

Every test gets its own data directory (so config writes never touch
~/.press-sync) and a fresh in-memory SQLite store.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import press_sync.database as db_module
from press_sync.config import OutletConfig
from press_sync.database import init_db


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    """Point config loading/saving at a temporary directory."""
    monkeypatch.setenv("PRESS_SYNC_DATA_DIR", str(tmp_path))
    for name in (
        "PRESS_SYNC_GATEWAY_URL",
        "PRESS_SYNC_INSTALLER_API",
        "PRESS_SYNC_AI_ENDPOINT",
        "PRESS_SYNC_DATABASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def press_db():
    """Set up an in-memory SQLite database for each test."""
    db_module.reset_engine()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    db_module._engine = engine
    db_module._SessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )

    init_db(engine)

    yield engine

    db_module.reset_engine()


@pytest.fixture
def db_session():
    """Get a database session for direct DB manipulation in tests."""
    session = db_module.get_session()
    yield session
    session.close()


@pytest.fixture
def make_config():
    """Factory for a fully configured OutletConfig. Override any field."""

    def _make(**overrides) -> OutletConfig:
        defaults = dict(
            gateway_url="https://gateway.test",
            installer_api="https://installer.test",
            rpc_url="https://rpc.test",
            press_token="0xPRESSTOKEN",
            treasury_wallet="0xTREASURY",
            publish_fee_press=25.0,
            ai_endpoint="https://oracle.test/api/moderate",
            outlet_domain="news.test",
            coauthor_fee_press=5.0,
        )
        defaults.update(overrides)
        return OutletConfig(**defaults)

    return _make

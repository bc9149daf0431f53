"""Pytest configuration and shared fixtures for connection tests"""

import os
from pathlib import Path
from typing import Generator, Optional

import pytest
from dotenv import load_dotenv

from db_connection import DatabaseConfig, DatabaseConnection

# Load environment variables
load_dotenv()


# ==================== SQLite Fixtures ====================


@pytest.fixture
def sqlite_config() -> DatabaseConfig:
    """In-memory SQLite configuration"""
    return DatabaseConfig(dialect="sqlite")


@pytest.fixture
def db(sqlite_config: DatabaseConfig) -> Generator[DatabaseConnection, None, None]:
    """Open in-memory SQLite connection with proper cleanup"""
    connection = DatabaseConnection(sqlite_config)
    assert connection.initialize()
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture
def seeded_db(db: DatabaseConnection) -> DatabaseConnection:
    """Connection with an empty auto-increment table ``t(id, name)``"""
    db.execute(
        "CREATE TABLE t (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL)"
    ).unwrap()
    return db


@pytest.fixture
def sqlite_files(tmp_path: Path) -> tuple[str, str]:
    """Two SQLite database files for re-targeting tests"""
    return str(tmp_path / "first.db"), str(tmp_path / "second.db")


# ==================== MySQL Fixtures ====================


@pytest.fixture(scope="session")
def mysql_host() -> Optional[str]:
    """MySQL test host from environment"""
    return os.getenv("MYSQL_TEST_HOST")


@pytest.fixture
def mysql_config(mysql_host: Optional[str]) -> DatabaseConfig:
    """MySQL database configuration"""
    if not mysql_host:
        pytest.skip("MYSQL_TEST_HOST not set in environment")
    return DatabaseConfig(
        dialect="mysql",
        host=mysql_host,
        port=os.getenv("MYSQL_TEST_PORT") or None,
        user=os.getenv("MYSQL_TEST_USER", "root"),
        password=os.getenv("MYSQL_TEST_PASSWORD", ""),
        database=os.getenv("MYSQL_TEST_DATABASE", "test"),
    )


@pytest.fixture
def mysql_connection(
    mysql_config: DatabaseConfig,
) -> Generator[DatabaseConnection, None, None]:
    """MySQL database connection with proper cleanup"""
    connection = DatabaseConnection(mysql_config)
    if not connection.initialize():
        pytest.skip(f"MySQL unavailable: {connection.last_error}")
    try:
        yield connection
    finally:
        connection.close()


# ==================== PostgreSQL Fixtures ====================


@pytest.fixture(scope="session")
def pg_host() -> Optional[str]:
    """PostgreSQL test host from environment"""
    return os.getenv("PG_TEST_HOST")


@pytest.fixture
def pg_config(pg_host: Optional[str]) -> DatabaseConfig:
    """PostgreSQL database configuration"""
    if not pg_host:
        pytest.skip("PG_TEST_HOST not set in environment")
    return DatabaseConfig(
        dialect="postgresql",
        host=pg_host,
        port=os.getenv("PG_TEST_PORT") or None,
        user=os.getenv("PG_TEST_USER", "postgres"),
        password=os.getenv("PG_TEST_PASSWORD", ""),
        database=os.getenv("PG_TEST_DATABASE", "test"),
    )


@pytest.fixture
def pg_connection(
    pg_config: DatabaseConfig,
) -> Generator[DatabaseConnection, None, None]:
    """PostgreSQL database connection with proper cleanup"""
    connection = DatabaseConnection(pg_config)
    if not connection.initialize():
        pytest.skip(f"PostgreSQL unavailable: {connection.last_error}")
    try:
        yield connection
    finally:
        connection.close()


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "mysql: MySQL-specific tests")
    config.addinivalue_line("markers", "postgresql: PostgreSQL-specific tests")
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring database"
    )

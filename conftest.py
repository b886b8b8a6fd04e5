from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from dbbrowser.config.models import ConnectionDescriptor, EngineKind


@pytest.fixture
def sample_db(tmp_path: Path) -> Path:
    """Provide a SQLite database with two tables and a view."""
    db_path = tmp_path / "sample.db"
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT
        );

        CREATE TABLE orders (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER,
            amount REAL
        );

        INSERT INTO users (name, email) VALUES
            ('Alice Johnson', 'alice@example.com'),
            ('Bob Smith', NULL);

        INSERT INTO orders (user_id, amount) VALUES (1, 150.0), (2, 89.5);

        CREATE VIEW user_orders AS
        SELECT u.name, o.amount FROM users u JOIN orders o ON u.id = o.user_id;
    """)
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def sqlite_descriptor(sample_db: Path) -> ConnectionDescriptor:
    return ConnectionDescriptor(name="sample", engine=EngineKind.SQLITE, file_path=str(sample_db))

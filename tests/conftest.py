import sqlite3

import pytest

from authentication import CredentialVerifier
from db_config import DbConfig

USUARIOS = [
    ("alice", "pw1", "Alice A"),
    ("bob", "segredo", "Bob B"),
    ("' OR '1'='1", "' OR '1'='1", "Injetado"),
    ("semnome", "x", None),
]


class TrackingConnection:
    """sqlite3 connection wrapper that records whether it and its cursors were closed."""

    def __init__(self, path):
        self._conn = sqlite3.connect(path)
        self.closed = False
        self.cursors = []

    def cursor(self):
        cur = TrackingCursor(self._conn.cursor())
        self.cursors.append(cur)
        return cur

    def close(self):
        self.closed = True
        self._conn.close()


class TrackingCursor:
    def __init__(self, cur):
        self._cur = cur
        self.closed = False
        self.executed = []

    def execute(self, sql, params=()):
        self.executed.append((sql, params))
        return self._cur.execute(sql, params)

    def fetchone(self):
        return self._cur.fetchone()

    def fetchall(self):
        return self._cur.fetchall()

    @property
    def description(self):
        return self._cur.description

    def close(self):
        self.closed = True
        self._cur.close()


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "connectiondb.sqlite"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE usuarios (login TEXT, senha TEXT, nome TEXT)")
    conn.executemany("INSERT INTO usuarios VALUES (?, ?, ?)", USUARIOS)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def connections():
    return []


@pytest.fixture
def sqlite_connect(db_path, connections):
    def connect(config):
        conn = TrackingConnection(db_path)
        connections.append(conn)
        return conn

    return connect


@pytest.fixture
def config():
    return DbConfig(user="app", password="app-pw")


@pytest.fixture
def verifier(config, sqlite_connect):
    return CredentialVerifier(config, connect=sqlite_connect, db_errors=(sqlite3.Error,))

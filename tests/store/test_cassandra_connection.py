"""Tests for the shared Cassandra session helpers."""

from unittest.mock import MagicMock

import pytest

from course_users.config.settings import Settings
from course_users.core.database import cassandra
from course_users.core.database.cassandra import (
    CassandraConnection,
    create_schema,
    keyspace_replication,
    open_store_session,
)
from course_users.store import STORE_TABLES_CQL, StoreUnavailableError


@pytest.fixture(autouse=True)
def reset_connection():
    """Each test starts and ends without a shared session."""
    CassandraConnection.cluster = CassandraConnection.session = None
    yield
    CassandraConnection.cluster = CassandraConnection.session = None


@pytest.fixture
def cluster(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    mock = MagicMock()
    monkeypatch.setattr(cassandra, "build_cluster", lambda settings: mock)
    return mock


class TestCassandraConnection:
    """Tests for CassandraConnection."""

    def test_open_reuses_session(self, cluster: MagicMock) -> None:
        """The session is opened once per process."""
        first = CassandraConnection.open(Settings())
        second = CassandraConnection.open(Settings())

        assert first is second
        cluster.connect.assert_called_once()

    def test_open_failure(self, cluster: MagicMock) -> None:
        """Unreachable clusters are shut down and reported as unavailable."""
        cluster.connect.side_effect = OSError("connection refused")

        with pytest.raises(StoreUnavailableError) as exc_info:
            CassandraConnection.open(Settings())

        assert exc_info.value.code == "store_unavailable"
        cluster.shutdown.assert_called_once()
        assert CassandraConnection.session is None

    def test_close(self, cluster: MagicMock) -> None:
        """Closing shuts down session and cluster."""
        session = CassandraConnection.open(Settings())

        CassandraConnection.close()

        session.shutdown.assert_called_once()
        cluster.shutdown.assert_called_once()
        assert CassandraConnection.session is None

    def test_open_store_session_sets_keyspace(self, cluster: MagicMock) -> None:
        """The shared session is bound to the configured keyspace."""
        session = open_store_session(Settings(cassandra_keyspace="reports"))

        session.set_keyspace.assert_called_once_with("reports")


class TestSchema:
    """Tests for keyspace and table creation."""

    def test_replication_by_environment(self) -> None:
        """Production keyspaces get three replicas."""
        assert "NetworkTopologyStrategy" in keyspace_replication(
            Settings(environment="production")
        )
        assert "'replication_factor': 1" in keyspace_replication(
            Settings(environment="development")
        )

    def test_create_schema(self) -> None:
        """Keyspace first, then every store table in that keyspace."""
        session = MagicMock()

        create_schema(session, "reports", Settings(environment="development"))

        statements = [call.args[0] for call in session.execute.call_args_list]
        assert len(statements) == 1 + len(STORE_TABLES_CQL)
        assert "CREATE KEYSPACE IF NOT EXISTS reports" in statements[0]
        assert "{'class': 'SimpleStrategy', 'replication_factor': 1}" in statements[0]
        assert all("reports." in statement for statement in statements[1:])

"""Cassandra session for the learning store.

The course, enrollment, user and progress tables belong to the learning
platform. The service opens one shared session at startup and only reads
from it. ``create_schema`` exists for development databases seeded by
``scripts/init_schema.py``.
"""

import structlog
from cassandra.auth import PlainTextAuthProvider
from cassandra.cluster import Cluster, Session
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy

from course_users.config.settings import Settings, get_settings
from course_users.store.base import StoreUnavailableError
from course_users.store.models import STORE_TABLES_CQL


logger = structlog.get_logger(__name__)

KEYSPACE_CQL = """
CREATE KEYSPACE IF NOT EXISTS {keyspace}
WITH replication = {replication}
AND durable_writes = true
"""


def build_cluster(settings: Settings) -> Cluster:
    """Cluster configured from the ``cassandra_*`` settings."""
    credentials = None
    if settings.cassandra_username and settings.cassandra_password:
        credentials = PlainTextAuthProvider(
            username=settings.cassandra_username,
            password=settings.cassandra_password,
        )

    return Cluster(
        contact_points=settings.cassandra_hosts,
        port=settings.cassandra_port,
        auth_provider=credentials,
        protocol_version=settings.cassandra_protocol_version,
        load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy()),
        connect_timeout=settings.cassandra_connect_timeout,
    )


class CassandraConnection:
    """Process-wide cluster and session shared by every request."""

    cluster: Cluster | None = None
    session: Session | None = None

    @classmethod
    def open(cls, settings: Settings | None = None) -> Session:
        """Open the shared session, or return the one already open.

        Raises:
            StoreUnavailableError: If no contact point answers
        """
        if cls.session is not None:
            return cls.session

        settings = settings or get_settings()
        cluster = build_cluster(settings)
        try:
            session = cluster.connect()
        except Exception as e:
            logger.error(
                "learning_store_unreachable",
                hosts=settings.cassandra_hosts,
                error=str(e),
            )
            cluster.shutdown()
            raise StoreUnavailableError(f"Failed to connect to Cassandra: {e}") from e

        cls.cluster, cls.session = cluster, session
        logger.info(
            "learning_store_connected",
            hosts=settings.cassandra_hosts,
            port=settings.cassandra_port,
        )
        return session

    @classmethod
    def close(cls) -> None:
        """Shut down the shared session and its cluster."""
        if cls.session is None and cls.cluster is None:
            return

        if cls.session is not None:
            cls.session.shutdown()
        if cls.cluster is not None:
            cls.cluster.shutdown()
        cls.cluster = cls.session = None
        logger.info("learning_store_closed")


def keyspace_replication(settings: Settings) -> str:
    """Replication map for a new keyspace: 3 replicas in production, else 1."""
    if settings.is_production:
        return "{'class': 'NetworkTopologyStrategy', 'datacenter1': 3}"
    return "{'class': 'SimpleStrategy', 'replication_factor': 1}"


def create_schema(
    session: Session, keyspace: str, settings: Settings | None = None
) -> None:
    """Create the keyspace and the store tables when missing."""
    settings = settings or get_settings()

    session.execute(
        KEYSPACE_CQL.format(
            keyspace=keyspace, replication=keyspace_replication(settings)
        )
    )
    for cql in STORE_TABLES_CQL:
        session.execute(cql.format(keyspace=keyspace))

    logger.info("store_schema_ready", keyspace=keyspace, tables=len(STORE_TABLES_CQL))


def open_store_session(settings: Settings | None = None) -> Session:
    """Shared session bound to the configured keyspace."""
    settings = settings or get_settings()

    session = CassandraConnection.open(settings)
    session.set_keyspace(settings.cassandra_keyspace)

    logger.info("learning_store_keyspace_set", keyspace=settings.cassandra_keyspace)
    return session


def close_store_session() -> None:
    CassandraConnection.close()

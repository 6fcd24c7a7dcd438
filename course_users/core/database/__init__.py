"""Cassandra access for the learning store."""

from course_users.core.database.cassandra import (
    CassandraConnection,
    close_store_session,
    create_schema,
    open_store_session,
)


__all__ = [
    "CassandraConnection",
    "close_store_session",
    "create_schema",
    "open_store_session",
]

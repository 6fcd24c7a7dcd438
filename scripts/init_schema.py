"""Create the learning store schema, optionally loading a seed file.

Development helper: in production the tables are owned and filled by the
learning platform, and this service only reads them.

Usage:
    python -m scripts.init_schema
    python -m scripts.init_schema --seed seed.json
"""

import argparse
from pathlib import Path

import orjson
import structlog
from cassandra.cluster import Session

from course_users.config.settings import get_settings
from course_users.core.database import CassandraConnection, create_schema


logger = structlog.get_logger(__name__)


INSERT_STATEMENTS = {
    "courses": (
        "INSERT INTO {keyspace}.courses (id, title, status, kind) "
        "VALUES (?, ?, ?, ?)"
    ),
    "enrollments": (
        "INSERT INTO {keyspace}.course_enrollments (course_id, position, user_id) "
        "VALUES (?, ?, ?)"
    ),
    "users": "INSERT INTO {keyspace}.users (id, login, email) VALUES (?, ?, ?)",
    "progress": (
        "INSERT INTO {keyspace}.course_progress "
        "(user_id, course_id, completed, total, status) VALUES (?, ?, ?, ?, ?)"
    ),
}


def load_seed(session: Session, keyspace: str, seed_path: Path) -> dict[str, int]:
    """Insert the contents of a seed document (same shape as the memory store).

    Returns:
        Number of rows written per table
    """
    data = orjson.loads(seed_path.read_bytes())
    statements = {
        name: session.prepare(cql.format(keyspace=keyspace))
        for name, cql in INSERT_STATEMENTS.items()
    }
    counts = dict.fromkeys(INSERT_STATEMENTS, 0)

    for course in data.get("courses", []):
        session.execute(
            statements["courses"],
            [
                int(course["id"]),
                course.get("title", ""),
                course.get("status", "publish"),
                course.get("kind", "course"),
            ],
        )
        counts["courses"] += 1

    for course_id, user_ids in data.get("enrollments", {}).items():
        for position, user_id in enumerate(user_ids):
            session.execute(
                statements["enrollments"], [int(course_id), position, int(user_id)]
            )
            counts["enrollments"] += 1

    for user in data.get("users", []):
        session.execute(
            statements["users"],
            [int(user["id"]), user.get("login", ""), user.get("email", "")],
        )
        counts["users"] += 1

    for item in data.get("progress", []):
        session.execute(
            statements["progress"],
            [
                int(item["user_id"]),
                int(item["course_id"]),
                item.get("completed"),
                item.get("total"),
                item.get("status"),
            ],
        )
        counts["progress"] += 1

    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", type=Path, help="JSON seed file to load")
    args = parser.parse_args()

    settings = get_settings()
    keyspace = settings.cassandra_keyspace

    logger.info(
        "schema_init_starting",
        keyspace=keyspace,
        hosts=settings.cassandra_hosts,
    )

    session = CassandraConnection.open(settings)
    try:
        create_schema(session, keyspace, settings)
        if args.seed:
            counts = load_seed(session, keyspace, args.seed)
            logger.info("seed_loaded", path=str(args.seed), **counts)
        logger.info("schema_init_completed", keyspace=keyspace)
    finally:
        CassandraConnection.close()


if __name__ == "__main__":
    main()

"""Shared fixtures: an in-memory learning store and an app wired to it."""

import os
import tempfile


# Settings are cached on first use, so the environment is fixed before any
# course_users import.
os.environ["ENVIRONMENT"] = "testing"
os.environ["STORE_BACKEND"] = "memory"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="course-users-logs-")
os.environ["LOG_FORMAT"] = "json"
os.environ.pop("ADMIN_API_KEY", None)
os.environ.pop("STORE_SEED_PATH", None)

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from course_users.store import (  # noqa: E402
    Course,
    InMemoryLearningStore,
    ProgressRecord,
    UserRecord,
)
from course_users.store.dependencies import get_learning_store  # noqa: E402


@pytest.fixture
def store() -> InMemoryLearningStore:
    """Store with a mix of listable, hidden, empty and broken courses.

    - 5 "Pharmacology Basics": users 1 and 2 enrolled
    - 7 "Advanced Dosage": nobody enrolled
    - 8 "Clinical Cases": only a deleted user (99) enrolled
    - 9 "<b>Bold</b> & Co": user 3 with markup in name/email
    - 3 draft, 4 lesson: never listed
    """
    return InMemoryLearningStore(
        courses=[
            Course(id=7, title="Advanced Dosage"),
            Course(id=5, title="Pharmacology Basics"),
            Course(id=8, title="clinical Cases"),
            Course(id=3, title="Draft Course", status="draft"),
            Course(id=4, title="A Lesson", kind="lesson"),
            Course(id=9, title="<b>Bold</b> & Co"),
        ],
        users=[
            UserRecord(id=1, login="alice", email="alice@example.com"),
            UserRecord(id=2, login="bob", email="bob@example.com"),
            UserRecord(
                id=3,
                login="<script>alert(1)</script>",
                email='"evil"@example.com',
            ),
        ],
        enrollments={5: [1, 2], 7: [], 8: [99], 9: [3]},
        progress={
            (1, 5): ProgressRecord(completed=3, total=4, status=None),
            (2, 5): ProgressRecord(completed=0, total=0, status="completed"),
            (3, 9): ProgressRecord(completed=1, total=3, status="in_progress"),
        },
    )


@pytest.fixture
def app(store: InMemoryLearningStore) -> FastAPI:
    """Application with the learning store dependency pointed at the fixture."""
    from course_users.main import create_app

    application = create_app()
    application.dependency_overrides[get_learning_store] = lambda: store
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client for the application."""
    return TestClient(app)

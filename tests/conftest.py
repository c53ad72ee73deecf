import os
import shutil
from datetime import datetime, timedelta, timezone

TEST_DB_FILE = "test_coursehub.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"
TEST_UPLOAD_DIR = "./test_uploads"

# must be set before coursehub.core.config is imported
os.environ["COURSEHUB_DATABASE_URL"] = TEST_DB_URL
os.environ["COURSEHUB_UPLOAD_DIR"] = TEST_UPLOAD_DIR

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from coursehub.core.deps import get_db  # noqa: E402
from coursehub.db.base_class import Base  # noqa: E402
from coursehub.main import app  # noqa: E402
from coursehub.models.assignment import Assignment  # noqa: E402
from coursehub.models.submission import Submission  # noqa: E402

INSTRUCTOR_ID = 10
OTHER_INSTRUCTOR_ID = 11
STUDENT_ID = 1
OTHER_STUDENT_ID = 2

# seeded assignment ids
OPEN_HW = 1  # due tomorrow, late not allowed
LATE_OK_HW = 2  # 2 days late if submitted now, late allowed, 10%/day penalty
CLOSED_HW = 3  # 1 day late if submitted now, late not allowed
FOREIGN_HW = 4  # belongs to another instructor

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def as_user(user_id: int, role: str) -> dict:
    return {"X-User-Id": str(user_id), "X-User-Role": role}


def student_headers(user_id: int = STUDENT_ID) -> dict:
    return as_user(user_id, "student")


def instructor_headers(user_id: int = INSTRUCTOR_ID) -> dict:
    return as_user(user_id, "instructor")


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)
    shutil.rmtree(TEST_UPLOAD_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def seed_data():
    """Seed a clean minimal dataset for each test."""
    now = datetime.now(timezone.utc)
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        db.query(Submission).delete()
        db.query(Assignment).delete()
        db.commit()

        db.add_all(
            [
                Assignment(
                    id=OPEN_HW,
                    instructor_id=INSTRUCTOR_ID,
                    title="HW1",
                    due_at=now + timedelta(days=1),
                    max_points=100,
                    allow_late_submissions=False,
                ),
                Assignment(
                    id=LATE_OK_HW,
                    instructor_id=INSTRUCTOR_ID,
                    title="HW2",
                    due_at=now - timedelta(days=2) + timedelta(minutes=5),
                    max_points=50,
                    allow_late_submissions=True,
                    late_penalty_percent_per_day=10,
                ),
                Assignment(
                    id=CLOSED_HW,
                    instructor_id=INSTRUCTOR_ID,
                    title="HW3",
                    due_at=now - timedelta(days=1) + timedelta(minutes=5),
                    max_points=100,
                    allow_late_submissions=False,
                ),
                Assignment(
                    id=FOREIGN_HW,
                    instructor_id=OTHER_INSTRUCTOR_ID,
                    title="Other course HW",
                    due_at=now + timedelta(days=3),
                    max_points=10,
                ),
            ]
        )
        db.commit()

        yield
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

import os
import sys
from contextlib import contextmanager

import pytest

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

# до импорта приложения: settings читаются при импорте
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from school_directory.domain.entities import Student, Teacher
from school_directory.infrastructure.db import get_db
from school_directory.infrastructure.models import Base
from school_directory.infrastructure.repositories import DirectoryRepository
from school_directory.main import app

# Тестовая БД в памяти, одно соединение на все сессии
test_engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def open_repo():
    """Репозиторий на свежей сессии: видит всё, что закоммитили запросы."""
    db = TestingSessionLocal()
    try:
        yield DirectoryRepository(db)
    finally:
        db.close()


def seed_roster(teacher_email, student_emails, suspended=()):
    with open_repo() as repo:
        teacher = repo.get_teacher(teacher_email) or Teacher(id=None, email=teacher_email)
        teacher.enroll(Student(id=None, email=e) for e in student_emails)
        repo.save_roster(teacher)
        for email in suspended:
            student = repo.get_student(email)
            student.is_suspended = True
            repo.suspend_student(student)


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def repo():
    with open_repo() as r:
        yield r


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)

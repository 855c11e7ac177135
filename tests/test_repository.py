import pytest

from conftest import open_repo, seed_roster
from school_directory.domain.entities import Student, Teacher
from school_directory.domain.errors import InternalError
from school_directory.infrastructure.models import teacher_students
from school_directory.infrastructure.repositories import DirectoryRepository


def test_save_roster_creates_identities(repo):
    teacher = Teacher(id=None, email="t1@teacher.com")
    teacher.enroll([Student(id=None, email="s1@student.com"), Student(id=None, email="s2@student.com")])

    saved = repo.save_roster(teacher)
    assert saved.id is not None
    assert all(s.id is not None for s in saved.students)

    with open_repo() as fresh:
        stored = fresh.get_teacher("t1@teacher.com")
        assert stored.id == saved.id
        assert stored.roster_emails() == {"s1@student.com", "s2@student.com"}
        assert fresh.get_student("s1@student.com").is_suspended is False


def test_save_roster_is_idempotent(repo):
    seed_roster("t1@teacher.com", ["s1@student.com"])
    seed_roster("t1@teacher.com", ["s1@student.com"])

    with open_repo() as fresh:
        assert len(fresh.get_teacher("t1@teacher.com").students) == 1


def test_unsaved_duplicates_converge_on_one_row(repo):
    """Два учителя независимо решили создать одного студента"""
    for t in ("t1@teacher.com", "t2@teacher.com"):
        teacher = Teacher(id=None, email=t)
        teacher.enroll([Student(id=None, email="s1@student.com")])
        repo.save_roster(teacher)

    with open_repo() as fresh:
        ids = {s.id for t in fresh.get_teachers(["t1@teacher.com", "t2@teacher.com"]) for s in t.students}
        assert len(ids) == 1


def test_role_collision_rolls_back(repo):
    seed_roster("t1@teacher.com", ["s1@student.com"])

    teacher = Teacher(id=None, email="t2@teacher.com")
    teacher.enroll([Student(id=None, email="s2@student.com"), Student(id=None, email="t1@teacher.com")])
    with pytest.raises(InternalError):
        repo.save_roster(teacher)

    with open_repo() as fresh:
        assert fresh.get_teacher("t2@teacher.com") is None
        assert fresh.get_student("s2@student.com") is None


def test_get_users_by_emails_returns_both_roles(repo):
    seed_roster("t1@teacher.com", ["s1@student.com"])
    users = repo.get_users_by_emails(["t1@teacher.com", "s1@student.com", "nobody@x.com"])
    assert {(u.role, u.email) for u in users} == {
        ("teacher", "t1@teacher.com"),
        ("student", "s1@student.com"),
    }


def test_get_active_students_skips_suspended(repo):
    seed_roster("t1@teacher.com", ["s1@student.com", "s2@student.com"], suspended=["s2@student.com"])
    active = repo.get_active_students(["s1@student.com", "s2@student.com", "s3@student.com"])
    assert [s.email for s in active] == ["s1@student.com"]


def test_empty_lookups(repo):
    assert repo.get_users_by_emails([]) == []
    assert repo.get_teachers([]) == []
    assert repo.get_active_students([]) == []


def test_database_error_rolls_back(repo):
    """Настоящая ошибка БД: откат, метрика, InternalError"""
    from prometheus_client import REGISTRY
    from conftest import test_engine

    before = REGISTRY.get_sample_value("persistence_errors_total") or 0.0
    teacher_students.drop(bind=test_engine)

    teacher = Teacher(id=None, email="t1@teacher.com")
    teacher.enroll([Student(id=None, email="s1@student.com")])
    with pytest.raises(InternalError):
        repo.save_roster(teacher)

    assert REGISTRY.get_sample_value("persistence_errors_total") == before + 1
    with open_repo() as fresh:
        assert fresh.get_users_by_emails(["t1@teacher.com", "s1@student.com"]) == []


def test_unsupported_dialect_rolls_back(repo, monkeypatch):
    monkeypatch.setattr(DirectoryRepository, "dialect", property(lambda self: "mysql"))
    repo.get_users_by_emails(["t1@teacher.com"])
    assert repo.db.in_transaction()

    teacher = Teacher(id=None, email="t1@teacher.com")
    with pytest.raises(NotImplementedError):
        repo.save_roster(teacher)
    assert not repo.db.in_transaction()

from typing import Iterable, NoReturn

import structlog
from sqlalchemy import Table, false, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..application.ports import IDirectoryRepository
from ..domain.entities import STUDENT, TEACHER, Student, Teacher, User
from ..domain.errors import InternalError
from .metrics import identities_created_total, persistence_errors_total
from .models import StudentORM, TeacherORM, UserORM, teacher_students, users

logger = structlog.get_logger(__name__)


def to_student(row: StudentORM) -> Student:
    return Student(id=row.id, email=row.email, is_suspended=bool(row.is_suspended))


def to_teacher(row: TeacherORM) -> Teacher:
    return Teacher(id=row.id, email=row.email, students=[to_student(s) for s in row.students])


def to_domain(row: UserORM) -> User:
    if isinstance(row, TeacherORM):
        return to_teacher(row)
    return to_student(row)


def insert_ignoring_conflicts(table: Table, dialect: str):
    """INSERT ... ON CONFLICT DO NOTHING для SQLite и PostgreSQL."""
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    raise NotImplementedError(f"upsert is not supported for {dialect}")


class DirectoryRepository(IDirectoryRepository):
    def __init__(self, db: Session): self.db = db

    @property
    def dialect(self) -> str:
        return self.db.get_bind().dialect.name

    def get_users_by_emails(self, emails: Iterable[str]) -> list[User]:
        emails = list(emails)
        if not emails:
            return []
        rows = self.db.scalars(select(UserORM).where(UserORM.email.in_(emails))).all()
        return [to_domain(r) for r in rows]

    def get_teacher(self, email: str) -> Teacher | None:
        row = self.db.scalars(select(TeacherORM).where(TeacherORM.email == email)).first()
        return to_teacher(row) if row else None

    def get_teachers(self, emails: Iterable[str]) -> list[Teacher]:
        emails = list(emails)
        if not emails:
            return []
        rows = self.db.scalars(select(TeacherORM).where(TeacherORM.email.in_(emails))).all()
        return [to_teacher(r) for r in rows]

    def get_student(self, email: str) -> Student | None:
        row = self.db.scalars(select(StudentORM).where(StudentORM.email == email)).first()
        return to_student(row) if row else None

    def get_active_students(self, emails: Iterable[str]) -> list[Student]:
        emails = list(emails)
        if not emails:
            return []
        q = select(StudentORM).where(
            StudentORM.email.in_(emails),
            StudentORM.is_suspended == false(),
        )
        return [to_student(r) for r in self.db.scalars(q).all()]

    def save_roster(self, teacher: Teacher) -> Teacher:
        """Сохраняет учителя, новых студентов и связи одной транзакцией."""
        try:
            teacher_id = self._ensure_identity(teacher.email, TEACHER)
            for s in teacher.students:
                if s.id is None:
                    s.id = self._ensure_identity(s.email, STUDENT)
            pairs = [{"teacher_id": teacher_id, "student_id": s.id} for s in teacher.students]
            if pairs:
                stmt = insert_ignoring_conflicts(teacher_students, self.dialect)
                self.db.execute(stmt.values(pairs).on_conflict_do_nothing())
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("roster_save_failed", e, teacher=teacher.email)
        except Exception:
            self.db.rollback()
            raise
        teacher.id = teacher_id
        return teacher

    def suspend_student(self, student: Student) -> Student:
        try:
            row = self.db.get(StudentORM, student.id)
            row.is_suspended = student.is_suspended
            self.db.commit()
        except SQLAlchemyError as e:
            self._fail("student_suspend_failed", e, student=student.email)
        return student

    def _ensure_identity(self, email: str, role: str) -> int:
        # upsert по уникальному email: параллельные регистрации сходятся на одной строке
        values = {"email": email, "type": role}
        if role == STUDENT:
            values["is_suspended"] = False
        stmt = insert_ignoring_conflicts(users, self.dialect).values(**values)
        result = self.db.execute(stmt.on_conflict_do_nothing(index_elements=["email"]))
        if result.rowcount == 1:
            identities_created_total.labels(role=role).inc()

        row = self.db.execute(select(users.c.id, users.c.type).where(users.c.email == email)).one()
        if row.type != role:
            # email успели занять под другую роль между чтением и записью
            self._fail("identity_role_conflict", None, email=email, role=role, existing=row.type)
        return row.id

    def _fail(self, event: str, error: Exception | None, **context) -> NoReturn:
        self.db.rollback()
        persistence_errors_total.inc()
        logger.error(event, error=str(error) if error else None, **context)
        raise InternalError() from error

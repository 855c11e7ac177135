from dataclasses import dataclass, field
from typing import ClassVar, Iterable

from .errors import InvalidInput

TEACHER = "teacher"
STUDENT = "student"


def normalize_email(email: str) -> str:
    """Единственное преобразование email: нижний регистр, без strip."""
    return email.lower()


def require_email(email: str) -> str:
    if not email:
        raise InvalidInput("email cannot be empty")
    return normalize_email(email)


@dataclass
class Student:
    role: ClassVar[str] = STUDENT

    id: int | None
    email: str
    is_suspended: bool = False

    @property
    def is_active(self) -> bool:
        return not self.is_suspended


@dataclass
class Teacher:
    role: ClassVar[str] = TEACHER

    id: int | None
    email: str
    students: list[Student] = field(default_factory=list)

    def roster_emails(self) -> set[str]:
        return {s.email for s in self.students}

    def enroll(self, students: Iterable[Student]) -> list[Student]:
        """Добавляет студентов в ростер (объединение множеств по email).

        Уже записанные студенты пропускаются, порядок новых сохраняется.
        Возвращает список реально добавленных.
        """
        known = self.roster_emails()
        added = []
        for s in students:
            if s.email in known:
                continue
            known.add(s.email)
            self.students.append(s)
            added.append(s)
        return added


User = Teacher | Student


def same_user(a: User, b: User) -> bool:
    return normalize_email(a.email) == normalize_email(b.email)

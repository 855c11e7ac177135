from typing import Sequence

from ..domain.entities import STUDENT, TEACHER, Student, Teacher, normalize_email, require_email
from ..domain.errors import ConflictError, InvalidInput
from .ports import IDirectoryRepository


class DirectoryService:
    """Find-or-create по email. Ничего не сохраняет: новые сущности
    возвращаются с id=None, сохранять их должен вызывающий код."""

    def __init__(self, repo: IDirectoryRepository):
        self.repo = repo

    def find_or_create_teacher(self, email: str) -> Teacher:
        email = require_email(email)
        for user in self.repo.get_users_by_emails([email]):
            if user.role != TEACHER:
                raise ConflictError(f"{email} is already registered as a {user.role}")
            return user
        return Teacher(id=None, email=email)

    def find_or_create_students(self, emails: Sequence[str]) -> list[Student]:
        if not emails:
            return []
        if any(not e for e in emails):
            raise InvalidInput("email cannot be empty")

        # повторы во входе схлопываем, иначе получим два экземпляра на один email
        wanted = list(dict.fromkeys(normalize_email(e) for e in emails))
        existing = {u.email: u for u in self.repo.get_users_by_emails(wanted)}

        students = []
        for email in wanted:
            user = existing.get(email)
            if user is None:
                students.append(Student(id=None, email=email))
            elif user.role != STUDENT:
                raise ConflictError(f"{email} is already registered as a {user.role}")
            else:
                students.append(user)
        return students

from typing import Iterable

from ..domain.entities import Student, Teacher, User


class IDirectoryRepository:
    def get_users_by_emails(self, emails: Iterable[str]) -> list[User]: ...
    def get_teacher(self, email: str) -> Teacher | None: ...
    def get_teachers(self, emails: Iterable[str]) -> list[Teacher]: ...
    def get_student(self, email: str) -> Student | None: ...
    def get_active_students(self, emails: Iterable[str]) -> list[Student]: ...
    def save_roster(self, teacher: Teacher) -> Teacher: ...
    def suspend_student(self, student: Student) -> Student: ...

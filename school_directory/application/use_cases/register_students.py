import structlog

from ...domain.errors import ConflictError, InvalidInput
from ..directory import DirectoryService
from ..ports import IDirectoryRepository

logger = structlog.get_logger(__name__)


class RegisterStudents:
    def __init__(self, repo: IDirectoryRepository):
        self.repo = repo
        self.directory = DirectoryService(repo)

    def execute(self, teacher_email: str, student_emails: list[str]) -> None:
        if not student_emails:
            raise InvalidInput("students must be array of email addresses")
        # сравнение по сырому вводу, как пришло от клиента
        if teacher_email in student_emails:
            raise ConflictError("teacher and student cannot be the same")

        teacher = self.directory.find_or_create_teacher(teacher_email)
        students = self.directory.find_or_create_students(student_emails)
        # тот же адрес в другом регистре: ловим до записи в БД
        if teacher.email in {s.email for s in students}:
            raise ConflictError("teacher and student cannot be the same")

        added = teacher.enroll(students)
        self.repo.save_roster(teacher)
        logger.info(
            "students_registered",
            teacher=teacher.email,
            added=len(added),
            roster_size=len(teacher.students),
        )

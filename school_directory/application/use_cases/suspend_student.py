import structlog

from ...domain.entities import require_email
from ...domain.errors import NotFound
from ..ports import IDirectoryRepository

logger = structlog.get_logger(__name__)


class SuspendStudent:
    def __init__(self, repo: IDirectoryRepository):
        self.repo = repo

    def execute(self, email: str) -> None:
        student = self.repo.get_student(require_email(email))
        if student is None:
            raise NotFound("student not found")
        if student.is_suspended:
            return
        student.is_suspended = True
        self.repo.suspend_student(student)
        logger.info("student_suspended", student=student.email)

import structlog

from ...domain.entities import require_email
from ...domain.errors import NotFound
from ...domain.mentions import extract_mentions
from ..ports import IDirectoryRepository

logger = structlog.get_logger(__name__)


class ResolveRecipients:
    """Получатели уведомления: активные студенты учителя плюс
    упомянутые в тексте существующие и не отстранённые студенты."""

    def __init__(self, repo: IDirectoryRepository):
        self.repo = repo

    def execute(self, teacher_email: str, notification: str) -> list[str]:
        teacher = self.repo.get_teacher(require_email(teacher_email))
        if teacher is None:
            raise NotFound("teacher not found")

        recipients = [s.email for s in teacher.students if s.is_active]

        mentions = extract_mentions(notification)
        if mentions:
            # несуществующие и отстранённые молча отбрасываются
            recipients.extend(s.email for s in self.repo.get_active_students(mentions))

        recipients = list(dict.fromkeys(recipients))
        logger.info(
            "recipients_resolved",
            teacher=teacher.email,
            mentions=len(mentions),
            recipients=len(recipients),
        )
        return recipients

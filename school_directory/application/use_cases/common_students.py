from functools import reduce
from typing import Iterable

from ...domain.entities import require_email
from ...domain.errors import InvalidInput, NotFound
from ..ports import IDirectoryRepository


class ListCommonStudents:
    def __init__(self, repo: IDirectoryRepository):
        self.repo = repo

    def execute(self, teacher_emails: Iterable[str]) -> list[str]:
        emails = list(dict.fromkeys(require_email(e) for e in teacher_emails))
        if not emails:
            raise InvalidInput("must have at one or more teacher")

        teachers = self.repo.get_teachers(emails)
        if len(teachers) < len(emails):
            raise NotFound("teacher not found")

        rosters = [t.roster_emails() for t in teachers]
        return sorted(reduce(set.intersection, rosters))

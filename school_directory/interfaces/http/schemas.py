from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, field_validator
from pydantic_core import PydanticCustomError


def is_email(value: str) -> bool:
    """Только синтаксис; DNS не проверяем. Значение не нормализуется."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def check_email(value: str) -> str:
    if not is_email(value):
        raise PydanticCustomError("email", "must be email address")
    return value


Email = Annotated[str, AfterValidator(check_email)]


class RegisterReq(BaseModel):
    teacher: Email
    students: list[Email]

    @field_validator("students")
    @classmethod
    def not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise PydanticCustomError("students", "must be array of email addresses")
        return v

class SuspendReq(BaseModel):
    student: Email

class NotificationReq(BaseModel):
    teacher: Email
    notification: str

class CommonStudentsResp(BaseModel):
    students: list[str]

class RecipientsResp(BaseModel):
    recipients: list[str]

class MessageResp(BaseModel):
    message: str

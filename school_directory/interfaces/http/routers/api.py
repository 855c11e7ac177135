from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from ....application.use_cases.common_students import ListCommonStudents
from ....application.use_cases.notification_recipients import ResolveRecipients
from ....application.use_cases.register_students import RegisterStudents
from ....application.use_cases.suspend_student import SuspendStudent
from ....domain.errors import InvalidInput
from ....infrastructure.db import get_db
from ....infrastructure.metrics import notification_recipients
from ....infrastructure.repositories import DirectoryRepository
from ..schemas import (
    CommonStudentsResp,
    MessageResp,
    NotificationReq,
    RecipientsResp,
    RegisterReq,
    SuspendReq,
    is_email,
)

router = APIRouter(prefix="/api", tags=["directory"])

ERROR_RESPONSES = {
    400: {"model": MessageResp},
    404: {"model": MessageResp},
    500: {"model": MessageResp},
}


def require_json(request: Request):
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != "application/json":
        raise InvalidInput("Content-Type must be application/json")


# --- POST /register

@router.post("/register", status_code=status.HTTP_204_NO_CONTENT,
             dependencies=[Depends(require_json)], responses=ERROR_RESPONSES)
def register_students(payload: RegisterReq, db: Session = Depends(get_db)):
    RegisterStudents(DirectoryRepository(db)).execute(payload.teacher, payload.students)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- GET /commonstudents

@router.get("/commonstudents", response_model=CommonStudentsResp, responses=ERROR_RESPONSES)
def list_common_students(teacher: list[str] = Query(default=[]), db: Session = Depends(get_db)):
    # teacher приходит одним значением или повторяющимся параметром
    if not teacher or not all(is_email(t) for t in teacher):
        raise InvalidInput("must have at one or more teacher (every value must be an email)")
    students = ListCommonStudents(DirectoryRepository(db)).execute(teacher)
    return CommonStudentsResp(students=students)

# --- POST /suspend

@router.post("/suspend", status_code=status.HTTP_204_NO_CONTENT,
             dependencies=[Depends(require_json)], responses=ERROR_RESPONSES)
def suspend_student(payload: SuspendReq, db: Session = Depends(get_db)):
    SuspendStudent(DirectoryRepository(db)).execute(payload.student)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- POST /retrievefornotifications

@router.post("/retrievefornotifications", response_model=RecipientsResp,
             dependencies=[Depends(require_json)], responses=ERROR_RESPONSES)
def retrieve_for_notifications(payload: NotificationReq, db: Session = Depends(get_db)):
    recipients = ResolveRecipients(DirectoryRepository(db)).execute(payload.teacher, payload.notification)
    notification_recipients.observe(len(recipients))
    return RecipientsResp(recipients=recipients)

from __future__ import annotations

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base

# Ростер: владеет учитель, пара (teacher_id, student_id) уникальна
teacher_students = Table(
    "teacher_students",
    Base.metadata,
    Column("teacher_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class UserORM(Base):
    """Одна таблица на всю иерархию: email уникален среди всех ролей."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)

    __mapper_args__ = {"polymorphic_on": "type"}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, email={self.email!r})"


class StudentORM(UserORM):
    is_suspended: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=False)

    __mapper_args__ = {"polymorphic_identity": "student"}


class TeacherORM(UserORM):
    students: Mapped[list[StudentORM]] = relationship(
        StudentORM,
        secondary=teacher_students,
        primaryjoin=lambda: UserORM.id == teacher_students.c.teacher_id,
        secondaryjoin=lambda: StudentORM.id == teacher_students.c.student_id,
        lazy="selectin",
    )

    __mapper_args__ = {"polymorphic_identity": "teacher"}


users = UserORM.__table__

__all__ = [
    "Base",
    "StudentORM",
    "TeacherORM",
    "UserORM",
    "teacher_students",
    "users",
]

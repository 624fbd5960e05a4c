"""Parent-student linkage graph.

Links are created only by a parent who supplies the student's email, either
while registering or later from the dashboard. There is no approval step and
no revocation.
"""

import logging

from sqlalchemy import exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from backend.core.errors import ConflictError, NotFoundError
from backend.models.application import Application
from backend.models.enums import Role
from backend.models.parent import ParentStudentLink
from backend.models.student import Student
from backend.models.user import User

logger = logging.getLogger(__name__)


def _student_with_applications():
    return (
        selectinload(Student.applications).selectinload(Application.requirements),
        selectinload(Student.applications).joinedload(Application.university),
    )


def is_linked(db: Session, parent_id: int | None, student_id: int | None) -> bool:
    if parent_id is None or student_id is None:
        return False
    return db.query(
        exists().where(
            ParentStudentLink.parent_id == parent_id,
            ParentStudentLink.student_id == student_id,
        )
    ).scalar()


def find_student_by_email(db: Session, student_email: str) -> Student:
    normalized = (student_email or '').strip().lower()
    user = db.query(User).filter(User.email == normalized).first()
    if user is None or user.role != Role.STUDENT or user.student is None:
        raise NotFoundError('Student not found.')
    return user.student


def link_student(db: Session, parent_id: int, student_email: str, commit: bool = True) -> Student:
    """Link the parent to the student owning ``student_email``.

    With ``commit=False`` the link is only flushed, so the caller can make it
    part of a larger transaction.
    """
    student = find_student_by_email(db, student_email)

    if is_linked(db, parent_id, student.id):
        raise ConflictError('Student is already linked to this parent.')

    db.add(ParentStudentLink(parent_id=parent_id, student_id=student.id))
    try:
        if commit:
            db.commit()
        else:
            db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError('Student is already linked to this parent.') from exc

    logger.info('Linked parent %s to student %s', parent_id, student.id)
    return (
        db.query(Student)
        .options(*_student_with_applications())
        .filter(Student.id == student.id)
        .one()
    )


def list_students(db: Session, parent_id: int) -> list[Student]:
    return (
        db.query(Student)
        .join(ParentStudentLink, ParentStudentLink.student_id == Student.id)
        .filter(ParentStudentLink.parent_id == parent_id)
        .options(*_student_with_applications())
        .order_by(ParentStudentLink.id.asc())
        .all()
    )

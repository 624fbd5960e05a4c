import json

from sqlalchemy.orm import Session, joinedload, selectinload

from backend.auth.principal import Principal
from backend.core.errors import ForbiddenError, NotFoundError
from backend.models.application import Application
from backend.models.enums import Role
from backend.models.parent_note import ParentNote
from backend.models.student import Student

PROFILE_FIELDS = ('name', 'graduation_year', 'gpa', 'sat_score', 'act_score')
JSON_TEXT_FIELDS = ('target_countries', 'intended_majors')


def get_student_profile(db: Session, principal: Principal) -> Student:
    if principal.role != Role.STUDENT:
        raise ForbiddenError()
    student = (
        db.query(Student)
        .options(
            selectinload(Student.applications).joinedload(Application.university),
            selectinload(Student.applications).selectinload(Application.requirements),
            selectinload(Student.applications).selectinload(Application.parent_notes).joinedload(ParentNote.parent),
        )
        .filter(Student.id == principal.student_id)
        .first()
    )
    if student is None:
        raise NotFoundError('Student profile not found.')
    return student


def update_student_profile(db: Session, principal: Principal, changes: dict) -> Student:
    student = get_student_profile(db, principal)
    for field_name in PROFILE_FIELDS:
        if field_name in changes:
            value = changes[field_name]
            if field_name == 'name' and not (value or '').strip():
                continue
            setattr(student, field_name, value.strip() if field_name == 'name' else value)
    for field_name in JSON_TEXT_FIELDS:
        if field_name in changes:
            value = changes[field_name]
            setattr(student, field_name, json.dumps(value) if value else None)
    db.commit()
    db.refresh(student)
    return student

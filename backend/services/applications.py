import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.auth.principal import Principal
from backend.core.errors import ConflictError, ForbiddenError, NotFoundError
from backend.database import is_storable_id
from backend.models.application import Application, ApplicationRequirement
from backend.models.enums import (
    ApplicationStatus,
    ApplicationType,
    DecisionType,
    RequirementStatus,
    RequirementType,
    Role,
)
from backend.models.university import University
from backend.services.ownership import Action, EntityKind, get_authorized

logger = logging.getLogger(__name__)

DUPLICATE_APPLICATION_MESSAGE = 'Application already exists for this university and type.'

APPLICATION_UPDATABLE_FIELDS = ('status', 'deadline', 'submitted_date', 'decision_date', 'decision_type', 'notes')
REQUIREMENT_UPDATABLE_FIELDS = ('status', 'deadline', 'notes')


def _apply_changes(entity, changes: dict, allowed: tuple[str, ...]) -> None:
    for field_name in allowed:
        if field_name in changes:
            setattr(entity, field_name, changes[field_name])


def create_application(
    db: Session,
    principal: Principal,
    university_id: int,
    application_type: ApplicationType,
    deadline: datetime | None = None,
    notes: str | None = None,
) -> Application:
    if principal.role != Role.STUDENT:
        raise ForbiddenError()
    university_exists = (
        is_storable_id(university_id)
        and db.query(University.id).filter(University.id == university_id).first() is not None
    )
    if not university_exists:
        raise NotFoundError('University not found.')

    existing = db.query(Application.id).filter(
        Application.student_id == principal.student_id,
        Application.university_id == university_id,
        Application.application_type == application_type,
    ).first()
    if existing is not None:
        raise ConflictError(DUPLICATE_APPLICATION_MESSAGE)

    application = Application(
        student_id=principal.student_id,
        university_id=university_id,
        application_type=application_type,
        status=ApplicationStatus.NOT_STARTED,
        deadline=deadline,
        notes=notes,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(DUPLICATE_APPLICATION_MESSAGE) from exc
    db.refresh(application)
    logger.info('Student %s created application %s', principal.student_id, application.id)
    return application


def get_application(db: Session, principal: Principal, application_id: int) -> Application:
    return get_authorized(db, principal, Action.READ, EntityKind.APPLICATION, application_id)


def update_application(db: Session, principal: Principal, application_id: int, changes: dict) -> Application:
    """Apply a partial update. Status moves freely between any two states."""
    application = get_authorized(db, principal, Action.WRITE, EntityKind.APPLICATION, application_id)
    if changes.get('status') is None:
        changes.pop('status', None)
    else:
        changes['status'] = ApplicationStatus(changes['status'])
    if changes.get('decision_type') is not None:
        changes['decision_type'] = DecisionType(changes['decision_type'])
    _apply_changes(application, changes, APPLICATION_UPDATABLE_FIELDS)
    db.commit()
    db.refresh(application)
    return application


def delete_application(db: Session, principal: Principal, application_id: int) -> None:
    application = get_authorized(db, principal, Action.WRITE, EntityKind.APPLICATION, application_id)
    db.delete(application)
    db.commit()
    logger.info('Student %s deleted application %s', principal.student_id, application_id)


def add_requirement(
    db: Session,
    principal: Principal,
    application_id: int,
    requirement_type: RequirementType,
    deadline: datetime | None = None,
    notes: str | None = None,
) -> ApplicationRequirement:
    application = get_authorized(db, principal, Action.WRITE, EntityKind.APPLICATION, application_id)
    requirement = ApplicationRequirement(
        application_id=application.id,
        requirement_type=requirement_type,
        status=RequirementStatus.NOT_STARTED,
        deadline=deadline,
        notes=notes,
    )
    db.add(requirement)
    db.commit()
    db.refresh(requirement)
    return requirement


def get_requirement(db: Session, principal: Principal, requirement_id: int) -> ApplicationRequirement:
    return get_authorized(db, principal, Action.READ, EntityKind.REQUIREMENT, requirement_id)


def update_requirement(db: Session, principal: Principal, requirement_id: int, changes: dict) -> ApplicationRequirement:
    requirement = get_authorized(db, principal, Action.WRITE, EntityKind.REQUIREMENT, requirement_id)
    if changes.get('status') is None:
        changes.pop('status', None)
    else:
        changes['status'] = RequirementStatus(changes['status'])
    _apply_changes(requirement, changes, REQUIREMENT_UPDATABLE_FIELDS)
    db.commit()
    db.refresh(requirement)
    return requirement


def delete_requirement(db: Session, principal: Principal, requirement_id: int) -> None:
    requirement = get_authorized(db, principal, Action.WRITE, EntityKind.REQUIREMENT, requirement_id)
    db.delete(requirement)
    db.commit()

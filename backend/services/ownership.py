"""Ownership guard shared by every student-owned entity.

Each protected entity kind resolves to the id of the student that owns it.
One guard then decides, from that owner id and the caller's principal,
whether the action is allowed:

* a student may read and write what it owns, nothing else;
* a parent may read what a linked student owns and annotate (leave notes on)
  a linked student's applications, but never writes student-owned data.

Every denial surfaces as ``NotFoundError`` so callers cannot tell an absent
entity from one that belongs to somebody else.
"""

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from backend.auth.principal import Principal
from backend.core.errors import NotFoundError
from backend.database import is_storable_id
from backend.models.application import Application, ApplicationRequirement
from backend.models.document import Document
from backend.models.enums import Role
from backend.services import relationships

logger = logging.getLogger(__name__)


class EntityKind(str, enum.Enum):
    APPLICATION = 'application'
    REQUIREMENT = 'requirement'
    DOCUMENT = 'document'
    NOTE_TARGET = 'note_target'  # the application a parent note is attached to


class Action(str, enum.Enum):
    READ = 'read'
    WRITE = 'write'
    ANNOTATE = 'annotate'


NOT_FOUND_MESSAGES = {
    EntityKind.APPLICATION: 'Application not found.',
    EntityKind.REQUIREMENT: 'Requirement not found.',
    EntityKind.DOCUMENT: 'Document not found.',
    EntityKind.NOTE_TARGET: 'Application not found or access denied.',
}

PARENT_READABLE = frozenset({EntityKind.APPLICATION, EntityKind.REQUIREMENT, EntityKind.DOCUMENT, EntityKind.NOTE_TARGET})
PARENT_ANNOTATABLE = frozenset({EntityKind.APPLICATION, EntityKind.NOTE_TARGET})


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str
    entity: Any = None


def _load_application(db: Session, entity_id: int) -> tuple[Application, int] | None:
    application = db.query(Application).filter(Application.id == entity_id).first()
    if application is None:
        return None
    return application, application.student_id


def _load_requirement(db: Session, entity_id: int) -> tuple[ApplicationRequirement, int] | None:
    row = (
        db.query(ApplicationRequirement, Application.student_id)
        .join(Application, Application.id == ApplicationRequirement.application_id)
        .filter(ApplicationRequirement.id == entity_id)
        .first()
    )
    if row is None:
        return None
    requirement, student_id = row
    return requirement, student_id


def _load_document(db: Session, entity_id: int) -> tuple[Document, int] | None:
    document = db.query(Document).filter(Document.id == entity_id).first()
    if document is None:
        return None
    return document, document.student_id


OWNER_RESOLVERS: dict[EntityKind, Callable[[Session, int], tuple[Any, int] | None]] = {
    EntityKind.APPLICATION: _load_application,
    EntityKind.REQUIREMENT: _load_requirement,
    EntityKind.DOCUMENT: _load_document,
    EntityKind.NOTE_TARGET: _load_application,
}


def _resolve(db: Session, kind: EntityKind, entity_id: int) -> tuple[Any, int] | None:
    # Ids no key column can hold never reach the driver.
    if not is_storable_id(entity_id):
        return None
    return OWNER_RESOLVERS[kind](db, entity_id)


def owner_student_id(db: Session, kind: EntityKind, entity_id: int) -> int | None:
    resolved = _resolve(db, kind, entity_id)
    if resolved is None:
        return None
    return resolved[1]


def authorize(
    db: Session,
    principal: Principal,
    action: Action,
    kind: EntityKind,
    entity_id: int,
) -> AccessDecision:
    resolved = _resolve(db, kind, entity_id)
    if resolved is None:
        return AccessDecision(False, 'not found')
    entity, owner_id = resolved

    if principal.role == Role.STUDENT:
        if action == Action.ANNOTATE:
            return AccessDecision(False, 'students cannot annotate')
        if principal.student_id is not None and principal.student_id == owner_id:
            return AccessDecision(True, 'owner', entity)
        return AccessDecision(False, 'not owner')

    if principal.role == Role.PARENT:
        if action == Action.WRITE:
            return AccessDecision(False, 'parents are read-only')
        if action == Action.READ and kind not in PARENT_READABLE:
            return AccessDecision(False, 'not readable by parents')
        if action == Action.ANNOTATE and kind not in PARENT_ANNOTATABLE:
            return AccessDecision(False, 'not annotatable')
        if relationships.is_linked(db, principal.parent_id, owner_id):
            return AccessDecision(True, 'linked parent', entity)
        return AccessDecision(False, 'not linked')

    return AccessDecision(False, 'unknown role')


def get_authorized(
    db: Session,
    principal: Principal,
    action: Action,
    kind: EntityKind,
    entity_id: int,
    message: str | None = None,
):
    """Return the entity if ``principal`` may perform ``action`` on it, else raise NotFoundError."""
    decision = authorize(db, principal, action, kind, entity_id)
    if not decision.allowed:
        logger.info(
            'Denied %s on %s %s for user %s: %s',
            action.value,
            kind.value,
            entity_id,
            principal.user_id,
            decision.reason,
        )
        raise NotFoundError(message or NOT_FOUND_MESSAGES[kind])
    return decision.entity

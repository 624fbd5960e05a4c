import logging

from sqlalchemy.orm import Session

from backend.auth.principal import Principal
from backend.core.errors import ForbiddenError, ValidationFailedError
from backend.models.enums import Role
from backend.models.parent_note import ParentNote
from backend.services.ownership import Action, EntityKind, get_authorized

logger = logging.getLogger(__name__)

MAX_NOTE_LENGTH = 2000


def add_note(db: Session, principal: Principal, application_id: int, content: str | None) -> ParentNote:
    """Attach a note from a linked parent to a student's application."""
    if principal.role != Role.PARENT:
        raise ForbiddenError()

    application = get_authorized(db, principal, Action.ANNOTATE, EntityKind.NOTE_TARGET, application_id)

    normalized = (content or '').strip()
    if not normalized:
        raise ValidationFailedError('Note content is required.')
    if len(normalized) > MAX_NOTE_LENGTH:
        raise ValidationFailedError(f'Note must be {MAX_NOTE_LENGTH} characters or fewer.')

    note = ParentNote(parent_id=principal.parent_id, application_id=application.id, content=normalized)
    db.add(note)
    db.commit()
    db.refresh(note)
    logger.info('Parent %s added note %s to application %s', principal.parent_id, note.id, application.id)
    return note

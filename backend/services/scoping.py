"""Role-aware list queries. Filters supplied by callers only ever narrow scope."""

from sqlalchemy.orm import Session, joinedload, selectinload

from backend.auth.principal import Principal
from backend.core.errors import ForbiddenError
from backend.database import is_storable_id
from backend.models.application import Application
from backend.models.document import Document
from backend.models.enums import DocumentType, Role
from backend.models.parent import ParentStudentLink
from backend.models.parent_note import ParentNote
from backend.models.student import Student


def _ensure_role(principal: Principal, role: Role) -> None:
    if principal.role != role:
        raise ForbiddenError()


def _application_options():
    return (
        joinedload(Application.university),
        selectinload(Application.requirements),
        selectinload(Application.parent_notes).joinedload(ParentNote.parent),
    )


def visible_notes(application: Application, principal: Principal) -> list[ParentNote]:
    """Notes the principal may see on ``application``: all for the owner, own notes for a parent."""
    notes = sorted(application.parent_notes, key=lambda note: (note.created_at, note.id), reverse=True)
    if principal.role == Role.STUDENT and application.student_id == principal.student_id:
        return notes
    if principal.role == Role.PARENT:
        return [note for note in notes if note.parent_id == principal.parent_id]
    return []


def list_applications_for_student(db: Session, principal: Principal) -> list[Application]:
    _ensure_role(principal, Role.STUDENT)
    return (
        db.query(Application)
        .options(*_application_options())
        .filter(Application.student_id == principal.student_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


def list_applications_for_parent(
    db: Session,
    principal: Principal,
    student_id: int | None = None,
) -> list[Application]:
    _ensure_role(principal, Role.PARENT)
    linked_to_parent = Application.student.has(
        Student.parent_links.any(ParentStudentLink.parent_id == principal.parent_id)
    )
    query = (
        db.query(Application)
        .options(*_application_options(), joinedload(Application.student))
        .filter(linked_to_parent)
    )
    if student_id is not None:
        if not is_storable_id(student_id):
            return []
        query = query.filter(Application.student_id == student_id)
    return query.order_by(Application.created_at.desc(), Application.id.desc()).all()


def list_documents(
    db: Session,
    principal: Principal,
    application_id: int | None = None,
    requirement_id: int | None = None,
    document_type: DocumentType | None = None,
) -> list[Document]:
    _ensure_role(principal, Role.STUDENT)
    if any(value is not None and not is_storable_id(value) for value in (application_id, requirement_id)):
        return []
    query = (
        db.query(Document)
        .options(
            joinedload(Document.application).joinedload(Application.university),
            joinedload(Document.requirement),
        )
        .filter(Document.student_id == principal.student_id)
    )
    if application_id is not None:
        query = query.filter(Document.application_id == application_id)
    if requirement_id is not None:
        query = query.filter(Document.requirement_id == requirement_id)
    if document_type is not None:
        query = query.filter(Document.document_type == document_type)
    return query.order_by(Document.uploaded_at.desc(), Document.id.desc()).all()

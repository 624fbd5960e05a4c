import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from backend.auth.principal import Principal
from backend.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from backend.models.document import Document
from backend.models.enums import DocumentType, Role
from backend.services.file_storage import LocalFileStorage, StoredFile, infer_document_type, validate_upload
from backend.services.ownership import Action, EntityKind, get_authorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    original_name: str
    mime_type: str
    data: bytes


def check_associations(
    db: Session,
    principal: Principal,
    application_id: int | None,
    requirement_id: int | None,
) -> None:
    """A document may only point at the uploading student's own application or requirement."""
    if application_id is not None:
        get_authorized(
            db, principal, Action.WRITE, EntityKind.APPLICATION, application_id,
            message='Application not found or access denied.',
        )
    if requirement_id is not None:
        get_authorized(
            db, principal, Action.WRITE, EntityKind.REQUIREMENT, requirement_id,
            message='Requirement not found or access denied.',
        )


def upload_documents(
    db: Session,
    storage: LocalFileStorage,
    principal: Principal,
    files: list[IncomingFile],
    application_id: int | None = None,
    requirement_id: int | None = None,
    document_type: DocumentType | None = None,
) -> list[Document]:
    if principal.role != Role.STUDENT:
        raise ForbiddenError()
    if not files:
        raise ValidationFailedError('No files provided.')

    check_associations(db, principal, application_id, requirement_id)
    for incoming in files:
        validate_upload(incoming.mime_type, len(incoming.data), incoming.original_name)

    stored: list[StoredFile] = []
    try:
        documents = []
        for incoming in files:
            stored_file = storage.save(incoming.data, principal.student_id, incoming.mime_type, incoming.original_name)
            stored.append(stored_file)
            document = Document(
                student_id=principal.student_id,
                filename=stored_file.filename,
                original_name=stored_file.original_name,
                mime_type=stored_file.mime_type,
                size=stored_file.size,
                path=stored_file.path,
                document_type=document_type or infer_document_type(stored_file.original_name),
                application_id=application_id,
                requirement_id=requirement_id,
            )
            db.add(document)
            documents.append(document)
        db.commit()
    except Exception:
        db.rollback()
        for stored_file in stored:
            storage.delete(stored_file.path)
        raise

    for document in documents:
        db.refresh(document)
    logger.info('Student %s uploaded %d document(s)', principal.student_id, len(documents))
    return documents


def get_document(db: Session, principal: Principal, document_id: int) -> Document:
    return get_authorized(db, principal, Action.READ, EntityKind.DOCUMENT, document_id)


def update_document(db: Session, principal: Principal, document_id: int, changes: dict) -> Document:
    document = get_authorized(db, principal, Action.WRITE, EntityKind.DOCUMENT, document_id)
    check_associations(db, principal, changes.get('application_id'), changes.get('requirement_id'))

    if changes.get('document_type') is not None:
        document.document_type = DocumentType(changes['document_type'])
    if 'application_id' in changes:
        document.application_id = changes['application_id']
    if 'requirement_id' in changes:
        document.requirement_id = changes['requirement_id']
    db.commit()
    db.refresh(document)
    return document


def delete_document(db: Session, storage: LocalFileStorage, principal: Principal, document_id: int) -> None:
    document = get_authorized(db, principal, Action.WRITE, EntityKind.DOCUMENT, document_id)
    # Metadata goes even if the bytes cannot be removed.
    storage.delete(document.path)
    db.delete(document)
    db.commit()
    logger.info('Student %s deleted document %s', principal.student_id, document_id)


def read_document(db: Session, storage: LocalFileStorage, principal: Principal, document_id: int) -> tuple[Document, bytes]:
    document = get_authorized(db, principal, Action.READ, EntityKind.DOCUMENT, document_id)
    data = storage.read(document.path)
    if data is None:
        logger.warning('Stored file missing for document %s at %s', document.id, document.path)
        raise NotFoundError('File not found on server.')
    return document, data

from datetime import datetime
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_student
from backend.auth.principal import Principal
from backend.database import get_db
from backend.models.enums import (
    ApplicationStatus,
    ApplicationType,
    DecisionType,
    DocumentType,
    RequirementStatus,
    RequirementType,
)
from backend.routes.schemas import (
    ApplicationResponse,
    DocumentResponse,
    RequirementResponse,
    StudentProfileResponse,
    application_response,
    student_profile_response,
)
from backend.services import applications, documents, profiles, scoping
from backend.services.documents import IncomingFile
from backend.services.file_storage import LocalFileStorage, get_file_storage

router = APIRouter(tags=['student'])

MAX_FREE_TEXT_LENGTH = 2000


class NotesRequest(BaseModel):
    notes: str | None = None

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        if len(normalized) > MAX_FREE_TEXT_LENGTH:
            raise ValueError(f'Notes must be {MAX_FREE_TEXT_LENGTH} characters or fewer.')
        return normalized or None


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    graduation_year: int | None = None
    gpa: float | None = None
    sat_score: int | None = None
    act_score: int | None = None
    target_countries: list[str] | None = None
    intended_majors: list[str] | None = None


class CreateApplicationRequest(NotesRequest):
    university_id: int
    application_type: ApplicationType
    deadline: datetime | None = None


class UpdateApplicationRequest(NotesRequest):
    status: ApplicationStatus | None = None
    deadline: datetime | None = None
    submitted_date: datetime | None = None
    decision_date: datetime | None = None
    decision_type: DecisionType | None = None


class CreateRequirementRequest(NotesRequest):
    requirement_type: RequirementType
    deadline: datetime | None = None


class UpdateRequirementRequest(NotesRequest):
    status: RequirementStatus | None = None
    deadline: datetime | None = None


class UpdateDocumentRequest(BaseModel):
    document_type: DocumentType | None = None
    application_id: int | None = None
    requirement_id: int | None = None


@router.get('/profile', response_model=StudentProfileResponse)
def get_profile(principal: Principal = Depends(require_student), db: Session = Depends(get_db)):
    student = profiles.get_student_profile(db, principal)
    return student_profile_response(student, principal)


@router.put('/profile', response_model=StudentProfileResponse)
def update_profile(
    data: UpdateProfileRequest,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    student = profiles.update_student_profile(db, principal, data.model_dump(exclude_unset=True))
    return student_profile_response(student, principal)


@router.get('/applications', response_model=list[ApplicationResponse])
def list_applications(principal: Principal = Depends(require_student), db: Session = Depends(get_db)):
    return [
        application_response(application, principal)
        for application in scoping.list_applications_for_student(db, principal)
    ]


@router.post('/applications', response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def create_application(
    data: CreateApplicationRequest,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    application = applications.create_application(
        db,
        principal,
        university_id=data.university_id,
        application_type=data.application_type,
        deadline=data.deadline,
        notes=data.notes,
    )
    return application_response(application, principal)


@router.get('/applications/{application_id}', response_model=ApplicationResponse)
def get_application(
    application_id: int,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    application = applications.get_application(db, principal, application_id)
    return application_response(application, principal)


@router.put('/applications/{application_id}', response_model=ApplicationResponse)
def update_application(
    application_id: int,
    data: UpdateApplicationRequest,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    application = applications.update_application(
        db, principal, application_id, data.model_dump(exclude_unset=True)
    )
    return application_response(application, principal)


@router.delete('/applications/{application_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_application(
    application_id: int,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    applications.delete_application(db, principal, application_id)


@router.post(
    '/applications/{application_id}/requirements',
    response_model=RequirementResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_requirement(
    application_id: int,
    data: CreateRequirementRequest,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    return applications.add_requirement(
        db,
        principal,
        application_id,
        requirement_type=data.requirement_type,
        deadline=data.deadline,
        notes=data.notes,
    )


@router.put('/requirements/{requirement_id}', response_model=RequirementResponse)
def update_requirement(
    requirement_id: int,
    data: UpdateRequirementRequest,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    return applications.update_requirement(db, principal, requirement_id, data.model_dump(exclude_unset=True))


@router.delete('/requirements/{requirement_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_requirement(
    requirement_id: int,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    applications.delete_requirement(db, principal, requirement_id)


@router.get('/documents', response_model=list[DocumentResponse])
def list_documents(
    application_id: int | None = Query(default=None),
    requirement_id: int | None = Query(default=None),
    document_type: DocumentType | None = Query(default=None),
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    return scoping.list_documents(
        db,
        principal,
        application_id=application_id,
        requirement_id=requirement_id,
        document_type=document_type,
    )


@router.post('/documents', response_model=list[DocumentResponse], status_code=status.HTTP_201_CREATED)
def upload_documents(
    files: list[UploadFile] = File(...),
    application_id: int | None = Form(default=None),
    requirement_id: int | None = Form(default=None),
    document_type: DocumentType | None = Form(default=None),
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    incoming = [
        IncomingFile(
            original_name=upload.filename or 'upload',
            mime_type=upload.content_type or '',
            data=upload.file.read(),
        )
        for upload in files
    ]
    return documents.upload_documents(
        db,
        storage,
        principal,
        incoming,
        application_id=application_id,
        requirement_id=requirement_id,
        document_type=document_type,
    )


@router.get('/documents/{document_id}', response_model=DocumentResponse)
def get_document(
    document_id: int,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    return documents.get_document(db, principal, document_id)


@router.put('/documents/{document_id}', response_model=DocumentResponse)
def update_document(
    document_id: int,
    data: UpdateDocumentRequest,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
):
    return documents.update_document(db, principal, document_id, data.model_dump(exclude_unset=True))


@router.delete('/documents/{document_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: int,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    documents.delete_document(db, storage, principal, document_id)


@router.get('/documents/{document_id}/download')
def download_document(
    document_id: int,
    principal: Principal = Depends(require_student),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    document, data = documents.read_document(db, storage, principal, document_id)
    return Response(
        content=data,
        media_type=document.mime_type,
        headers={'Content-Disposition': f'attachment; filename="{quote(document.original_name)}"'},
    )

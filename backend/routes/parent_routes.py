from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_parent
from backend.auth.principal import Principal
from backend.database import get_db
from backend.routes.schemas import ApplicationResponse, ParentNoteResponse, StudentResponse, application_response
from backend.services import applications, notes, relationships, scoping

router = APIRouter(tags=['parent'])


class LinkStudentRequest(BaseModel):
    student_email: str

    @field_validator('student_email')
    @classmethod
    def validate_student_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError('Student email is required.')
        return normalized


class CreateNoteRequest(BaseModel):
    content: str | None = None


@router.get('/students', response_model=list[StudentResponse])
def list_students(principal: Principal = Depends(require_parent), db: Session = Depends(get_db)):
    return relationships.list_students(db, principal.parent_id)


@router.post('/students', response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def link_student(
    data: LinkStudentRequest,
    principal: Principal = Depends(require_parent),
    db: Session = Depends(get_db),
):
    return relationships.link_student(db, principal.parent_id, data.student_email)


@router.get('/applications', response_model=list[ApplicationResponse])
def list_applications(
    student_id: int | None = Query(default=None),
    principal: Principal = Depends(require_parent),
    db: Session = Depends(get_db),
):
    return [
        application_response(application, principal)
        for application in scoping.list_applications_for_parent(db, principal, student_id)
    ]


@router.get('/applications/{application_id}', response_model=ApplicationResponse)
def get_application(
    application_id: int,
    principal: Principal = Depends(require_parent),
    db: Session = Depends(get_db),
):
    application = applications.get_application(db, principal, application_id)
    return application_response(application, principal)


@router.post(
    '/applications/{application_id}/notes',
    response_model=ParentNoteResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_note(
    application_id: int,
    data: CreateNoteRequest,
    principal: Principal = Depends(require_parent),
    db: Session = Depends(get_db),
):
    return notes.add_note(db, principal, application_id, data.content)

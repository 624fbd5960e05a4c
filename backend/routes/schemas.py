"""Response models shared by the student and parent routes."""

from datetime import datetime

from pydantic import BaseModel

from backend.auth.principal import Principal
from backend.models.application import Application
from backend.models.enums import (
    ApplicationStatus,
    ApplicationType,
    DecisionType,
    DocumentType,
    RequirementStatus,
    RequirementType,
)
from backend.services.scoping import visible_notes


class UniversityResponse(BaseModel):
    id: int
    name: str
    country: str
    state: str | None = None
    city: str | None = None
    us_news_ranking: int | None = None
    acceptance_rate: float | None = None
    application_system: str | None = None
    tuition_in_state: int | None = None
    tuition_out_state: int | None = None
    application_fee: int | None = None
    deadlines: str | None = None

    class Config:
        from_attributes = True


class RequirementResponse(BaseModel):
    id: int
    application_id: int
    requirement_type: RequirementType
    status: RequirementStatus
    deadline: datetime | None = None
    notes: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class NoteAuthorResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ParentNoteResponse(BaseModel):
    id: int
    parent_id: int
    application_id: int
    content: str
    created_at: datetime
    parent: NoteAuthorResponse | None = None

    class Config:
        from_attributes = True


class ApplicationSummaryResponse(BaseModel):
    id: int
    student_id: int
    university_id: int
    university: UniversityResponse | None = None
    application_type: ApplicationType
    status: ApplicationStatus
    deadline: datetime | None = None
    submitted_date: datetime | None = None
    decision_date: datetime | None = None
    decision_type: DecisionType | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    requirements: list[RequirementResponse] = []

    class Config:
        from_attributes = True


class StudentBriefResponse(BaseModel):
    id: int
    name: str
    graduation_year: int | None = None

    class Config:
        from_attributes = True


class ApplicationResponse(ApplicationSummaryResponse):
    parent_notes: list[ParentNoteResponse] = []
    student: StudentBriefResponse | None = None


class StudentResponse(BaseModel):
    id: int
    user_id: int
    name: str
    graduation_year: int | None = None
    gpa: float | None = None
    sat_score: int | None = None
    act_score: int | None = None
    target_countries: str | None = None
    intended_majors: str | None = None
    applications: list[ApplicationSummaryResponse] = []

    class Config:
        from_attributes = True


class StudentProfileResponse(StudentResponse):
    applications: list[ApplicationResponse] = []


class DocumentApplicationResponse(BaseModel):
    id: int
    application_type: ApplicationType
    university: UniversityResponse | None = None

    class Config:
        from_attributes = True


class DocumentResponse(BaseModel):
    id: int
    student_id: int
    filename: str
    original_name: str
    mime_type: str
    size: int
    document_type: DocumentType
    application_id: int | None = None
    requirement_id: int | None = None
    uploaded_at: datetime
    application: DocumentApplicationResponse | None = None
    requirement: RequirementResponse | None = None

    class Config:
        from_attributes = True


def application_response(application: Application, principal: Principal) -> ApplicationResponse:
    """Serialize an application with only the notes ``principal`` may see."""
    summary = ApplicationSummaryResponse.model_validate(application)
    notes = [ParentNoteResponse.model_validate(note) for note in visible_notes(application, principal)]
    student = StudentBriefResponse.model_validate(application.student) if principal.is_parent else None
    return ApplicationResponse(**summary.model_dump(), parent_notes=notes, student=student)


def student_profile_response(student, principal: Principal) -> StudentProfileResponse:
    """Owner's view of their profile, including every parent's notes."""
    payload = StudentResponse.model_validate(student).model_dump(exclude={'applications'})
    applications = [application_response(application, principal) for application in student.applications]
    return StudentProfileResponse(**payload, applications=applications)

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.dependencies import get_current_principal
from backend.auth.principal import Principal
from backend.core import config
from backend.core.errors import UnauthenticatedError
from backend.database import get_db
from backend.models.enums import Role
from backend.models.user import User
from backend.services import registration

router = APIRouter(tags=['auth'])

TOKEN_MAX_AGE_SECONDS = 60 * 60 * 24 * config.JWT_EXPIRES_DAYS


class RegisterRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    role: Role | None = None
    name: str | None = None
    graduation_year: int | None = None
    parent_student_email: str | None = None

    @field_validator('role', mode='before')
    @classmethod
    def normalize_role(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator('parent_student_email')
    @classmethod
    def normalize_parent_student_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower()
        return normalized or None


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileSummary(BaseModel):
    id: int
    name: str


class UserResponse(BaseModel):
    id: int
    email: str
    role: Role
    profile: ProfileSummary | None = None


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    access_token: str
    token_type: str = 'bearer'
    linked_student_id: int | None = None


class LinkedStudentResponse(BaseModel):
    id: int
    name: str


class MeResponse(BaseModel):
    user_id: int
    email: str
    role: Role
    name: str
    student_id: int | None = None
    parent_id: int | None = None
    linked_students: list[LinkedStudentResponse] = []


def set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.TOKEN_COOKIE_NAME,
        value=token,
        max_age=TOKEN_MAX_AGE_SECONDS,
        httponly=True,
        secure=config.TOKEN_COOKIE_SECURE,
        samesite='lax',
    )


def _issue_token(user: User) -> str:
    return jwt_handler.create_access_token(user_id=user.id, email=user.email, role=user.role.value)


def _profile_summary(user: User) -> ProfileSummary | None:
    profile = user.student if user.role == Role.STUDENT else user.parent
    if profile is None:
        return None
    return ProfileSummary(id=profile.id, name=profile.name)


@router.post('/register', response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    result = registration.register_user(
        db,
        email=data.email,
        password=data.password,
        role=data.role,
        name=data.name,
        graduation_year=data.graduation_year,
        parent_student_email=data.parent_student_email,
    )
    user = result.user
    token = _issue_token(user)
    set_token_cookie(response, token)

    return AuthResponse(
        message='User created successfully',
        user=UserResponse(id=user.id, email=user.email, role=user.role, profile=_profile_summary(user)),
        access_token=token,
        linked_student_id=result.linked_student.id if result.linked_student else None,
    )


@router.post('/login', response_model=AuthResponse)
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    user = registration.authenticate(db, data.email, data.password)
    if user is None:
        raise UnauthenticatedError('Invalid email or password.')

    token = _issue_token(user)
    set_token_cookie(response, token)

    return AuthResponse(
        message='Login successful',
        user=UserResponse(id=user.id, email=user.email, role=user.role, profile=_profile_summary(user)),
        access_token=token,
    )


@router.post('/logout')
def logout(response: Response):
    response.delete_cookie(
        key=config.TOKEN_COOKIE_NAME,
        httponly=True,
        secure=config.TOKEN_COOKIE_SECURE,
        samesite='lax',
    )
    return {'message': 'Logged out'}


@router.get('/me', response_model=MeResponse)
def me(principal: Principal = Depends(get_current_principal)):
    return MeResponse(
        user_id=principal.user_id,
        email=principal.email,
        role=principal.role,
        name=principal.name,
        student_id=principal.student_id,
        parent_id=principal.parent_id,
        linked_students=[
            LinkedStudentResponse(id=student.id, name=student.name)
            for student in principal.linked_students
        ],
    )

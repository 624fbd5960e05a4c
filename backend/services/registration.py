"""Account creation and login.

A user and its role profile (plus, for a parent, the optional link to a
student) are written in one transaction: either every row exists afterwards
or none does.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.auth.passwords import hash_password, verify_password
from backend.core.errors import AppError, ConflictError, NotFoundError, ValidationFailedError
from backend.models.enums import Role
from backend.models.parent import Parent
from backend.models.student import Student
from backend.models.user import User
from backend.services import relationships

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt limit


@dataclass
class RegistrationResult:
    user: User
    profile: Student | Parent
    linked_student: Student | None = None


def normalize_email(email: str | None) -> str:
    return (email or '').strip().lower()


def _validate(email: str, password: str | None, role: Role | None, name: str | None) -> None:
    if not email or not password or role is None or not (name or '').strip():
        raise ValidationFailedError('Missing required fields.')
    if '@' not in email:
        raise ValidationFailedError('Email address is invalid.')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailedError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValidationFailedError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes.')


def create_profile(db: Session, user: User, name: str, graduation_year: int | None = None) -> Student | Parent:
    if user.role == Role.STUDENT:
        profile = Student(user_id=user.id, name=name, graduation_year=graduation_year)
    else:
        profile = Parent(user_id=user.id, name=name)
    db.add(profile)
    db.flush()
    return profile


def register_user(
    db: Session,
    email: str,
    password: str,
    role: Role,
    name: str,
    graduation_year: int | None = None,
    parent_student_email: str | None = None,
) -> RegistrationResult:
    email = normalize_email(email)
    _validate(email, password, role, name)
    name = name.strip()

    if db.query(User.id).filter(User.email == email).first() is not None:
        raise ConflictError('User already exists.')

    try:
        user = User(email=email, hashed_password=hash_password(password), role=role)
        db.add(user)
        db.flush()

        profile = create_profile(db, user, name, graduation_year if role == Role.STUDENT else None)

        linked_student = None
        if role == Role.PARENT and parent_student_email:
            try:
                linked_student = relationships.link_student(db, profile.id, parent_student_email, commit=False)
            except NotFoundError:
                logger.warning('Parent %s registered without link: no student for the given email', user.id)

        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError('User already exists.') from exc
    except AppError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception('Registration failed for %s', email)
        raise

    db.refresh(user)
    logger.info('Registered %s user %s', role.value, user.id)
    return RegistrationResult(user=user, profile=profile, linked_student=linked_student)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password('not-a-real-account-password')


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        # Same bcrypt cost as a real check, so unknown emails are not faster.
        verify_password(password or '', _dummy_hash())
        return None
    if not verify_password(password or '', user.hashed_password):
        return None
    return user

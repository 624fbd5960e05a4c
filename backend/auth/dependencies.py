from collections.abc import Iterable

from fastapi import Depends, Request
from sqlalchemy.orm import Session, joinedload

from backend.auth import jwt_handler
from backend.auth.principal import LinkedStudent, Principal
from backend.core import config
from backend.core.errors import ForbiddenError, UnauthenticatedError
from backend.database import get_db
from backend.models.enums import Role
from backend.models.parent import Parent, ParentStudentLink
from backend.models.user import User

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None, cookie_token: str | None) -> str | None:
    """Pick the request credential. A bearer header wins over the cookie."""
    if authorization and authorization[:len(BEARER_PREFIX)].lower() == BEARER_PREFIX:
        header_token = authorization[len(BEARER_PREFIX):].strip()
        if header_token:
            return header_token
    if cookie_token and cookie_token.strip():
        return cookie_token.strip()
    return None


def resolve_principal(db: Session, token: str | None) -> Principal | None:
    if not token:
        return None

    payload = jwt_handler.decode_access_token(token)
    if payload is None:
        return None

    user = (
        db.query(User)
        .options(
            joinedload(User.student),
            joinedload(User.parent)
            .selectinload(Parent.student_links)
            .joinedload(ParentStudentLink.student),
        )
        .filter(User.id == payload["user_id"])
        .first()
    )
    if user is None:
        return None

    if user.role == Role.STUDENT:
        if user.student is None:
            return None
        return Principal(
            user_id=user.id,
            email=user.email,
            role=Role.STUDENT,
            name=user.student.name,
            student_id=user.student.id,
        )

    if user.role == Role.PARENT:
        if user.parent is None:
            return None
        linked = tuple(
            LinkedStudent(id=link.student.id, name=link.student.name)
            for link in user.parent.student_links
        )
        return Principal(
            user_id=user.id,
            email=user.email,
            role=Role.PARENT,
            name=user.parent.name,
            parent_id=user.parent.id,
            linked_students=linked,
        )

    return None


def require_role(principal: Principal | None, allowed: Iterable[Role]) -> Principal:
    if principal is None:
        raise UnauthenticatedError()
    if principal.role not in set(allowed):
        raise ForbiddenError()
    return principal


def get_optional_principal(request: Request, db: Session = Depends(get_db)) -> Principal | None:
    token = extract_bearer_token(
        request.headers.get("authorization"),
        request.cookies.get(config.TOKEN_COOKIE_NAME),
    )
    return resolve_principal(db, token)


def get_current_principal(principal: Principal | None = Depends(get_optional_principal)) -> Principal:
    return require_role(principal, Role)


def require_student(principal: Principal | None = Depends(get_optional_principal)) -> Principal:
    return require_role(principal, {Role.STUDENT})


def require_parent(principal: Principal | None = Depends(get_optional_principal)) -> Principal:
    return require_role(principal, {Role.PARENT})

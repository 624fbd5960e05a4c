import pytest

from backend.auth import jwt_handler
from backend.auth.dependencies import extract_bearer_token, require_role, resolve_principal
from backend.auth.passwords import hash_password
from backend.core.errors import ForbiddenError, UnauthenticatedError
from backend.models.enums import Role
from backend.models.user import User


def test_bearer_header_wins_over_cookie() -> None:
    assert extract_bearer_token('Bearer header-token', 'cookie-token') == 'header-token'


def test_bearer_prefix_is_case_insensitive() -> None:
    assert extract_bearer_token('bearer header-token', None) == 'header-token'


@pytest.mark.parametrize('header', [None, '', 'Basic abc', 'Bearer ', 'Token abc'])
def test_cookie_is_used_without_a_usable_bearer_header(header: str | None) -> None:
    assert extract_bearer_token(header, 'cookie-token') == 'cookie-token'


def test_no_credential_yields_none() -> None:
    assert extract_bearer_token(None, None) is None
    assert extract_bearer_token('Basic abc', '  ') is None


def test_invalid_token_resolves_to_anonymous_without_touching_the_database() -> None:
    assert resolve_principal(None, 'garbage') is None
    assert resolve_principal(None, None) is None


def test_student_token_resolves_to_student_principal(db, register, principal_for) -> None:
    user = register('alice@x.com', Role.STUDENT, name='Alice')

    principal = principal_for(user)

    assert principal.role == Role.STUDENT
    assert principal.is_student
    assert principal.name == 'Alice'
    assert principal.student_id == user.student.id
    assert principal.profile_id == user.student.id
    assert principal.parent_id is None
    assert principal.linked_students == ()


def test_parent_token_carries_linked_students(db, register, principal_for) -> None:
    student = register('alice@x.com', Role.STUDENT, name='Alice')
    parent = register('bob@x.com', Role.PARENT, name='Bob', parent_student_email='alice@x.com')

    principal = principal_for(parent)

    assert principal.is_parent
    assert principal.parent_id == parent.parent.id
    assert [(linked.id, linked.name) for linked in principal.linked_students] == [(student.student.id, 'Alice')]


def test_token_for_missing_user_resolves_to_anonymous(db) -> None:
    token = jwt_handler.create_access_token(9999, 'ghost@x.com', 'STUDENT')

    assert resolve_principal(db, token) is None


def test_user_without_role_profile_resolves_to_anonymous(db) -> None:
    user = User(email='orphan@x.com', hashed_password=hash_password('pw12345678'), role=Role.STUDENT)
    db.add(user)
    db.commit()
    token = jwt_handler.create_access_token(user.id, user.email, user.role.value)

    assert resolve_principal(db, token) is None


def test_role_in_database_wins_over_role_claim(db, register) -> None:
    user = register('alice@x.com', Role.STUDENT)
    token = jwt_handler.create_access_token(user.id, user.email, 'PARENT')

    assert resolve_principal(db, token).role == Role.STUDENT


def test_require_role_rejects_anonymous_as_unauthenticated() -> None:
    with pytest.raises(UnauthenticatedError) as exception_info:
        require_role(None, {Role.STUDENT})

    assert exception_info.value.status_code == 401


def test_require_role_rejects_wrong_role_as_forbidden(db, register, principal_for) -> None:
    principal = principal_for(register('alice@x.com', Role.STUDENT))

    with pytest.raises(ForbiddenError) as exception_info:
        require_role(principal, {Role.PARENT})

    assert exception_info.value.status_code == 403
    assert require_role(principal, {Role.STUDENT}) is principal

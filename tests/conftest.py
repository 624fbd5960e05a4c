import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend.auth import jwt_handler  # noqa: E402
from backend.auth.dependencies import resolve_principal  # noqa: E402
from backend.database import Base  # noqa: E402
from backend.models import application, document, parent, parent_note, student, user  # noqa: E402,F401
from backend.models.enums import Role  # noqa: E402
from backend.models.university import University  # noqa: E402
from backend.services import registration  # noqa: E402

PASSWORD = 'pw12345678'


@pytest.fixture
def db():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_university(db):
    def _make(name: str = 'Harvard University', **fields) -> University:
        fields.setdefault('country', 'United States')
        university = University(name=name, **fields)
        db.add(university)
        db.commit()
        db.refresh(university)
        return university

    return _make


@pytest.fixture
def register(db):
    def _register(email: str, role: Role, name: str | None = None, parent_student_email: str | None = None):
        return registration.register_user(
            db,
            email=email,
            password=PASSWORD,
            role=role,
            name=name or email.split('@')[0].title(),
            parent_student_email=parent_student_email,
        ).user

    return _register


@pytest.fixture
def principal_for(db):
    def _principal(user):
        token = jwt_handler.create_access_token(user.id, user.email, user.role.value)
        return resolve_principal(db, token)

    return _principal


@pytest.fixture
def world(db, register, principal_for, make_university):
    """Two students, a parent linked to alice at registration, and an unlinked parent."""
    alice = register('alice@x.com', Role.STUDENT, name='Alice')
    dave = register('dave@x.com', Role.STUDENT, name='Dave')
    bob = register('bob@x.com', Role.PARENT, name='Bob', parent_student_email='alice@x.com')
    carol = register('carol@x.com', Role.PARENT, name='Carol')

    return SimpleNamespace(
        alice=principal_for(alice),
        dave=principal_for(dave),
        bob=principal_for(bob),
        carol=principal_for(carol),
        u1=make_university('University One', us_news_ranking=1),
        u2=make_university('University Two', us_news_ranking=2),
    )

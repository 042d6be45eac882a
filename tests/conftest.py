import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from eduplatform.main import app
from eduplatform.core.enums import Role
from eduplatform.db.base import Base
from eduplatform.dependencies.db import get_db
from eduplatform.dependencies.mail import get_mail_sender

from helpers import ADMIN_ID, INSTRUCTOR_ID, STUDENT_ID, FakeMailer, make_user


@pytest.fixture
def engine(tmp_path):
    # 세션마다 별도 커넥션을 쓰도록 파일 기반 SQLite 사용
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db):
    make_user(db, ADMIN_ID, "admin@example.com", "Admin Kim", Role.ADMIN)
    make_user(db, INSTRUCTOR_ID, "lan@example.com", "Lan Nguyen", Role.STUDENT, Role.INSTRUCTOR)
    make_user(db, STUDENT_ID, "student@example.com", "Minh Tran", Role.STUDENT)
    return {"admin": ADMIN_ID, "instructor": INSTRUCTOR_ID, "student": STUDENT_ID}


@pytest.fixture
def mailer():
    return FakeMailer(configured=True)


@pytest.fixture
def demo_mailer():
    return FakeMailer(configured=False)


@pytest.fixture
def client(session_factory, mailer):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_sender] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()

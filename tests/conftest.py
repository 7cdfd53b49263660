import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL") or "sqlite:///./test.db"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.core.database import Base, get_db, engine
from app.core.security import get_password_hash
from app.core.constants import RoleEnum
from app.crud.user import user as crud_user
from app.services.file_store import LocalFileStore, get_file_store
from app.utils import deps as deps_utils
import main

test_db_url = os.environ["DATABASE_URL"]


@pytest.fixture(scope="session")
def database_engine():
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if test_db_url.startswith("sqlite") and os.path.exists("./test.db"):
        os.remove("./test.db")


@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        # Services commit, so every test cleans the tables it touched
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
        db.close()


@pytest.fixture(scope="function")
def client(db_session, tmp_path):
    main.app.dependency_overrides[get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    main.app.dependency_overrides[get_file_store] = lambda: LocalFileStore(str(tmp_path), "/uploads")
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


def _token_from(response) -> str:
    body = response.json()
    token = body.get("data", {}).get("token", {}).get("access_token")
    assert token, f"Login failed or token missing: {body}"
    return token


@pytest.fixture
def user_factory(db_session):
    def _user_factory(name, password="testpass123", role=RoleEnum.USER):
        return crud_user.create(db_session, obj_in={
            "name": name,
            "hashed_password": get_password_hash(password),
            "role": role
        })
    return _user_factory


@pytest.fixture
def token_for(client, user_factory):
    """Create a user with the given name and return a bearer token for it."""
    def _token_for(name, role=RoleEnum.USER):
        user_factory(name, role=role)
        response = client.post("/auth/login", json={"name": name, "password": "testpass123"})
        return _token_from(response)
    return _token_for


@pytest.fixture
def admin_token(token_for):
    return token_for("admin", role=RoleEnum.ADMIN)


@pytest.fixture
def user_token(token_for):
    return token_for("alice")


@pytest.fixture
def auth_headers():
    def _auth_headers(token):
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def task_factory(db_session):
    from app.crud.task import task as crud_task

    def _task_factory(kind="closed", correct_answer="B", points=1, options=None, sheet_tag=None, prompt_ref=None):
        if kind == "closed" and options is None:
            options = ["A", "B", "C", "D"]
        return crud_task.create(db_session, obj_in={
            "kind": kind,
            "prompt_ref": prompt_ref or "/uploads/task.png",
            "correct_answer": correct_answer,
            "options": options,
            "points": points,
            "sheet_tag": sheet_tag
        })
    return _task_factory

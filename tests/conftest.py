import io
import os
from pathlib import Path

import mongomock
import pytest
from fastapi.testclient import TestClient
from PyPDF2 import PdfWriter

from jobboard.core.auth import create_user_token, hash_password
from jobboard.core.config import get_settings
from jobboard.db import mongodb
from jobboard.schemas.schemas import UserRole
from jobboard.services.integrity_service import IntegrityService
from jobboard.services.mongo_service import UserService


@pytest.fixture()
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "resumes"
    monkeypatch.setattr(get_settings(), "upload_dir", str(path))
    return path


@pytest.fixture()
def db(upload_dir: Path, monkeypatch: pytest.MonkeyPatch):
    """
    In-memory MongoDB wired into the shared connection module.

    Indexes are created through the real startup function so the
    (userId, jobId) uniqueness constraint is active in tests too.
    """
    database = mongomock.MongoClient()["job_board_test"]
    monkeypatch.setattr(mongodb, "_db", database)
    mongodb.init_mongo_indexes()
    return database


@pytest.fixture()
def client(db) -> TestClient:
    # Not used as a context manager: startup would try to build indexes on a real server.
    from jobboard.main import app

    return TestClient(app)


@pytest.fixture()
def service(db) -> IntegrityService:
    return IntegrityService()


def _make_user(name: str, role: UserRole, password: str = "secret1") -> dict:
    users = UserService()
    user_id = users.create(name, f"{name.lower()}@example.com", hash_password(password), role.value)
    return users.find_by_id(user_id)


@pytest.fixture()
def make_user(db):
    return _make_user


@pytest.fixture()
def admin(db) -> dict:
    return _make_user("Admin", UserRole.admin)


@pytest.fixture()
def provider(db) -> dict:
    return _make_user("Provider", UserRole.provider)


@pytest.fixture()
def seeker(db) -> dict:
    return _make_user("Seeker", UserRole.seeker)


def auth_header(user: dict) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture(scope="session")
def pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def make_resume(upload_dir: Path, pdf_bytes: bytes):
    """Write a resume file the way the upload handler would and return its path."""
    counter = {"n": 0}

    def _make() -> str:
        counter["n"] += 1
        os.makedirs(upload_dir, exist_ok=True)
        path = upload_dir / f"resume-{counter['n']}.pdf"
        path.write_bytes(pdf_bytes)
        return str(path)

    return _make


JOB = {
    "title": "Backend Engineer",
    "description": "Build and run the job board API.",
    "category": "Engineering",
    "location": "Remote",
}


@pytest.fixture()
def auth():
    return auth_header


@pytest.fixture()
def job_fields() -> dict:
    return dict(JOB)

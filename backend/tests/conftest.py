"""Shared fixtures: an isolated SQLite database and upload directory per test run."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="student_hub_tests_"))
os.environ["DATABASE_URL"] = "sqlite:///{}".format(_TMP_DIR / "test_student_hub.db")
os.environ["UPLOAD_DIR"] = str(_TMP_DIR / "uploads")
os.environ["BASE_URL"] = ""

import pytest
from fastapi.testclient import TestClient

from student_hub.database import Base, SessionLocal, engine
from student_hub.main import app
from student_hub.models import Student


@pytest.fixture(autouse=True)
def setup_database() -> None:  # type: ignore[no-untyped-def]
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():  # type: ignore[no-untyped-def]
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture()
def make_student(db):  # type: ignore[no-untyped-def]
    counter = {"n": 0}

    def _make(name: str = "Ada Lovelace", **overrides) -> Student:
        counter["n"] += 1
        n = counter["n"]
        student = Student(
            name=name,
            email=overrides.pop("email", "student{}@example.com".format(n)),
            phone=overrides.pop("phone", "555-010{}".format(n)),
            student_code=overrides.pop("student_code", "#code{:02d}".format(n)),
            **overrides,
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        return student

    return _make

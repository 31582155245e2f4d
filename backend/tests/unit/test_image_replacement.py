"""Image files stay consistent with the record when a commit fails."""

from __future__ import annotations

import io
from dataclasses import dataclass

import pytest

from student_hub.models import Badge, Student
from student_hub.services import uploads
from student_hub.services.badges import BadgeService
from student_hub.services.students import StudentService

STUDENT_ID = "5f0c2a1b2c3d4e5f60718293"
BADGE_ID = "6a0c2a1b2c3d4e5f60718294"


@dataclass
class FakeUpload:
    filename: str
    content_type: str
    file: io.BytesIO


def _png(name: str = "new.png") -> FakeUpload:
    return FakeUpload(name, "image/png", io.BytesIO(b"png"))


def _stored(kind: str) -> set:
    folder = uploads.UPLOAD_DIR / kind
    return set(folder.iterdir()) if folder.exists() else set()


def _path(kind: str, url: str):
    return uploads.UPLOAD_DIR / kind / url.rsplit("/", 1)[1]


class BrokenStore:
    """Record store whose commits always fail."""

    def __init__(self, record=None) -> None:
        self.record = record

    def find_by_id(self, record_id):
        return self.record

    def find_by_email_or_phone(self, email, phone, exclude_id=None):
        return None

    def add(self, record):
        raise RuntimeError("commit failed")

    def save(self, record):
        raise RuntimeError("commit failed")


class WorkingStore(BrokenStore):

    def add(self, record):
        return record

    def save(self, record):
        return record


def _student(photo=None) -> Student:
    return Student(id=STUDENT_ID, name="Grace", email="grace@example.com",
                   phone="555-0100", student_code="#grace1", photo=photo)


# ── students ─────────────────────────────────────────────────

def test_failed_create_removes_new_photo() -> None:
    before = _stored(uploads.STUDENT_PHOTOS)
    service = StudentService(BrokenStore())

    with pytest.raises(RuntimeError):
        service.create_student("Grace", "grace@example.com", "555-0100", photo=_png())
    assert _stored(uploads.STUDENT_PHOTOS) == before


def test_failed_update_keeps_old_photo_and_drops_new_one() -> None:
    old_url = uploads.save_image(uploads.STUDENT_PHOTOS, _png("old.png"))
    before = _stored(uploads.STUDENT_PHOTOS)
    service = StudentService(BrokenStore(_student(photo=old_url)))

    with pytest.raises(RuntimeError):
        service.update_student(STUDENT_ID, photo=_png())
    assert _path(uploads.STUDENT_PHOTOS, old_url).exists()
    assert _stored(uploads.STUDENT_PHOTOS) == before


def test_successful_update_removes_old_photo() -> None:
    old_url = uploads.save_image(uploads.STUDENT_PHOTOS, _png("old.png"))
    service = StudentService(WorkingStore(_student(photo=old_url)))

    student = service.update_student(STUDENT_ID, photo=_png())
    assert not _path(uploads.STUDENT_PHOTOS, old_url).exists()
    assert _path(uploads.STUDENT_PHOTOS, student.photo).exists()


# ── badges ───────────────────────────────────────────────────

def test_failed_badge_create_removes_new_image() -> None:
    before = _stored(uploads.BADGE_IMAGES)
    service = BadgeService(BrokenStore())

    with pytest.raises(RuntimeError):
        service.create_badge("Star", "Shiny", image=_png())
    assert _stored(uploads.BADGE_IMAGES) == before


def test_failed_badge_update_keeps_old_image_and_drops_new_one() -> None:
    old_url = uploads.save_image(uploads.BADGE_IMAGES, _png("old.png"))
    badge = Badge(id=BADGE_ID, title="Star", description="Shiny", image=old_url)
    before = _stored(uploads.BADGE_IMAGES)
    service = BadgeService(BrokenStore(badge))

    with pytest.raises(RuntimeError):
        service.update_badge(BADGE_ID, image=_png())
    assert _path(uploads.BADGE_IMAGES, old_url).exists()
    assert _stored(uploads.BADGE_IMAGES) == before

"""
Student Service - student records, their ratings and badge links.

Covers:
1. Paginated listing and OR-combined substring filtering
2. Create/update with email format and email/phone uniqueness checks
3. Photo replacement and removal alongside the record
4. Rating add/update/delete inside the student aggregate
5. Awarding and revoking badges
"""

import re
import secrets
import string
from typing import Optional

from student_hub.errors import (
    DuplicateStudentError, RatingNotFound, ValidationError
)
from student_hub.models.rating import Rating, SCORE_FIELDS, SCORE_RANGE
from student_hub.models.student import Student
from student_hub.services import uploads
from student_hub.services.identifiers import require_student
from student_hub.logging_config import get_logger, log_with_context

logger = get_logger("db")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DEFAULT_PAGE_SIZE = 20
FALLBACK_PAGE_SIZE = 10
RATING_REQUIRED_FIELDS = ("week", "day", "assignments", "participation", "performance")
RATING_FIELDS = ("week", "day") + SCORE_FIELDS

# query parameter -> column
FILTER_COLUMNS = {
    "name": "name",
    "email": "email",
    "studentCode": "student_code",
    "phone": "phone",
}


def generate_student_code() -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "#" + "".join(secrets.choice(alphabet) for _ in range(6))


def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_paging(page, limit) -> tuple:
    """
    Parse raw page/limit query values.

    Unparseable or zero values take the defaults (page 1, limit 20);
    a negative page becomes 1 and a negative limit becomes 10.
    """
    page = _to_int(page) or 1
    limit = _to_int(limit) or DEFAULT_PAGE_SIZE
    if page < 1:
        page = 1
    if limit < 1:
        limit = FALLBACK_PAGE_SIZE
    return page, limit


def _check_score(field: str, value) -> float:
    low, high = SCORE_RANGE
    if isinstance(value, bool):
        raise ValidationError("{} must be a number".format(field))
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("{} must be a number".format(field))
    if number < low or number > high:
        raise ValidationError("{} must be between {} and {}".format(field, low, high))
    return number


def _check_whole(field: str, value) -> int:
    if isinstance(value, bool):
        raise ValidationError("{} must be a whole number".format(field))
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("{} must be a whole number".format(field))


def _clean_rating_field(field: str, value):
    if field in SCORE_FIELDS:
        return _check_score(field, value)
    return _check_whole(field, value)


class StudentService:

    def __init__(self, students, badge_service=None):
        self.students = students
        self.badge_service = badge_service

    def get_student(self, student_id: str) -> Student:
        return require_student(self.students, student_id)

    # ── Listing ──────────────────────────────────────────────

    def list_students(self, page=None, limit=None,
                      filters: Optional[dict] = None) -> tuple:
        """
        Return (students, pagination) for one page.

        filters maps query names (name, email, studentCode, phone) to
        substrings; empty values are ignored.
        """
        page, limit = normalize_paging(page, limit)
        offset = (page - 1) * limit
        columns = {
            FILTER_COLUMNS[key]: value
            for key, value in (filters or {}).items()
            if key in FILTER_COLUMNS and value
        }
        students, total = self.students.page(offset, limit, columns or None)
        pagination = {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": (total + limit - 1) // limit,
            "hasNextPage": offset + len(students) < total,
            "hasPrevPage": page > 1,
        }
        return students, pagination

    # ── Create / update / delete ─────────────────────────────

    def _ensure_unused(self, email: Optional[str], phone: Optional[str],
                       exclude_id: Optional[str] = None) -> None:
        existing = self.students.find_by_email_or_phone(email, phone, exclude_id=exclude_id)
        if existing is None:
            return
        used = []
        if email is not None and existing.email == email:
            used.append("email")
        if phone is not None and existing.phone == phone:
            used.append("phone")
        raise DuplicateStudentError(used)

    def create_student(self, name: Optional[str], email: Optional[str], phone: Optional[str],
                       photo=None) -> Student:
        if not name:
            raise ValidationError("Name is required")
        if not email or not EMAIL_PATTERN.match(email):
            raise ValidationError("A valid email is required")
        if not phone:
            raise ValidationError("Phone number is required")
        self._ensure_unused(email, phone)

        student = Student(
            name=name,
            email=email,
            phone=phone,
            student_code=generate_student_code(),
        )
        new_photo = uploads.save_image(uploads.STUDENT_PHOTOS, photo) if photo is not None else None
        student.photo = new_photo

        try:
            student = self.students.add(student)
        except Exception:
            uploads.remove_file(new_photo)
            raise
        log_with_context(logger, "INFO", "Created new student: {}".format(name),
                         context={"student_id": str(student.id)},
                         extra_data={"email": email, "phone": phone})
        return student

    def update_student(self, student_id: str, name: Optional[str] = None, email: Optional[str] = None,
                       phone: Optional[str] = None, photo=None) -> Student:
        """Partial update; uniqueness is only checked for an email or phone that actually changes."""
        student = self.get_student(student_id)

        updated_email = email if email is not None else student.email
        if not updated_email or not EMAIL_PATTERN.match(updated_email):
            raise ValidationError("A valid email is required")

        changed_email = email if email is not None and email != student.email else None
        changed_phone = phone if phone is not None and phone != student.phone else None
        if changed_email is not None or changed_phone is not None:
            self._ensure_unused(changed_email, changed_phone, exclude_id=student.id)

        if name is not None:
            student.name = name
        student.email = updated_email
        if phone is not None:
            student.phone = phone

        old_photo = new_photo = None
        if photo is not None:
            old_photo = student.photo
            new_photo = uploads.save_image(uploads.STUDENT_PHOTOS, photo)
            student.photo = new_photo

        # files change only once the record is committed
        try:
            student = self.students.save(student)
        except Exception:
            uploads.remove_file(new_photo)
            raise
        uploads.remove_file(old_photo)
        log_with_context(logger, "INFO", "Updated student", context={"student_id": student_id})
        return student

    def delete_student(self, student_id: str) -> None:
        student = self.get_student(student_id)
        photo = student.photo
        self.students.delete(student)
        uploads.remove_file(photo)

    # ── Ratings ──────────────────────────────────────────────

    def _rating_index(self, student: Student, rating_id: str) -> int:
        for index, rating in enumerate(student.ratings):
            if str(rating.id) == str(rating_id):
                return index
        raise RatingNotFound(student.id, rating_id)

    def add_rating(self, student_id: str, data: dict) -> Student:
        student = self.get_student(student_id)

        missing = [field for field in RATING_REQUIRED_FIELDS if data.get(field) is None]
        if missing:
            raise ValidationError("Missing required field(s): {}".format(", ".join(missing)))

        values = {field: _clean_rating_field(field, data[field]) for field in RATING_FIELDS}
        student.ratings.append(Rating(**values))
        student = self.students.save(student)

        log_with_context(logger, "INFO", "Rating added",
                         context={"student_id": student_id}, extra_data={"week": values["week"]})
        return student

    def update_rating(self, student_id: str, rating_id: str, data: dict) -> Student:
        student = self.get_student(student_id)
        rating = student.ratings[self._rating_index(student, rating_id)]

        changes = {
            field: _clean_rating_field(field, data[field])
            for field in RATING_FIELDS
            if data.get(field) is not None
        }
        for field, value in changes.items():
            setattr(rating, field, value)
        return self.students.save(student)

    def delete_rating(self, student_id: str, rating_id: str) -> Student:
        student = self.get_student(student_id)
        del student.ratings[self._rating_index(student, rating_id)]
        return self.students.save(student)

    # ── Badges ───────────────────────────────────────────────

    def add_badge(self, student_id: str, badge_id: Optional[str]) -> Student:
        """Award a badge; awarding one the student already holds is a no-op."""
        student = self.get_student(student_id)
        if not badge_id:
            raise ValidationError("Missing required field(s): badgeId")
        badge = self.badge_service.get_badge(badge_id)
        if badge not in student.badges:
            student.badges.append(badge)
            student = self.students.save(student)
        return student

    def remove_badge(self, student_id: str, badge_id: str) -> Student:
        student = self.get_student(student_id)
        student.badges = [b for b in student.badges if str(b.id) != str(badge_id)]
        return self.students.save(student)

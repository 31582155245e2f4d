"""
Attendance Service - business rules for a student's attendance history.

Attendance entries live inside the Student aggregate. Every operation
resolves the owning student first, works on its in-memory collection
and persists the whole aggregate through the repository.

Rules enforced here:
1. day, week and month are required on create and must stay within
   1-31, 1-53 and 1-12
2. (day, week, month) is unique per student; on update the entry being
   edited is excluded from the check
3. Listing filters and sorts a copy, never the stored collection
4. Statistics are computed over the full collection; percentages are
   rounded to two decimals and are 0 when there are no records

Monthly breakdown keys follow the order in which each month first
appears in the stored collection, not numeric order.
"""

import re
from dataclasses import dataclass
from typing import Optional

from student_hub.errors import (
    AttendanceNotFound, DuplicateAttendanceError, ValidationError
)
from student_hub.models.attendance import AttendanceEntry, DAY_RANGE, WEEK_RANGE, MONTH_RANGE
from student_hub.models.student import Student
from student_hub.services.identifiers import require_student
from student_hub.logging_config import get_logger, log_with_context

logger = get_logger("attendance")

REQUIRED_FIELDS = ("day", "week", "month", "status")
DATE_FIELDS = ("day", "week", "month")
FIELD_RANGES = {
    "day": DAY_RANGE,
    "week": WEEK_RANGE,
    "month": MONTH_RANGE,
}
LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class ValidatedAttendance:
    day: int
    week: int
    month: int
    status: bool


def _is_present(data: dict, field: str) -> bool:
    # 0 and False are values; only an absent key or null counts as missing
    return data.get(field) is not None


def _as_int(field: str, value) -> int:
    if isinstance(value, bool):
        raise ValidationError("{} must be a whole number".format(field.capitalize()))
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError("{} must be a whole number".format(field.capitalize()))
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("{} must be a whole number".format(field.capitalize()))


def parse_filter_int(value: str) -> Optional[int]:
    """
    Leading integer of a query value ("1abc" -> 1), or None when the
    value does not start with one. None matches no entry.
    """
    match = LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def check_range(field: str, value) -> int:
    """Convert a day/week/month value and check it against its bounds."""
    number = _as_int(field, value)
    low, high = FIELD_RANGES[field]
    if number < low or number > high:
        raise ValidationError("{} must be between {} and {}".format(field.capitalize(), low, high))
    return number


def percentage(present: int, total: int) -> float:
    if total == 0:
        return 0
    return round(present / total * 100, 2)


class AttendanceService:
    """Attendance operations on top of a student repository."""

    def __init__(self, students):
        self.students = students

    # ── Lookups ──────────────────────────────────────────────

    def find_student(self, student_id: str) -> Student:
        return require_student(self.students, student_id)

    def _index_of(self, student: Student, attendance_id: str) -> int:
        for index, entry in enumerate(student.attendance):
            if str(entry.id) == str(attendance_id):
                return index
        raise AttendanceNotFound(student.id, attendance_id)

    # ── Validation ───────────────────────────────────────────

    def validate_attendance_fields(self, data: dict) -> ValidatedAttendance:
        """
        Check a full attendance payload.

        All missing fields are reported together; range violations are
        reported per field, in day, week, month order.
        """
        missing = [field for field in REQUIRED_FIELDS if not _is_present(data, field)]
        if missing:
            raise ValidationError("Missing required field(s): {}".format(", ".join(missing)))

        return ValidatedAttendance(
            day=check_range("day", data["day"]),
            week=check_range("week", data["week"]),
            month=check_range("month", data["month"]),
            status=bool(data["status"]),
        )

    def find_duplicate(self, student: Student, day: int, week: int, month: int,
                       exclude_index: int = -1) -> Optional[AttendanceEntry]:
        for index, entry in enumerate(student.attendance):
            if index == exclude_index:
                continue
            if entry.day == day and entry.week == week and entry.month == month:
                return entry
        return None

    # ── Queries ──────────────────────────────────────────────

    def list_attendance(self, student_id: str, month: Optional[str] = None,
                        week: Optional[str] = None, status: Optional[str] = None) -> list:
        """
        Return the student's entries, newest first.

        month and week arrive as text and their leading integer is
        compared; a value without one matches nothing.
        status keeps entries whose flag equals (status == "true").
        All given filters must match.
        """
        student = self.find_student(student_id)
        entries = list(student.attendance)

        if month not in (None, ""):
            wanted_month = parse_filter_int(month)
            entries = [e for e in entries if wanted_month is not None and e.month == wanted_month]
        if week not in (None, ""):
            wanted_week = parse_filter_int(week)
            entries = [e for e in entries if wanted_week is not None and e.week == wanted_week]
        if status is not None:
            wanted_status = status == "true"
            entries = [e for e in entries if e.status == wanted_status]

        entries.sort(key=lambda e: e.created_at, reverse=True)
        return entries

    def get_attendance(self, student_id: str, attendance_id: str) -> AttendanceEntry:
        student = self.find_student(student_id)
        return student.attendance[self._index_of(student, attendance_id)]

    def attendance_stats(self, student_id: str) -> dict:
        student = self.find_student(student_id)
        entries = student.attendance

        total = len(entries)
        present = sum(1 for e in entries if e.status is True)

        monthly = {}
        for entry in entries:
            bucket = monthly.setdefault(entry.month, {"total": 0, "present": 0, "absent": 0})
            bucket["total"] += 1
            if entry.status:
                bucket["present"] += 1
            else:
                bucket["absent"] += 1
        for bucket in monthly.values():
            bucket["percentage"] = percentage(bucket["present"], bucket["total"])

        return {
            "overall": {
                "totalRecords": total,
                "presentRecords": present,
                "absentRecords": total - present,
                "attendancePercentage": percentage(present, total),
            },
            "monthlyBreakdown": monthly,
        }

    # ── Mutations ────────────────────────────────────────────

    def create_attendance(self, student_id: str, data: dict) -> Student:
        student = self.find_student(student_id)
        validated = self.validate_attendance_fields(data)

        existing = self.find_duplicate(student, validated.day, validated.week, validated.month)
        if existing is not None:
            log_with_context(logger, "WARNING", "Rejected duplicate attendance record",
                             context={"student_id": student_id, "existing_attendance_id": str(existing.id)},
                             extra_data={"day": validated.day, "week": validated.week, "month": validated.month})
            raise DuplicateAttendanceError(validated.day, validated.week, validated.month)

        student.attendance.append(AttendanceEntry(
            day=validated.day,
            week=validated.week,
            month=validated.month,
            status=validated.status,
        ))
        student = self.students.save(student)

        log_with_context(logger, "INFO", "Attendance record added",
                         context={"student_id": student_id},
                         extra_data={"day": validated.day, "week": validated.week,
                                     "month": validated.month, "status": validated.status})
        return student

    def update_attendance(self, student_id: str, attendance_id: str, data: dict) -> Student:
        """
        Apply a partial update to one entry.

        Only the date fields present in data are range-checked. When any
        of them changes, the resulting (day, week, month) is checked for
        collisions with the other entries. status is re-coerced to bool
        when given and left untouched otherwise.
        """
        student = self.find_student(student_id)
        index = self._index_of(student, attendance_id)
        entry = student.attendance[index]

        changes = {}
        for field in DATE_FIELDS:
            if _is_present(data, field):
                changes[field] = check_range(field, data[field])

        if changes:
            day = changes.get("day", entry.day)
            week = changes.get("week", entry.week)
            month = changes.get("month", entry.month)
            if self.find_duplicate(student, day, week, month, exclude_index=index) is not None:
                log_with_context(logger, "WARNING", "Rejected attendance update colliding with another record",
                                 context={"student_id": student_id, "attendance_id": attendance_id},
                                 extra_data={"day": day, "week": week, "month": month})
                raise DuplicateAttendanceError(day, week, month)

        if _is_present(data, "status"):
            changes["status"] = bool(data["status"])

        for field, value in changes.items():
            setattr(entry, field, value)
        student = self.students.save(student)

        log_with_context(logger, "INFO", "Attendance record updated",
                         context={"student_id": student_id, "attendance_id": attendance_id},
                         extra_data={"fields": sorted(changes)})
        return student

    def delete_attendance(self, student_id: str, attendance_id: str) -> Student:
        student = self.find_student(student_id)
        index = self._index_of(student, attendance_id)

        # later entries move up one position
        del student.attendance[index]
        student = self.students.save(student)

        log_with_context(logger, "INFO", "Attendance record deleted",
                         context={"student_id": student_id, "attendance_id": attendance_id})
        return student

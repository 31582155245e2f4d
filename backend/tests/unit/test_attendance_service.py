"""Unit tests for the attendance rules, using in-memory aggregates and a fake store."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from student_hub.errors import (
    AttendanceNotFound, DuplicateAttendanceError, InvalidIdFormat, StudentNotFound, ValidationError
)
from student_hub.models import AttendanceEntry, Student
from student_hub.services.attendance import AttendanceService

STUDENT_ID = "64b7f0c2a1b2c3d4e5f60718"
UNKNOWN_ID = "aaaaaaaaaaaaaaaaaaaaaaaa"


class CountingStudentStore:
    """Holds one student in memory and counts store access."""

    def __init__(self, student: Student | None = None) -> None:
        self.student = student
        self.lookups = 0
        self.saves = 0

    def find_by_id(self, student_id: str):
        self.lookups += 1
        if self.student is not None and self.student.id == student_id:
            return self.student
        return None

    def save(self, student: Student) -> Student:
        self.saves += 1
        for index, entry in enumerate(student.attendance):
            if entry.id is None:
                entry.id = "{:024x}".format(index + 1000)
        return student


def _student(*entries: tuple) -> Student:
    student = Student(id=STUDENT_ID, name="Grace", email="grace@example.com",
                      phone="555-0100", student_code="#grace1")
    for index, (day, week, month, status) in enumerate(entries):
        student.attendance.append(AttendanceEntry(
            id="{:024x}".format(index + 1), day=day, week=week, month=month, status=status,
        ))
    return student


@pytest.fixture()
def store() -> CountingStudentStore:
    return CountingStudentStore(_student())


@pytest.fixture()
def service(store: CountingStudentStore) -> AttendanceService:
    return AttendanceService(store)


# ── identifiers ──────────────────────────────────────────────

@pytest.mark.parametrize("operation", [
    lambda s, sid: s.list_attendance(sid),
    lambda s, sid: s.get_attendance(sid, "0" * 24),
    lambda s, sid: s.create_attendance(sid, {"day": 1, "week": 1, "month": 1, "status": True}),
    lambda s, sid: s.update_attendance(sid, "0" * 24, {"status": False}),
    lambda s, sid: s.delete_attendance(sid, "0" * 24),
    lambda s, sid: s.attendance_stats(sid),
])
def test_malformed_id_fails_before_store_access(service, store, operation) -> None:
    with pytest.raises(InvalidIdFormat):
        operation(service, "not-a-valid-id")
    assert store.lookups == 0


@pytest.mark.parametrize("bad_id", ["123", "g" * 24, "a" * 25, ""])
def test_id_format_is_24_hex_characters(service, store, bad_id) -> None:
    with pytest.raises(InvalidIdFormat):
        service.find_student(bad_id)
    assert store.lookups == 0


def test_unknown_id_fails_after_one_lookup(service, store) -> None:
    with pytest.raises(StudentNotFound) as excinfo:
        service.attendance_stats(UNKNOWN_ID)
    assert store.lookups == 1
    assert UNKNOWN_ID in str(excinfo.value)


def test_uppercase_hex_id_is_accepted() -> None:
    student = _student()
    student.id = "64B7F0C2A1B2C3D4E5F60718"
    service = AttendanceService(CountingStudentStore(student))
    assert service.find_student("64B7F0C2A1B2C3D4E5F60718") is student


# ── field validation ─────────────────────────────────────────

def test_missing_fields_are_all_named(service) -> None:
    with pytest.raises(ValidationError) as excinfo:
        service.validate_attendance_fields({"day": 3, "month": 2})
    assert str(excinfo.value) == "Missing required field(s): week, status"


def test_missing_single_field_is_named_exactly(service) -> None:
    with pytest.raises(ValidationError) as excinfo:
        service.validate_attendance_fields({"day": 3, "month": 2, "status": True})
    assert str(excinfo.value) == "Missing required field(s): week"


def test_zero_and_false_count_as_present(service) -> None:
    # present but out of range, so the range check, not the presence check, fails
    with pytest.raises(ValidationError) as excinfo:
        service.validate_attendance_fields({"day": 0, "week": 1, "month": 1, "status": False})
    assert str(excinfo.value) == "Day must be between 1 and 31"


@pytest.mark.parametrize("data, message", [
    ({"day": 32, "week": 1, "month": 1, "status": True}, "Day must be between 1 and 31"),
    ({"day": 1, "week": 54, "month": 1, "status": True}, "Week must be between 1 and 53"),
    ({"day": 1, "week": 0, "month": 1, "status": True}, "Week must be between 1 and 53"),
    ({"day": 1, "week": 1, "month": 13, "status": True}, "Month must be between 1 and 12"),
    ({"day": 1, "week": 1, "month": 0, "status": True}, "Month must be between 1 and 12"),
])
def test_out_of_range_fields_are_named(service, data, message) -> None:
    with pytest.raises(ValidationError) as excinfo:
        service.validate_attendance_fields(data)
    assert str(excinfo.value) == message


def test_bounds_are_inclusive_and_status_is_coerced(service) -> None:
    validated = service.validate_attendance_fields({"day": 31, "week": 53, "month": 12, "status": 1})
    assert (validated.day, validated.week, validated.month) == (31, 53, 12)
    assert validated.status is True

    validated = service.validate_attendance_fields({"day": 1, "week": 1, "month": 1, "status": 0})
    assert validated.status is False


# ── duplicates ───────────────────────────────────────────────

def test_find_duplicate_matches_all_three_fields() -> None:
    student = _student((1, 1, 1, True), (2, 1, 1, False))
    service = AttendanceService(CountingStudentStore(student))

    assert service.find_duplicate(student, 2, 1, 1) is student.attendance[1]
    assert service.find_duplicate(student, 2, 1, 2) is None
    assert service.find_duplicate(student, 2, 1, 1, exclude_index=1) is None


def test_create_twice_with_same_key_is_rejected(service, store) -> None:
    data = {"day": 5, "week": 2, "month": 1, "status": True}
    student = service.create_attendance(STUDENT_ID, data)
    assert len(student.attendance) == 1
    assert store.saves == 1

    with pytest.raises(DuplicateAttendanceError) as excinfo:
        service.create_attendance(STUDENT_ID, dict(data, status=False))
    assert str(excinfo.value) == "Attendance record already exists for day 5, week 2, month 1"
    assert len(store.student.attendance) == 1
    assert store.saves == 1


def test_invalid_create_does_not_touch_the_aggregate(service, store) -> None:
    with pytest.raises(ValidationError):
        service.create_attendance(STUDENT_ID, {"day": 5, "week": 60, "month": 1, "status": True})
    assert store.student.attendance == []
    assert store.saves == 0


# ── update ───────────────────────────────────────────────────

def _service_with(*entries: tuple) -> tuple[AttendanceService, CountingStudentStore]:
    store = CountingStudentStore(_student(*entries))
    return AttendanceService(store), store


def test_update_into_another_entrys_key_is_rejected() -> None:
    service, store = _service_with((1, 1, 1, True), (2, 1, 1, False))
    target = store.student.attendance[1].id

    with pytest.raises(DuplicateAttendanceError):
        service.update_attendance(STUDENT_ID, target, {"day": 1})
    assert store.student.attendance[1].day == 2
    assert store.saves == 0


def test_update_to_own_current_key_succeeds() -> None:
    service, store = _service_with((1, 1, 1, True), (2, 1, 1, False))
    target = store.student.attendance[1].id

    student = service.update_attendance(STUDENT_ID, target, {"day": 2, "week": 1, "month": 1})
    assert student.attendance[1].natural_key == (2, 1, 1)
    assert store.saves == 1


def test_update_merges_partial_fields() -> None:
    service, store = _service_with((1, 1, 1, True))
    target = store.student.attendance[0].id

    student = service.update_attendance(STUDENT_ID, target, {"month": 3})
    entry = student.attendance[0]
    assert (entry.day, entry.week, entry.month, entry.status) == (1, 1, 3, True)

    student = service.update_attendance(STUDENT_ID, target, {"status": 0})
    assert student.attendance[0].status is False
    assert student.attendance[0].month == 3


def test_update_checks_only_given_fields() -> None:
    service, store = _service_with((1, 1, 1, True))
    target = store.student.attendance[0].id

    with pytest.raises(ValidationError) as excinfo:
        service.update_attendance(STUDENT_ID, target, {"month": 13})
    assert str(excinfo.value) == "Month must be between 1 and 12"


def test_update_unknown_entry_is_not_found() -> None:
    service, _ = _service_with((1, 1, 1, True))
    with pytest.raises(AttendanceNotFound) as excinfo:
        service.update_attendance(STUDENT_ID, "f" * 24, {"day": 4})
    assert "f" * 24 in str(excinfo.value)
    assert STUDENT_ID in str(excinfo.value)


# ── delete / get ─────────────────────────────────────────────

def test_delete_splices_and_shifts_later_entries() -> None:
    service, store = _service_with((1, 1, 1, True), (2, 1, 1, False), (3, 1, 1, True))
    middle = store.student.attendance[1].id

    student = service.delete_attendance(STUDENT_ID, middle)
    assert [e.day for e in student.attendance] == [1, 3]
    assert [e.position for e in student.attendance] == [0, 1]

    with pytest.raises(AttendanceNotFound):
        service.get_attendance(STUDENT_ID, middle)


def test_get_attendance_by_id() -> None:
    service, store = _service_with((1, 1, 1, True), (2, 1, 1, False))
    wanted = store.student.attendance[1]
    assert service.get_attendance(STUDENT_ID, wanted.id) is wanted


# ── stats ────────────────────────────────────────────────────

def test_stats_with_no_records() -> None:
    service, _ = _service_with()
    assert service.attendance_stats(STUDENT_ID) == {
        "overall": {
            "totalRecords": 0,
            "presentRecords": 0,
            "absentRecords": 0,
            "attendancePercentage": 0,
        },
        "monthlyBreakdown": {},
    }


def test_stats_overall_and_monthly() -> None:
    service, _ = _service_with((1, 1, 1, True), (2, 1, 1, False), (1, 2, 2, True))
    stats = service.attendance_stats(STUDENT_ID)

    assert stats["overall"] == {
        "totalRecords": 3,
        "presentRecords": 2,
        "absentRecords": 1,
        "attendancePercentage": 66.67,
    }
    assert stats["monthlyBreakdown"] == {
        1: {"total": 2, "present": 1, "absent": 1, "percentage": 50.0},
        2: {"total": 1, "present": 1, "absent": 0, "percentage": 100.0},
    }


def test_monthly_breakdown_keeps_first_occurrence_order() -> None:
    service, _ = _service_with((1, 1, 9, True), (2, 1, 3, False), (3, 1, 9, False))
    stats = service.attendance_stats(STUDENT_ID)
    assert list(stats["monthlyBreakdown"]) == [9, 3]


def test_list_filters_do_not_mutate_the_collection() -> None:
    service, store = _service_with((1, 1, 1, True), (2, 1, 1, False), (1, 2, 2, True))
    # creation timestamps are unset on in-memory entries; give them an order
    base = datetime(2024, 1, 1)
    for offset, entry in enumerate(store.student.attendance):
        entry.created_at = base + timedelta(minutes=offset)

    absent = service.list_attendance(STUDENT_ID, status="false")
    assert [e.day for e in absent] == [2]

    present_in_january = service.list_attendance(STUDENT_ID, month="1", status="true")
    assert [e.natural_key for e in present_in_january] == [(1, 1, 1)]

    assert [e.day for e in store.student.attendance] == [1, 2, 1]


def test_non_numeric_filter_matches_nothing() -> None:
    service, _ = _service_with((1, 1, 1, True), (2, 2, 1, True))
    assert service.list_attendance(STUDENT_ID, month="jan") == []
    assert service.list_attendance(STUDENT_ID, week="first") == []


def test_filter_uses_leading_integer() -> None:
    service, store = _service_with((1, 1, 1, True), (2, 2, 1, True))
    base = datetime(2024, 1, 1)
    for offset, entry in enumerate(store.student.attendance):
        entry.created_at = base + timedelta(minutes=offset)

    assert [e.day for e in service.list_attendance(STUDENT_ID, week="2nd")] == [2]
    assert [e.day for e in service.list_attendance(STUDENT_ID, month="1abc")] == [2, 1]

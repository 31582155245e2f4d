"""
Attendance API routes - a student's attendance records and statistics.

Provides endpoints for:
- Listing records with month/week/status filters
- Viewing, creating, updating and deleting a single record
- Overall and per-month attendance statistics
"""

import time
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from student_hub.dependencies import get_attendance_service
from student_hub.routes.responses import failure, success
from student_hub.serializers import serialize_attendance, serialize_student
from student_hub.services.attendance import AttendanceService
from student_hub.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


# ── Pydantic schemas ─────────────────────────────────────────

class AttendancePayload(BaseModel):
    """
    Attendance body. Every field is optional at this layer so the
    service can report all missing fields at once on create and
    accept any subset on update.
    """
    day: Optional[int] = None
    week: Optional[int] = None
    month: Optional[int] = None
    # any JSON value; the service coerces it to a boolean
    status: Optional[Any] = None


def _payload_dict(payload: Optional[AttendancePayload]) -> dict:
    return payload.model_dump(exclude_unset=True) if payload is not None else {}


# Registered before /{attendance_id} so "stats" is not taken for an id
@router.get("/api/students/{student_id}/attendance/stats")
def get_attendance_stats(student_id: str, service: AttendanceService = Depends(get_attendance_service)):
    """Overall and monthly attendance statistics."""
    try:
        stats = service.attendance_stats(student_id)
    except Exception as e:
        return failure("Failed to retrieve attendance statistics for student with ID: {}".format(student_id),
                       e, context={"student_id": student_id})

    return success("Attendance statistics retrieved successfully", stats)


@router.get("/api/students/{student_id}/attendance")
def list_attendance(
    student_id: str,
    month: Optional[str] = Query(None, description="Filter by month (1-12)"),
    week: Optional[str] = Query(None, description="Filter by week (1-53)"),
    status: Optional[str] = Query(None, description="'true' for present, anything else for absent"),
    service: AttendanceService = Depends(get_attendance_service)
):
    """List a student's attendance records, newest first."""
    start_time = time.time()
    try:
        entries = service.list_attendance(student_id, month=month, week=week, status=status)
    except Exception as e:
        return failure("Failed to retrieve attendance for student with ID: {}".format(student_id),
                       e, context={"student_id": student_id})

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Listed {} attendance records".format(len(entries)),
        context={"student_id": student_id},
        extra_data={"duration_ms": round(duration_ms, 2), "month": month, "week": week, "status": status})

    return success("Attendance records retrieved successfully",
                   [serialize_attendance(e) for e in entries])


@router.get("/api/students/{student_id}/attendance/{attendance_id}")
def get_attendance(student_id: str, attendance_id: str,
                   service: AttendanceService = Depends(get_attendance_service)):
    try:
        entry = service.get_attendance(student_id, attendance_id)
    except Exception as e:
        return failure(
            "Failed to retrieve attendance record with ID: {} for student with ID: {}".format(
                attendance_id, student_id),
            e, context={"student_id": student_id, "attendance_id": attendance_id})

    return success("Attendance record retrieved successfully", serialize_attendance(entry))


@router.post("/api/students/{student_id}/attendance")
def create_attendance(student_id: str, payload: Optional[AttendancePayload] = None,
                      service: AttendanceService = Depends(get_attendance_service)):
    """Add an attendance record; responds with the whole student."""
    try:
        student = service.create_attendance(student_id, _payload_dict(payload))
    except Exception as e:
        return failure(
            "Failed to add attendance to student with ID: {}. Please check the input data.".format(student_id),
            e, context={"student_id": student_id})

    return success("Attendance record added successfully", serialize_student(student), status_code=201)


@router.put("/api/students/{student_id}/attendance/{attendance_id}")
def update_attendance(student_id: str, attendance_id: str, payload: Optional[AttendancePayload] = None,
                      service: AttendanceService = Depends(get_attendance_service)):
    """Partially update an attendance record; responds with the whole student."""
    try:
        student = service.update_attendance(student_id, attendance_id, _payload_dict(payload))
    except Exception as e:
        return failure(
            "Failed to update attendance with ID: {} for student with ID: {}. Please check the input data.".format(
                attendance_id, student_id),
            e, context={"student_id": student_id, "attendance_id": attendance_id})

    return success(
        "Attendance record with ID: {} updated successfully for student with ID: {}".format(
            attendance_id, student_id),
        serialize_student(student))


@router.delete("/api/students/{student_id}/attendance/{attendance_id}")
def delete_attendance(student_id: str, attendance_id: str,
                      service: AttendanceService = Depends(get_attendance_service)):
    try:
        student = service.delete_attendance(student_id, attendance_id)
    except Exception as e:
        return failure(
            "Failed to delete attendance record with ID: {} from student with ID: {}.".format(
                attendance_id, student_id),
            e, context={"student_id": student_id, "attendance_id": attendance_id})

    return success(
        "Attendance record with ID: {} deleted successfully from student with ID: {}".format(
            attendance_id, student_id),
        serialize_student(student))

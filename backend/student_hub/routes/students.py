"""
Students API routes - student records, ratings and badge awards.

Provides endpoints for:
- Listing students with pagination, and OR-filtering by name/email/code/phone
- Creating and updating students from multipart forms (optional photo)
- Deleting students together with their photo
- Adding, updating and removing ratings
- Awarding and revoking badges
"""

import time
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel

from student_hub.dependencies import get_student_service
from student_hub.routes.responses import failure, success
from student_hub.serializers import serialize_student
from student_hub.services.students import StudentService
from student_hub.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


class BadgeAward(BaseModel):
    """Body for awarding a badge to a student."""
    badgeId: Optional[str] = None


def _file_or_none(upload: Optional[UploadFile]) -> Optional[UploadFile]:
    # Browsers submit an empty part when no file is chosen
    if upload is None or not upload.filename:
        return None
    return upload


def _paginated(message: str, students, pagination: dict):
    return success(message, [serialize_student(s) for s in students], pagination=pagination)


@router.get("/api/students")
def list_students(
    page: Optional[str] = Query(None, description="Page number (default 1)"),
    limit: Optional[str] = Query(None, description="Page size (default 20)"),
    service: StudentService = Depends(get_student_service)
):
    start_time = time.time()
    try:
        students, pagination = service.list_students(page, limit)
    except Exception as e:
        return failure("Failed to retrieve students.", e)

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Listed {} students (page {}, total {})".format(len(students), pagination["page"], pagination["total"]),
        extra_data={"duration_ms": round(duration_ms, 2)})
    return _paginated("Students retrieved successfully", students, pagination)


# Registered before /{student_id} so "filters" is not taken for an id
@router.get("/api/students/filters")
def filter_students(
    name: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    student_code: Optional[str] = Query(None, alias="studentCode"),
    phone: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    service: StudentService = Depends(get_student_service)
):
    """Students matching ANY of the given fields (case-insensitive substring)."""
    filters = {"name": name, "email": email, "studentCode": student_code, "phone": phone}
    try:
        students, pagination = service.list_students(page, limit, filters=filters)
    except Exception as e:
        return failure("Failed to filter students.", e)

    return _paginated("Students retrieved successfully", students, pagination)


@router.get("/api/students/{student_id}")
def get_student(student_id: str, service: StudentService = Depends(get_student_service)):
    try:
        student = service.get_student(student_id)
    except Exception as e:
        return failure("An error occurred while retrieving the student with ID: {}".format(student_id),
                       e, context={"student_id": student_id})

    return success("Student retrieved successfully", serialize_student(student))


@router.post("/api/students")
def create_student(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    service: StudentService = Depends(get_student_service)
):
    try:
        student = service.create_student(name, email, phone, photo=_file_or_none(photo))
    except Exception as e:
        return failure("Failed to create student. Please check the input data.", e)

    return success("Student created successfully", serialize_student(student), status_code=201)


@router.put("/api/students/{student_id}")
def update_student(
    student_id: str,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    service: StudentService = Depends(get_student_service)
):
    try:
        student = service.update_student(student_id, name=name, email=email, phone=phone,
                                         photo=_file_or_none(photo))
    except Exception as e:
        return failure(
            "Failed to update student with ID: {}. Please check the input data.".format(student_id),
            e, context={"student_id": student_id})

    return success("Student updated successfully", serialize_student(student))


@router.delete("/api/students/{student_id}")
def delete_student(student_id: str, service: StudentService = Depends(get_student_service)):
    try:
        service.delete_student(student_id)
    except Exception as e:
        return failure("Failed to delete student with ID: {}".format(student_id),
                       e, context={"student_id": student_id})

    return success("Student deleted successfully")


# ── Ratings ──────────────────────────────────────────────────

@router.post("/api/students/{student_id}/ratings")
def add_rating(student_id: str, payload: Optional[Dict[str, Any]] = Body(None),
               service: StudentService = Depends(get_student_service)):
    try:
        student = service.add_rating(student_id, payload or {})
    except Exception as e:
        return failure(
            "Failed to add rating to student with ID: {}. Please check the input data.".format(student_id),
            e, context={"student_id": student_id})

    return success("Rating added successfully", serialize_student(student))


@router.put("/api/students/{student_id}/ratings/{rating_id}")
def update_rating(student_id: str, rating_id: str, payload: Optional[Dict[str, Any]] = Body(None),
                  service: StudentService = Depends(get_student_service)):
    try:
        student = service.update_rating(student_id, rating_id, payload or {})
    except Exception as e:
        return failure(
            "Failed to update rating with ID: {} for student with ID: {}. Please check the input data.".format(
                rating_id, student_id),
            e, context={"student_id": student_id, "rating_id": rating_id})

    return success(
        "Rating with ID: {} updated successfully for student with ID: {}".format(rating_id, student_id),
        serialize_student(student))


@router.delete("/api/students/{student_id}/ratings/{rating_id}")
def delete_rating(student_id: str, rating_id: str, service: StudentService = Depends(get_student_service)):
    try:
        student = service.delete_rating(student_id, rating_id)
    except Exception as e:
        return failure(
            "Failed to delete rating with ID: {} from student with ID: {}.".format(rating_id, student_id),
            e, context={"student_id": student_id, "rating_id": rating_id})

    return success(
        "Rating with ID: {} deleted successfully from student with ID: {}".format(rating_id, student_id),
        serialize_student(student))


# ── Badges ───────────────────────────────────────────────────

@router.post("/api/students/{student_id}/badges")
def add_badge(student_id: str, payload: Optional[BadgeAward] = None,
              service: StudentService = Depends(get_student_service)):
    badge_id = payload.badgeId if payload is not None else None
    try:
        student = service.add_badge(student_id, badge_id)
    except Exception as e:
        return failure(
            "Failed to add badge to student with ID: {}. Please check the input data.".format(student_id),
            e, context={"student_id": student_id, "badge_id": badge_id})

    return success("Badge added to student with ID: {} successfully".format(student_id),
                   serialize_student(student))


@router.delete("/api/students/{student_id}/badges/{badge_id}")
def remove_badge(student_id: str, badge_id: str, service: StudentService = Depends(get_student_service)):
    try:
        student = service.remove_badge(student_id, badge_id)
    except Exception as e:
        return failure(
            "Failed to remove badge with ID: {} from student with ID: {}.".format(badge_id, student_id),
            e, context={"student_id": student_id, "badge_id": badge_id})

    return success(
        "Badge with ID: {} removed from student with ID: {} successfully".format(badge_id, student_id),
        serialize_student(student))

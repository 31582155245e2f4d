"""
JSON shapes of the student aggregate and badges returned by the API.
"""

from student_hub.models.attendance import AttendanceEntry
from student_hub.models.badge import Badge
from student_hub.models.rating import Rating
from student_hub.models.student import Student


def _iso(value):
    return value.isoformat() if value else None


def serialize_attendance(entry: AttendanceEntry) -> dict:
    return {
        "id": str(entry.id),
        "day": entry.day,
        "week": entry.week,
        "month": entry.month,
        "status": bool(entry.status),
        "created_at": _iso(entry.created_at),
    }


def serialize_rating(rating: Rating) -> dict:
    return {
        "id": str(rating.id),
        "week": rating.week,
        "day": rating.day,
        "assignments": float(rating.assignments),
        "participation": float(rating.participation),
        "performance": float(rating.performance),
        "date": _iso(rating.date),
    }


def serialize_badge(badge: Badge) -> dict:
    return {
        "id": str(badge.id),
        "title": badge.title,
        "description": badge.description,
        "image": badge.image,
        "created_at": _iso(badge.created_at),
    }


def serialize_student(student: Student) -> dict:
    """Full aggregate, including attendance and ratings in stored order and populated badges."""
    return {
        "id": str(student.id),
        "name": student.name,
        "email": student.email,
        "phone": student.phone,
        "photo": student.photo,
        "student_code": student.student_code,
        "attendance": [serialize_attendance(e) for e in student.attendance],
        "ratings": [serialize_rating(r) for r in student.ratings],
        "badges": [serialize_badge(b) for b in student.badges],
        "created_at": _iso(student.created_at),
    }

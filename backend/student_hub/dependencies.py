"""
FastAPI dependencies wiring a request's session into the services.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from student_hub.database import get_db
from student_hub.repository import BadgeRepository, StudentRepository
from student_hub.services.attendance import AttendanceService
from student_hub.services.badges import BadgeService
from student_hub.services.students import StudentService


def get_attendance_service(db: Session = Depends(get_db)) -> AttendanceService:
    return AttendanceService(StudentRepository(db))


def get_badge_service(db: Session = Depends(get_db)) -> BadgeService:
    return BadgeService(BadgeRepository(db))


def get_student_service(db: Session = Depends(get_db)) -> StudentService:
    return StudentService(StudentRepository(db), BadgeService(BadgeRepository(db)))

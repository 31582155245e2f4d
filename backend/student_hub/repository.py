"""
Record store for the student aggregate and for badges.

Services depend on these classes rather than on the session directly,
so the attendance logic can be exercised against any object that
offers find_by_id() and save().
"""

from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from student_hub.models.badge import Badge
from student_hub.models.student import Student
from student_hub.logging_config import get_logger, log_with_context

logger = get_logger("db")


class StudentRepository:
    """Loads and persists whole Student aggregates."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, query=None):
        query = query if query is not None else self.db.query(Student)
        return query.options(
            selectinload(Student.attendance),
            selectinload(Student.ratings),
            selectinload(Student.badges),
        )

    def find_by_id(self, student_id: str) -> Optional[Student]:
        return self._query().filter(Student.id == student_id).first()

    def exists(self, student_id: str) -> bool:
        return self.db.query(Student.id).filter(Student.id == student_id).first() is not None

    def find_by_email_or_phone(self, email: Optional[str], phone: Optional[str],
                               exclude_id: Optional[str] = None) -> Optional[Student]:
        conditions = []
        if email is not None:
            conditions.append(Student.email == email)
        if phone is not None:
            conditions.append(Student.phone == phone)
        if not conditions:
            return None
        query = self.db.query(Student).filter(or_(*conditions))
        if exclude_id:
            query = query.filter(Student.id != exclude_id)
        return query.first()

    def page(self, offset: int, limit: int, filters: Optional[dict] = None) -> Tuple[List[Student], int]:
        """
        Return one page of students and the total matching count.

        filters maps column names to substrings; a student matches when
        ANY of them matches case-insensitively.
        """
        query = self.db.query(Student)
        if filters:
            query = query.filter(or_(*[
                getattr(Student, column).ilike("%{}%".format(value))
                for column, value in filters.items()
            ]))
        total = query.count()
        students = self._query(query).order_by(Student.created_at, Student.id) \
            .offset(offset).limit(limit).all()
        return students, total

    def add(self, student: Student) -> Student:
        self.db.add(student)
        return self.save(student)

    def save(self, student: Student) -> Student:
        """Commit the aggregate; ids of newly appended children are assigned here."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(student)
        return student

    def delete(self, student: Student) -> None:
        student_id = student.id
        self.db.delete(student)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        log_with_context(logger, "INFO", "Deleted student", context={"student_id": student_id})


class BadgeRepository:
    """CRUD access to badges."""

    def __init__(self, db: Session):
        self.db = db

    def all(self) -> List[Badge]:
        return self.db.query(Badge).order_by(Badge.created_at, Badge.id).all()

    def find_by_id(self, badge_id: str) -> Optional[Badge]:
        return self.db.query(Badge).filter(Badge.id == badge_id).first()

    def add(self, badge: Badge) -> Badge:
        self.db.add(badge)
        return self.save(badge)

    def save(self, badge: Badge) -> Badge:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(badge)
        return badge

    def delete(self, badge: Badge) -> None:
        badge_id = badge.id
        self.db.delete(badge)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        log_with_context(logger, "INFO", "Deleted badge", context={"badge_id": badge_id})

"""
Student model - the aggregate root of the record store.

A student owns its attendance entries and ratings exclusively: both
collections are ordered by a position column that SQLAlchemy keeps in
sync with list order, and both are deleted together with the student.
Badges are shared records linked through the student_badges table.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Text, DateTime, String
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from student_hub.database import Base, generate_id
from student_hub.models.badge import student_badges


class Student(Base):
    """
    SQLAlchemy model for the students table.

    email, phone and student_code are unique across students.
    """
    __tablename__ = "students"

    id = Column(String(24), primary_key=True, default=generate_id,
                doc="24-character hex identifier")
    name = Column(Text, nullable=False,
                  doc="Student's full name")
    email = Column(Text, nullable=False, unique=True,
                   doc="Contact email, unique per student")
    phone = Column(Text, nullable=False, unique=True,
                   doc="Contact phone, unique per student")
    photo = Column(Text, nullable=True,
                   doc="Public URL of the uploaded photo")
    student_code = Column(Text, nullable=False, unique=True,
                          doc="Short public code, e.g. '#k3v9qz'")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        doc="Timestamp when the student was created")

    attendance = relationship(
        "AttendanceEntry",
        back_populates="student",
        order_by="AttendanceEntry.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    ratings = relationship(
        "Rating",
        back_populates="student",
        order_by="Rating.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    badges = relationship("Badge", secondary=student_badges, back_populates="students")

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}', email='{self.email}')>"

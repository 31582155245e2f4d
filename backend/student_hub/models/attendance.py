"""
AttendanceEntry model - one day/week/month/status record of a student.

Entries only exist inside a student's ordered attendance collection.
The (day, week, month) natural key is unique per student; the service
layer enforces it and the table carries a matching constraint.
"""

from datetime import datetime, timezone
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from student_hub.database import Base, generate_id

DAY_RANGE = (1, 31)
WEEK_RANGE = (1, 53)
MONTH_RANGE = (1, 12)


class AttendanceEntry(Base):
    """SQLAlchemy model for the attendance_entries table."""
    __tablename__ = "attendance_entries"

    id = Column(String(24), primary_key=True, default=generate_id,
                doc="Identifier, unique within the owning student")
    student_id = Column(String(24), ForeignKey("students.id", ondelete="CASCADE"), nullable=False,
                        doc="Owning student")
    position = Column(Integer, nullable=False, default=0,
                      doc="Index in the student's attendance collection")
    day = Column(Integer, nullable=False, doc="Day of month, 1-31")
    week = Column(Integer, nullable=False, doc="Week of year, 1-53")
    month = Column(Integer, nullable=False, doc="Month, 1-12")
    status = Column(Boolean, nullable=False, default=False,
                    doc="True when the student was present")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        doc="When the entry was recorded")

    student = relationship("Student", back_populates="attendance")

    __table_args__ = (
        UniqueConstraint("student_id", "day", "week", "month", name="uq_attendance_natural_key"),
        Index("ix_attendance_entries_student_id", "student_id"),
    )

    @property
    def natural_key(self):
        return (self.day, self.week, self.month)

    def __repr__(self):
        return f"<AttendanceEntry(id={self.id}, student={self.student_id}, key={self.natural_key}, status={self.status})>"

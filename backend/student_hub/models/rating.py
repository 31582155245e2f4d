"""
Rating model - a periodic score sheet for a student.

Scores (assignments, participation, performance) are percentages in
the 0-100 range and default to 0.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Float, String
from sqlalchemy.orm import relationship
from student_hub.database import Base, generate_id

SCORE_RANGE = (0, 100)
SCORE_FIELDS = ("assignments", "participation", "performance")


class Rating(Base):
    """SQLAlchemy model for the ratings table."""
    __tablename__ = "ratings"

    id = Column(String(24), primary_key=True, default=generate_id,
                doc="Identifier, unique within the owning student")
    student_id = Column(String(24), ForeignKey("students.id", ondelete="CASCADE"), nullable=False,
                        doc="Owning student")
    position = Column(Integer, nullable=False, default=0,
                      doc="Index in the student's ratings collection")
    week = Column(Integer, nullable=False, doc="Week the rating refers to")
    day = Column(Integer, nullable=False, doc="Day the rating refers to")
    assignments = Column(Float, nullable=False, default=0)
    participation = Column(Float, nullable=False, default=0)
    performance = Column(Float, nullable=False, default=0)
    date = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                  doc="When the rating was recorded")

    student = relationship("Student", back_populates="ratings")

    __table_args__ = (
        Index("ix_ratings_student_id", "student_id"),
    )

    def __repr__(self):
        return f"<Rating(id={self.id}, student={self.student_id}, week={self.week})>"

"""
Badge model - an achievement that can be awarded to many students.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship
from student_hub.database import Base, generate_id

# Many-to-many link between students and badges
student_badges = Table(
    "student_badges",
    Base.metadata,
    Column("student_id", String(24), ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("badge_id", String(24), ForeignKey("badges.id", ondelete="CASCADE"), primary_key=True),
)


class Badge(Base):
    """SQLAlchemy model for the badges table."""
    __tablename__ = "badges"

    id = Column(String(24), primary_key=True, default=generate_id,
                doc="24-character hex identifier")
    title = Column(Text, nullable=True, doc="Badge title")
    description = Column(Text, nullable=True, doc="What the badge is awarded for")
    image = Column(Text, nullable=False, doc="Public path of the badge image")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    students = relationship("Student", secondary=student_badges, back_populates="badges")

    def __repr__(self):
        return f"<Badge(id={self.id}, title='{self.title}')>"

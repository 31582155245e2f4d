from student_hub.models.badge import Badge
from student_hub.models.student import Student
from student_hub.models.attendance import AttendanceEntry
from student_hub.models.rating import Rating

__all__ = ["Student", "AttendanceEntry", "Rating", "Badge"]

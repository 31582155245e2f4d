"""
Failure taxonomy shared by the services and the HTTP adapter.

Services raise these; routes map them to status codes by class:
NotFoundError -> 404, BadInputError -> 400, anything else -> 500.
"""


class StudentHubError(Exception):
    """Base class for all domain failures."""


class NotFoundError(StudentHubError):
    """The addressed record does not exist or cannot be addressed."""


class BadInputError(StudentHubError):
    """The request data violates a validation or uniqueness rule."""


class InvalidIdFormat(NotFoundError):
    def __init__(self, value: str, kind: str = "student"):
        super().__init__("Invalid {} ID format: {}".format(kind, value))
        self.value = value


class StudentNotFound(NotFoundError):
    def __init__(self, student_id: str):
        super().__init__("Student not found with ID: {}".format(student_id))
        self.student_id = student_id


class AttendanceNotFound(NotFoundError):
    def __init__(self, student_id: str, attendance_id: str):
        super().__init__(
            "Attendance record not found with ID: {} for student with ID: {}".format(
                attendance_id, student_id)
        )
        self.student_id = student_id
        self.attendance_id = attendance_id


class RatingNotFound(NotFoundError):
    def __init__(self, student_id: str, rating_id: str):
        super().__init__(
            "Rating not found with ID: {} for student with ID: {}".format(rating_id, student_id)
        )
        self.student_id = student_id
        self.rating_id = rating_id


class BadgeNotFound(NotFoundError):
    def __init__(self, badge_id: str):
        super().__init__("Badge not found with ID: {}".format(badge_id))
        self.badge_id = badge_id


class ValidationError(BadInputError):
    """Missing or out-of-range fields."""


class DuplicateAttendanceError(BadInputError):
    def __init__(self, day: int, week: int, month: int):
        super().__init__(
            "Attendance record already exists for day {}, week {}, month {}".format(day, week, month)
        )
        self.day = day
        self.week = week
        self.month = month


class DuplicateStudentError(BadInputError):
    def __init__(self, fields: list):
        super().__init__(", ".join("{} is already used".format(f) for f in fields))
        self.fields = list(fields)


def status_code_for(exc: Exception) -> int:
    """HTTP status for a failure, chosen by its class."""
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, BadInputError):
        return 400
    return 500

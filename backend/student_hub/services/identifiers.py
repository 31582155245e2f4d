"""
Record identifier checks shared by the services.

Identifiers are 24 hexadecimal characters. The format check is purely
syntactic and always runs before the record store is consulted.
"""

import re

from student_hub.errors import InvalidIdFormat, StudentNotFound

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def is_valid_object_id(value) -> bool:
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None


def require_student(students, student_id: str):
    """
    Resolve a student through the repository.

    Raises InvalidIdFormat for a malformed id (no lookup performed) and
    StudentNotFound when the store has no such student.
    """
    if not is_valid_object_id(student_id):
        raise InvalidIdFormat(student_id)
    student = students.find_by_id(student_id)
    if student is None:
        raise StudentNotFound(student_id)
    return student

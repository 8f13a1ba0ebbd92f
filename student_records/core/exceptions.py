from typing import Any, Dict, Optional
from fastapi import status


class BaseAPIException(Exception):
    """
    Base class for every custom error raised by the service layer.
    Keeps the error payload returned to clients in one shape.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

# =========================================================
# 1. COMMON ERRORS
# =========================================================

class BadRequestException(BaseAPIException):
    """400: the request is well-formed but cannot be applied."""
    def __init__(self, message: str = "Bad Request", details: dict = None):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )

class NotFoundException(BaseAPIException):
    """404: entity or matching record does not exist."""
    def __init__(self, message: str = "Resource not found", details: dict = None):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details=details
        )

class ConflictException(BaseAPIException):
    """409: a unique value (group or subject name) is already taken."""
    def __init__(self, message: str = "Resource already exists"):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=status.HTTP_409_CONFLICT
        )

# =========================================================
# 2. RECORDS DOMAIN ERRORS
# =========================================================

class SubjectNotAssignedException(BaseAPIException):
    """
    400: a mark was submitted for a subject the student does not take.
    Kept apart from NotFoundException: both entities exist, only the
    association is missing.
    """
    def __init__(self, student_id: Optional[int], subject_id: int, message: str = None):
        if message is None:
            message = f"Student with ID {student_id} does not have subject with ID {subject_id}"
        super().__init__(
            message=message,
            code="SUBJECT_NOT_ASSIGNED",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"student_id": student_id, "subject_id": subject_id}
        )

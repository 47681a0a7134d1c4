"""Domain error codes and exceptions.

Services raise these exceptions instead of returning sentinel values;
the HTTP layer in `main` turns them into JSON error responses using the
status and message bound to each `ErrorCode`.
"""

from enum import Enum


class ErrorCode(Enum):
    """Fixed catalogue of business errors: (status, code, message)."""
    MEMBER_NOT_FOUND = (404, "M001", "Member not found.")
    CURRICULUM_NOT_FOUND = (404, "C001", "Curriculum not found.")
    PROJECT_NOT_FOUND = (404, "P001", "Project not found.")
    PROJECT_HISTORY_NOT_FOUND = (404, "P002", "Project history not found.")

    def __init__(self, status: int, code: str, message: str):
        self.status = status
        self.code = code
        self.message = message


class BusinessError(Exception):
    """Base class for errors carrying an `ErrorCode`."""
    def __init__(self, error_code: ErrorCode):
        super().__init__(error_code.message)
        self.error_code = error_code

    def to_payload(self) -> dict:
        return {
            "status": self.error_code.status,
            "code": self.error_code.code,
            "message": self.error_code.message,
        }


class EntityNotFoundError(BusinessError):
    """Raised when a required entity lookup yields nothing."""

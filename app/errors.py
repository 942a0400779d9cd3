"""
Application error taxonomy.

Every failure a request can hit is raised as an ``AppError`` subclass and
rendered by a single exception handler in ``app.main`` as ``{"error": ...}``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


# ----------------- 400: client-correctable -----------------
class InvalidInput(AppError):
    status_code = 400
    default_message = "Invalid input"


class EmptyInput(InvalidInput):
    default_message = "Please enter text to summarize."


class TooLong(InvalidInput):
    def __init__(self, max_length: int) -> None:
        self.max_length = max_length
        super().__init__(f"Text exceeds {max_length} characters.")

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "max_length": self.max_length}


class MissingFields(InvalidInput):
    def __init__(self, *fields: str) -> None:
        self.fields = list(fields)
        super().__init__("Missing required fields: " + ", ".join(fields))

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "fields": self.fields}


class Conflict(AppError):
    status_code = 400
    default_message = "Conflict"


class UsernameTaken(Conflict):
    default_message = "Username already exists"


class InvalidCredentials(AppError):
    status_code = 400
    default_message = "Invalid username or password"


# ----------------- 401 / 404 -----------------
class Unauthenticated(AppError):
    status_code = 401
    default_message = "Not authenticated"


class NotFound(AppError):
    status_code = 404
    default_message = "Summary not found"


# ----------------- 500: upstream / processing -----------------
class UpstreamFailure(AppError):
    status_code = 500
    default_message = "The AI service failed. Please try again."

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "retryable": True}


class UpstreamEmpty(UpstreamFailure):
    default_message = "The AI service returned an empty response. Please try again."


class UpstreamError(UpstreamFailure):
    pass


class QuestionExtractionFailed(UpstreamFailure):
    default_message = "Question generation failed. Please try again."


class PdfExtractionError(AppError):
    status_code = 500
    default_message = "Failed to extract text from PDF"

from typing import Optional
from pydantic import BaseModel, Field

from tutor.domain.models import TutorMode


class ChatRequest(BaseModel):
    """Student chat message"""
    student_id: str = Field(min_length=1, description="Student identifier")
    message: str = Field(min_length=1, description="What the student said")


class ChatResponse(BaseModel):
    """Tutor reply and the mode it was produced in"""
    response: str
    mode: TutorMode


class ErrorResponse(BaseModel):
    """Generic failure returned to clients"""
    error: str
    kind: Optional[str] = None


class EventAccepted(BaseModel):
    success: bool = True


class StudentReport(BaseModel):
    report: str

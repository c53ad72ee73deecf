from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, StrictFloat, StrictInt, field_validator

from coursehub.services.lateness import as_utc


class AttachmentRead(BaseModel):
    file_name: str
    file_url: str
    size_bytes: int
    mime_type: str


class SubmissionRead(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    content: Optional[str] = None
    attachment: Optional[AttachmentRead] = None
    submitted_at: datetime
    status: str  # "SUBMITTED" | "LATE" | "GRADED"

    is_late: bool = False
    days_late: int = 0

    grade: Optional[float] = None
    feedback: Optional[str] = None
    graded_at: Optional[datetime] = None

    # grade after the assignment's late penalty, computed per response
    adjusted_grade: Optional[float] = None

    model_config = {"from_attributes": True}

    # SQLite hands back naive datetimes; they are stored as UTC
    @field_validator("submitted_at", "graded_at")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else v


class SubmissionGradeUpdate(BaseModel):
    # strict so JSON true/false or "92" never turn into a number
    grade: Union[StrictInt, StrictFloat]
    feedback: Optional[str] = None

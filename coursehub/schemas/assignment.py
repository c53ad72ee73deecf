from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from coursehub.services.lateness import as_utc


class AssignmentRead(BaseModel):
    id: int
    instructor_id: int
    title: str
    description: Optional[str]
    due_at: Optional[datetime]
    max_points: float
    allow_late_submissions: bool
    late_penalty_percent_per_day: float
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("due_at", "created_at")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else v

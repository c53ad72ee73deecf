from pydantic import BaseModel


class SubmissionStats(BaseModel):
    total: int
    submitted: int
    late: int
    graded: int
    average_grade: float | None

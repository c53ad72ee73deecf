"""
Submission lifecycle.

    NONE --submit--> SUBMITTED (or LATE) --grade--> GRADED --grade--> GRADED

LATE is the ungraded status of a submission that arrived after the due date.
The late flag itself (``is_late`` / ``days_late``) is frozen on the record at
(re)submission time and kept through grading.

Students can resubmit while the assignment is open:
- before the due date, always (a graded record keeps its grade)
- after the due date, only if late submissions are allowed and the record
  has not been graded yet

These functions mutate the record in memory only; committing is the caller's job.
"""

import enum
from datetime import datetime

from coursehub.core.errors import SubmissionClosedError, ValidationError
from coursehub.models.assignment import Assignment
from coursehub.models.submission import Submission
from coursehub.services.lateness import days_late, is_late


class SubmissionStatus(str, enum.Enum):
    SUBMITTED = "SUBMITTED"
    LATE = "LATE"
    GRADED = "GRADED"


def normalize_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def ensure_not_empty(content: str | None, attachment) -> None:
    if content is None and attachment is None:
        raise ValidationError("Please provide either written content or upload a file")


def ensure_open(submission: Submission | None, assignment: Assignment, now: datetime) -> None:
    # first submission is always accepted, it just gets recorded as late
    if submission is None or not is_late(now, assignment.due_at):
        return

    if submission.status == SubmissionStatus.GRADED:
        raise SubmissionClosedError("Submission already graded and the due date has passed")
    if not assignment.allow_late_submissions:
        raise SubmissionClosedError("The due date has passed and late submissions are not allowed")


def apply_submission(
    submission: Submission,
    assignment: Assignment,
    *,
    content: str | None,
    attachment: dict | None,
    now: datetime,
) -> Submission:
    late = is_late(now, assignment.due_at)

    submission.content = content
    attachment = attachment or {}
    submission.file_name = attachment.get("file_name")
    submission.file_url = attachment.get("file_url")
    submission.size_bytes = attachment.get("size_bytes")
    submission.mime_type = attachment.get("mime_type")

    submission.submitted_at = now
    submission.is_late = late
    submission.days_late = days_late(now, assignment.due_at)

    if submission.status != SubmissionStatus.GRADED:
        submission.status = (SubmissionStatus.LATE if late else SubmissionStatus.SUBMITTED).value

    return submission


def apply_grade(
    submission: Submission,
    *,
    grade: float,
    feedback: str | None,
    now: datetime,
) -> Submission:
    submission.grade = grade
    # omitted feedback keeps whatever the previous grading left
    if feedback is not None:
        submission.feedback = normalize_text(feedback)
    submission.graded_at = now
    submission.status = SubmissionStatus.GRADED.value
    return submission

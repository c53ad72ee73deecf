import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.core.config import LATE_PENALTY_MAX_PERCENT
from coursehub.core.errors import NotFoundError, SubmissionClosedError
from coursehub.models.assignment import Assignment
from coursehub.models.submission import Submission
from coursehub.schemas.user import CurrentUser
from coursehub.services.attachments import (
    AttachmentUpload,
    discard_attachment,
    save_attachment,
    validate_attachment,
)
from coursehub.services.lateness import late_penalty_multiplier
from coursehub.services.lifecycle import (
    apply_submission,
    ensure_not_empty,
    ensure_open,
    normalize_text,
)

logger = logging.getLogger(__name__)


def get_assignment(db: Session, assignment_id: int) -> Assignment:
    a = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not a:
        raise NotFoundError("Assignment not found")
    return a


def _find_existing(db: Session, assignment_id: int, student_id: int) -> Submission | None:
    return (
        db.query(Submission)
        .filter(
            and_(
                Submission.assignment_id == assignment_id,
                Submission.student_id == student_id,
            )
        )
        .first()
    )


def _check_open(existing: Submission | None, assignment: Assignment, student: CurrentUser, now: datetime) -> None:
    try:
        ensure_open(existing, assignment, now)
    except SubmissionClosedError as exc:
        logger.warning(
            "rejected resubmission for assignment %s by student %s: %s",
            assignment.id,
            student.id,
            exc.message,
        )
        raise


def _store(
    db: Session,
    existing: Submission | None,
    assignment: Assignment,
    student: CurrentUser,
    *,
    content: str | None,
    attachment: dict | None,
    now: datetime,
) -> Submission:
    sub = existing or Submission(assignment_id=assignment.id, student_id=student.id)
    apply_submission(sub, assignment, content=content, attachment=attachment, now=now)
    if existing is None:
        db.add(sub)

    try:
        db.commit()
        return sub
    except IntegrityError:
        db.rollback()
        if existing is not None:
            raise
        # another request created the row between our lookup and insert; last write wins
        existing = _find_existing(db, assignment.id, student.id)
        if existing is None:
            raise
    except Exception:
        db.rollback()
        raise

    logger.info(
        "concurrent first submission for assignment %s by student %s, overwriting",
        assignment.id,
        student.id,
    )
    _check_open(existing, assignment, student, now)
    apply_submission(existing, assignment, content=content, attachment=attachment, now=now)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    return existing


def submit_assignment(
    db: Session,
    *,
    assignment_id: int,
    student: CurrentUser,
    content: str | None,
    upload: AttachmentUpload | None = None,
    now: datetime | None = None,
) -> Submission:
    """
    Create the student's submission, or overwrite the existing one.

    The attachment is validated before anything else and only written to
    disk once the submission is known to be accepted. If storing the
    submission then fails, the written file is removed again.
    """
    assignment = get_assignment(db, assignment_id)
    now = now or datetime.now(timezone.utc)

    content = normalize_text(content)
    if upload is not None:
        validate_attachment(upload)
    ensure_not_empty(content, upload)

    existing = _find_existing(db, assignment_id, student.id)
    _check_open(existing, assignment, student, now)

    attachment = save_attachment(upload) if upload is not None else None

    try:
        sub = _store(
            db,
            existing,
            assignment,
            student,
            content=content,
            attachment=attachment,
            now=now,
        )
    except Exception:
        if attachment is not None:
            discard_attachment(attachment)
        raise

    db.refresh(sub)
    logger.info(
        "%s submission %s for assignment %s (status=%s, days_late=%s)",
        "updated" if existing else "created",
        sub.id,
        assignment_id,
        sub.status,
        sub.days_late,
    )
    return sub


def _scoped_query(db: Session, user: CurrentUser):
    q = db.query(Submission)
    if user.role == "student":
        # students only ever see their own work
        q = q.filter(Submission.student_id == user.id)
    elif user.role == "instructor":
        q = q.join(Assignment, Submission.assignment_id == Assignment.id).filter(
            Assignment.instructor_id == user.id
        )
    return q


def get_submission_for_user(db: Session, submission_id: int, user: CurrentUser) -> Submission:
    sub = _scoped_query(db, user).filter(Submission.id == submission_id).first()
    if not sub:
        raise NotFoundError("Submission not found")
    return sub


def list_submissions_for_user(
    db: Session,
    user: CurrentUser,
    *,
    assignment_id: Optional[int] = None,
) -> List[Submission]:
    """Submissions the user may see, newest first."""
    q = _scoped_query(db, user)
    if assignment_id is not None:
        q = q.filter(Submission.assignment_id == assignment_id)
    return q.order_by(Submission.submitted_at.desc(), Submission.id.desc()).all()


def adjusted_grade(sub: Submission) -> float | None:
    """Grade after the assignment's per-day late penalty (None until graded)."""
    if sub.grade is None:
        return None
    if not sub.is_late:
        return sub.grade

    mult = late_penalty_multiplier(
        sub.days_late,
        sub.assignment.late_penalty_percent_per_day,
        LATE_PENALTY_MAX_PERCENT,
    )
    return round(sub.grade * mult, 2)

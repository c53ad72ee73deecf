import logging
import math
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from coursehub.core.errors import AuthorizationError, NotFoundError, ValidationError
from coursehub.models.assignment import Assignment
from coursehub.models.submission import Submission
from coursehub.schemas.user import CurrentUser
from coursehub.services.lifecycle import apply_grade

logger = logging.getLogger(__name__)


def validate_grade(grade, max_points: float) -> float:
    if isinstance(grade, bool) or not isinstance(grade, (int, float)):
        raise ValidationError("Grade must be a valid number")
    if not math.isfinite(grade):
        raise ValidationError("Grade must be a valid number")
    if grade < 0 or grade > max_points:
        raise ValidationError(f"Grade must be between 0 and {max_points:g}")
    return float(grade)


def grade_submission(
    db: Session,
    *,
    submission_id: int,
    grade,
    feedback: str | None,
    current_user: CurrentUser,
    now: datetime | None = None,
) -> Submission:
    """
    Record an instructor's grade (and optional feedback) on a submission.

    Regrading is allowed at any time. Nothing is written unless every check
    passes, so a rejected grade leaves the submission as it was.
    """
    sub = db.query(Submission).filter(Submission.id == submission_id).first()
    if not sub:
        raise NotFoundError("Submission not found")

    assignment = db.query(Assignment).filter(Assignment.id == sub.assignment_id).first()
    if not assignment:
        raise NotFoundError("Assignment not found")

    if current_user.role != "instructor" or assignment.instructor_id != current_user.id:
        raise AuthorizationError("Only the assignment instructor can grade")

    try:
        value = validate_grade(grade, assignment.max_points)
    except ValidationError as exc:
        logger.warning("rejected grade %r for submission %s: %s", grade, submission_id, exc.message)
        raise

    apply_grade(
        sub,
        grade=value,
        feedback=feedback,
        now=now or datetime.now(timezone.utc),
    )

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(sub)
    logger.info("graded submission %s: %s/%s", sub.id, sub.grade, assignment.max_points)
    return sub

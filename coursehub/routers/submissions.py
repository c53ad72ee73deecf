from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from coursehub.core.current_user import get_current_user
from coursehub.core.deps import get_db
from coursehub.core.permissions import require_instructor, require_student
from coursehub.models.submission import Submission
from coursehub.schemas.submission import SubmissionGradeUpdate, SubmissionRead
from coursehub.schemas.submission_stats import SubmissionStats
from coursehub.schemas.user import CurrentUser
from coursehub.services import grading, submission_service
from coursehub.services.attachments import AttachmentUpload, read_limited
from coursehub.services.listing import filter_by_search, filter_by_status, sort_by, summarize

router = APIRouter(prefix="/submissions")

SEARCH_FIELDS = ("content", "file_name")

# status names the instructor pages send
STATUS_ALIASES = {"pending": "SUBMITTED"}


def _with_computed(sub: Submission) -> Submission:
    # attach computed fields for response
    sub.adjusted_grade = submission_service.adjusted_grade(sub)
    return sub


@router.get("", response_model=list[SubmissionRead])
def list_submissions(
    assignment_id: int | None = Query(default=None, alias="assignmentId"),
    status_filter: str = Query(default="all", alias="status"),
    search: str = "",
    sort_field: str = Query(default="submitted_at", alias="sortBy"),
    order: str = "desc",
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    subs = submission_service.list_submissions_for_user(
        db, current_user, assignment_id=assignment_id
    )
    status_filter = STATUS_ALIASES.get(status_filter.strip().lower(), status_filter)
    subs = filter_by_status(subs, status_filter)
    subs = filter_by_search(subs, search, SEARCH_FIELDS)
    subs = sort_by(subs, sort_field, order)
    return [_with_computed(s) for s in subs]


@router.get("/stats", response_model=SubmissionStats)
def submission_stats(
    assignment_id: int | None = Query(default=None, alias="assignmentId"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    subs = submission_service.list_submissions_for_user(
        db, current_user, assignment_id=assignment_id
    )
    return summarize(subs)


@router.get("/{submission_id}", response_model=SubmissionRead)
def get_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    sub = submission_service.get_submission_for_user(db, submission_id, current_user)
    return _with_computed(sub)


@router.post("", response_model=SubmissionRead, status_code=status.HTTP_201_CREATED)
def submit_assignment(
    assignment_id: int = Form(..., alias="assignmentId"),
    content: str | None = Form(default=None),
    file: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(require_student),
):
    upload = None
    # browsers send an empty part when no file was picked
    if file is not None and file.filename:
        upload = AttachmentUpload(
            file_name=file.filename,
            mime_type=file.content_type or "application/octet-stream",
            data=read_limited(file.file),
        )

    sub = submission_service.submit_assignment(
        db,
        assignment_id=assignment_id,
        student=me,
        content=content,
        upload=upload,
    )
    return _with_computed(sub)


@router.api_route("/{submission_id}/grade", methods=["PATCH", "PUT"], response_model=SubmissionRead)
def grade_submission(
    submission_id: int,
    payload: SubmissionGradeUpdate,
    db: Session = Depends(get_db),
    instructor: CurrentUser = Depends(require_instructor),
):
    sub = grading.grade_submission(
        db,
        submission_id=submission_id,
        grade=payload.grade,
        feedback=payload.feedback,
        current_user=instructor,
    )
    return _with_computed(sub)

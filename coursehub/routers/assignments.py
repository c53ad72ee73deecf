from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursehub.core.current_user import get_current_user
from coursehub.core.deps import get_db
from coursehub.schemas.assignment import AssignmentRead
from coursehub.schemas.user import CurrentUser
from coursehub.services.submission_service import get_assignment

router = APIRouter()


@router.get("/assignments/{assignment_id}", response_model=AssignmentRead)
def read_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return get_assignment(db, assignment_id)

from fastapi import Depends

from coursehub.core.current_user import get_current_user
from coursehub.core.errors import AuthorizationError
from coursehub.schemas.user import CurrentUser


def require_instructor(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if current_user.role != "instructor":
        raise AuthorizationError("Instructor role required")
    return current_user


def require_student(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if current_user.role != "student":
        raise AuthorizationError("Only students can submit assignments")
    return current_user

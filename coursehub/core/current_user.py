from fastapi import Header
from pydantic import ValidationError as PydanticValidationError

from coursehub.core.errors import AuthenticationError
from coursehub.schemas.user import CurrentUser


# Authentication happens upstream; the gateway forwards who the caller is.
def get_current_user(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> CurrentUser:
    if not x_user_id or not x_user_role:
        raise AuthenticationError("Unauthorized")

    try:
        return CurrentUser(id=x_user_id, role=x_user_role.strip().lower())
    except PydanticValidationError:
        raise AuthenticationError("Invalid user identity")

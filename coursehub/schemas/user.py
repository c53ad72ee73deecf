from typing import Literal

from pydantic import BaseModel

Role = Literal["student", "instructor", "admin"]


class CurrentUser(BaseModel):
    """Identity of the caller, as asserted by the upstream auth gateway."""

    id: int
    role: Role

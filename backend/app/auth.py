"""
Caller identity.

Authentication happens upstream: the gateway verifies the caller's token and
forwards the identity as `X-User-Id` and `X-User-Role` headers. This module
only reads them and performs the role checks the grading routes need.
"""

from dataclasses import dataclass
from typing import Callable, Optional
from fastapi import Depends, Header, HTTPException, status

from app.errors import ForbiddenError

INSTRUCTOR_ROLE = "Instructor"
STUDENT_ROLE = "Student"


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: str

    @property
    def is_instructor(self) -> bool:
        return self.role == INSTRUCTOR_ROLE


def get_current_caller(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Caller:
    """Build the Caller from the forwarded identity headers (401 when absent)."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity"
        )
    return Caller(user_id=x_user_id.strip().lower(), role=(x_user_role or STUDENT_ROLE).strip())


def require_roles(*required: str) -> Callable[[Caller], Caller]:
    """Dependency factory: the caller must hold one of the given roles."""
    def wrapper(caller: Caller = Depends(get_current_caller)) -> Caller:
        if caller.role not in required:
            raise ForbiddenError("Insufficient role")
        return caller

    return wrapper


def ensure_owner_or_instructor(caller: Caller, user_id: str):
    """Student-scoped reads: same user, or the instructor capability."""
    if caller.user_id != str(user_id).lower() and not caller.is_instructor:
        raise ForbiddenError("Not allowed to view another user's results")

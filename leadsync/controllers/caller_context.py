"""Resolve the calling user from request headers.

Authentication happens upstream of this service; the gateway forwards the
authenticated user as ``X-User-Id``, ``X-User-Role`` and ``X-User-Store``.
"""

from typing import Optional

from fastapi import Header, HTTPException, status

from leadsync.models.lead_enums import UserRole
from leadsync.services.leads.lead_scope import CallerContext


def get_caller_context(
    x_user_role: str = Header(..., description="admin, teamLead or telecaller."),
    x_user_id: Optional[int] = Header(default=None),
    x_user_store: Optional[str] = Header(default=None),
) -> CallerContext:
    try:
        role = UserRole(x_user_role)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Unknown user role"
        )
    try:
        return CallerContext(role=role, user_id=x_user_id, store=x_user_store)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

"""Combine a store filter with the visibility scope of the calling user."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from leadsync.models.lead_enums import UserRole
from leadsync.services.stores.store_matcher import (
    AllOf,
    AnyOf,
    ExactStore,
    MatchPredicate,
)
from leadsync.services.stores.store_normalizer import normalize


@dataclass(frozen=True)
class CallerContext:
    """The authenticated user a lead query runs on behalf of."""

    role: UserRole
    user_id: Optional[int] = None
    store: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role == UserRole.TELECALLER and self.user_id is None:
            raise ValueError("A telecaller caller needs a user id")


@dataclass(frozen=True)
class LeadScope:
    """
    The final visibility filter of a lead query.

    ``store_predicate`` restricts the stored store name and ``assigned_to_id``
    restricts the assignee. None means the dimension is not restricted.
    """

    store_predicate: Optional[MatchPredicate] = None
    assigned_to_id: Optional[int] = None


def _restrict(base: Optional[MatchPredicate], restriction: MatchPredicate) -> MatchPredicate:
    if base is None:
        return restriction
    if isinstance(base, AnyOf):
        # Every disjunct carries the restriction on its own.
        return AnyOf(tuple(_restrict(child, restriction) for child in base.children))
    if isinstance(base, AllOf):
        return AllOf((restriction,) + base.children)
    return AllOf((restriction, base))


def scope(base: Optional[MatchPredicate], caller: CallerContext) -> LeadScope:
    """
    Apply the caller's visibility rules to ``base``.

    Admins see whatever ``base`` selects. Team leads additionally only see their
    own canonical store. Telecallers only see leads assigned to them, and any store
    filter is ignored.

    Args:
        base (Optional[MatchPredicate]): Store predicate built from the user's filter.
        caller (CallerContext): The caller the query runs for.

    Returns:
        LeadScope: The scoped filter.
    """

    if caller.role == UserRole.ADMIN:
        return LeadScope(store_predicate=base)
    if caller.role == UserRole.TEAM_LEAD:
        restriction = ExactStore(normalize(caller.store))
        return LeadScope(store_predicate=_restrict(base, restriction))
    return LeadScope(assigned_to_id=caller.user_id)

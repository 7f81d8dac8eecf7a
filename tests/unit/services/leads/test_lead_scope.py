"""Test that role scoping always narrows the store filter."""

import pytest

from leadsync.models.lead_enums import UserRole
from leadsync.services.leads.lead_scope import CallerContext, LeadScope, scope
from leadsync.services.stores.store_matcher import build_filter, matching_stores
from leadsync.services.stores.store_normalizer import normalize

STORES = [
    "Zorucci - Edappally",
    "Zorucci - Edappal",
    "Suitor Guy - Edappally",
    "Suitor Guy - Kottayam",
    "SG.Kottayam",
    "Kottayam",
    "Zorucci - Kottakkal",
    "Suitor Guy - Kottakkal",
    "Head Office",
]

QUERIES = [
    None,
    "Edappal",
    "Edappally",
    "Zorucci",
    "SG",
    "Suitor Guy - Kottayam",
    "Zorucci Edappally",
    "Kottakkal",
    "Head",
    "SG - Kottakal",
]


def test_admin_scope_keeps_the_filter():
    predicate = build_filter("Kottakkal")
    result = scope(predicate, CallerContext(role=UserRole.ADMIN))
    assert result == LeadScope(store_predicate=predicate)


@pytest.mark.parametrize("query", QUERIES)
@pytest.mark.parametrize(
    "own_store", ["Suitor Guy - Kottayam", "SG.Kottayam", "Zorucci - Edappally"]
)
def test_team_lead_only_ever_sees_own_store(query, own_store):
    caller = CallerContext(role=UserRole.TEAM_LEAD, user_id=7, store=own_store)
    result = scope(build_filter(query), caller)

    visible = matching_stores(result.store_predicate, STORES)
    assert all(normalize(store) == normalize(own_store) for store in visible)
    assert result.assigned_to_id is None


def test_team_lead_without_filter_sees_all_spellings_of_own_store():
    caller = CallerContext(role=UserRole.TEAM_LEAD, store="Suitor Guy - Kottayam")
    visible = matching_stores(scope(None, caller).store_predicate, STORES)
    assert visible == ["Suitor Guy - Kottayam", "SG.Kottayam", "Kottayam"]


def test_team_lead_filter_for_other_store_sees_nothing():
    caller = CallerContext(role=UserRole.TEAM_LEAD, store="Zorucci - Edappally")
    visible = matching_stores(
        scope(build_filter("Suitor Guy - Kottayam"), caller).store_predicate, STORES
    )
    assert visible == []


def test_telecaller_scope_ignores_store_filter():
    caller = CallerContext(role=UserRole.TELECALLER, user_id=42)
    result = scope(build_filter("Zorucci"), caller)
    assert result == LeadScope(store_predicate=None, assigned_to_id=42)


def test_telecaller_needs_user_id():
    with pytest.raises(ValueError):
        CallerContext(role=UserRole.TELECALLER)

from datetime import datetime

import pytest
from sqlalchemy.exc import SQLAlchemyError

from stafftrack_api.common.errors import InvalidInput, NotFound
from stafftrack_api.models.quota import QuotaStrike
from stafftrack_api.services.strikes import StrikeLedger

from conftest import add_staff


def test_two_strikes_then_deactivate_one(repo, now):
    d = add_staff(repo, 1)
    ledger = StrikeLedger(repo)
    first = ledger.create(d.id, "missed quota", given_by="Admin", now=now)
    second = ledger.create(d.id, "missed quota again", given_by="Admin", now=now)
    assert ledger.active_count(d.id) == 2
    assert ledger.demotion_eligible(d.id) is True
    assert [s.id for s in ledger.list_active(d.id)] == [second.id, first.id]

    ledger.deactivate(first.id)
    assert ledger.active_count(d.id) == 1
    assert [s.id for s in ledger.list_active(d.id)] == [second.id]
    assert ledger.demotion_eligible(d.id) is False


def test_new_strike_is_active_with_current_week_window(repo, now):
    d = add_staff(repo, 1)
    s = StrikeLedger(repo).create(d.id, "no show", given_by="mod1", now=now)
    assert s.active is True
    assert s.given_by == "mod1"
    assert s.given_at is not None
    assert s.week_start == datetime(2026, 10, 12)
    assert s.week_end == datetime(2026, 10, 18, 23, 59, 59, 999999)


def test_same_week_strikes_are_not_deduplicated(repo, now):
    d = add_staff(repo, 1)
    ledger = StrikeLedger(repo)
    for _ in range(3):
        ledger.create(d.id, "missed quota", now=now)
    assert ledger.active_count(d.id) == 3


def test_deactivate_unknown_strike_changes_nothing(repo, now):
    d = add_staff(repo, 1)
    ledger = StrikeLedger(repo)
    ledger.create(d.id, "missed quota", now=now)

    with pytest.raises(NotFound):
        ledger.deactivate(9999)
    assert ledger.active_count(d.id) == 1


def test_deactivate_twice_succeeds_without_count_change(repo, now):
    d = add_staff(repo, 1)
    ledger = StrikeLedger(repo)
    keep = ledger.create(d.id, "a", now=now)
    gone = ledger.create(d.id, "b", now=now)

    first = ledger.deactivate(gone.id)
    stamped = first.deactivated_at
    assert first.active is False
    assert ledger.active_count(d.id) == 1

    again = ledger.deactivate(gone.id)
    assert again.id == gone.id
    assert again.active is False
    assert again.deactivated_at == stamped
    assert ledger.active_count(d.id) == 1
    assert [s.id for s in ledger.list_active(d.id)] == [keep.id]


def test_inactive_strikes_stay_in_storage(repo, now):
    d = add_staff(repo, 1)
    ledger = StrikeLedger(repo)
    s = ledger.create(d.id, "a", now=now)
    ledger.deactivate(s.id)
    assert repo.session.get(QuotaStrike, s.id) is not None
    assert [x.id for x in repo.list_strikes(d.id, active=None)] == [s.id]


def test_create_requires_reason_and_existing_staff(repo, now):
    d = add_staff(repo, 1)
    ledger = StrikeLedger(repo)
    with pytest.raises(InvalidInput):
        ledger.create(d.id, "  ", now=now)
    with pytest.raises(NotFound):
        ledger.create(d.id + 100, "missed quota", now=now)
    assert ledger.active_count(d.id) == 0


def test_mass_strike_empty_set(repo, now):
    result = StrikeLedger(repo).mass_strike([], "missed quota", now=now)
    assert result["success_count"] == 0
    assert result["total_count"] == 0
    assert repo.session.query(QuotaStrike).count() == 0


def test_mass_strike_tolerates_partial_failure(repo, now):
    a = add_staff(repo, 1)
    b = add_staff(repo, 2)
    ledger = StrikeLedger(repo)

    result = ledger.mass_strike([a.id, 9999, "abc", b.id], "missed quota", given_by="Admin", now=now)
    assert result["success_count"] == 2
    assert result["total_count"] == 4
    assert result["failed_ids"] == [9999, "abc"]
    assert ledger.active_count(a.id) == 1
    assert ledger.active_count(b.id) == 1


def test_mass_strike_requires_reason(repo, now):
    a = add_staff(repo, 1)
    with pytest.raises(InvalidInput):
        StrikeLedger(repo).mass_strike([a.id], "", now=now)


def test_mass_strike_rejects_bool_and_float_ids(repo, now):
    a = add_staff(repo, 1)
    ledger = StrikeLedger(repo)

    result = ledger.mass_strike([True, 1.9, str(a.id)], "missed", now=now)
    assert result["success_count"] == 1
    assert result["total_count"] == 3
    assert result["failed_ids"] == [True, 1.9]
    assert ledger.active_count(a.id) == 1


def test_mass_strike_continues_after_storage_error(repo, now, monkeypatch):
    a = add_staff(repo, 1)
    b = add_staff(repo, 2)
    ledger = StrikeLedger(repo)
    real_get_staff = repo.get_staff

    def flaky_get_staff(staff_id):
        if staff_id == a.id:
            raise SQLAlchemyError("connection dropped")
        return real_get_staff(staff_id)

    monkeypatch.setattr(repo, "get_staff", flaky_get_staff)
    result = ledger.mass_strike([a.id, b.id], "missed quota", now=now)
    assert result["success_count"] == 1
    assert result["failed_ids"] == [a.id]
    assert ledger.active_count(b.id) == 1

from datetime import datetime, timedelta

from stafftrack_api.services.aggregation import HoursAggregator, round_hours
from stafftrack_api.services.quota import QuotaEvaluator
from stafftrack_api.services.roster import RosterService

from conftest import add_staff, add_hours


def test_staff_without_entries_has_zero_everywhere(repo, now):
    a = add_staff(repo, 1)
    hours = HoursAggregator(repo)
    assert hours.daily_hours(a.id, now) == 0
    assert hours.weekly_hours(a.id, now) == 0
    assert hours.all_time_hours(a.id) == 0

    qe = QuotaEvaluator(repo)
    assert qe.quota_met(a.id, now) is False
    qe.update_settings(weekly_requirement=0)
    assert qe.quota_met(a.id, now) is True


def test_rollups_are_nested(repo, now):
    a = add_staff(repo, 1)
    add_hours(repo, a, now - timedelta(hours=2), 1.25)            # today
    add_hours(repo, a, datetime(2026, 10, 12, 9, 0), 0.75)        # Monday, this week
    add_hours(repo, a, datetime(2026, 10, 9, 20, 0), 2.0)         # last Friday
    add_hours(repo, a, datetime(2025, 1, 3, 20, 0), 4.0)          # last year

    r = HoursAggregator(repo).rollup(a.id, now)
    assert r["daily_hours"] == 1.25
    assert r["weekly_hours"] == 2.0
    assert r["all_time_hours"] == 8.0
    assert r["all_time_hours"] >= r["weekly_hours"] >= r["daily_hours"]
    assert r["last_active"] == now - timedelta(hours=2)


def test_range_is_half_open(repo):
    a = add_staff(repo, 1)
    start = datetime(2026, 10, 12)
    end = datetime(2026, 10, 13)
    add_hours(repo, a, start, 1.0)
    add_hours(repo, a, end, 5.0)

    hours = HoursAggregator(repo)
    assert hours.hours_in_range(a.id, start, end) == 1.0
    assert hours.hours_in_range(a.id, start) == 6.0


def test_only_the_requested_staff_is_summed(repo, now):
    a = add_staff(repo, 1)
    b = add_staff(repo, 2)
    add_hours(repo, a, now, 1.0)
    add_hours(repo, b, now, 3.0)
    assert HoursAggregator(repo).daily_hours(a.id, now) == 1.0


def test_rounding_is_half_up_to_cents():
    assert round_hours(0.125) == 0.13
    assert round_hours(0.1 + 0.2) == 0.3
    assert round_hours(-0.125) == -0.13


def test_quota_scenario_with_manual_adjustment(repo, now):
    a = add_staff(repo, 1)
    add_hours(repo, a, datetime(2026, 10, 12, 10, 0), 0.5)
    add_hours(repo, a, datetime(2026, 10, 13, 18, 0), 0.3)

    hours = HoursAggregator(repo)
    qe = QuotaEvaluator(repo)
    assert qe.settings().weekly_requirement == 1.0
    assert hours.weekly_hours(a.id, now) == 0.8
    assert qe.quota_met(a.id, now) is False

    entry = RosterService(repo).adjust_hours(a.id, 0.3, "webhook outage", now=now)
    assert entry.action == "manual_adjustment: webhook outage"
    assert entry.session_start == entry.session_end == now
    assert hours.weekly_hours(a.id, now) == 1.1
    assert qe.quota_met(a.id, now) is True


def test_week_start_change_applies_retroactively(repo, now):
    a = add_staff(repo, 1)
    add_hours(repo, a, datetime(2026, 10, 11, 12, 0), 2.0)   # Sunday before
    hours = HoursAggregator(repo)
    assert hours.weekly_hours(a.id, now) == 0

    QuotaEvaluator(repo).update_settings(week_start=0)
    assert hours.weekly_hours(a.id, now) == 2.0


def test_weekly_activity_buckets(repo, now):
    a = add_staff(repo, 1)
    b = add_staff(repo, 2)
    add_hours(repo, a, datetime(2026, 10, 12, 8, 0), 1.0)
    add_hours(repo, b, datetime(2026, 10, 12, 23, 59), 0.5)
    add_hours(repo, a, datetime(2026, 10, 14, 0, 0), 2.0)
    add_hours(repo, a, datetime(2026, 10, 11, 23, 0), 9.0)   # previous week

    activity = HoursAggregator(repo).weekly_activity(now)
    assert [d["date"] for d in activity] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert activity[0]["day"] == "2026-10-12"
    assert [d["total_hours"] for d in activity] == [1.5, 0.0, 2.0, 0.0, 0.0, 0.0, 0.0]

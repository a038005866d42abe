from datetime import datetime, timedelta

import pytest

from stafftrack_api.common.errors import InvalidInput
from stafftrack_api.services.leaderboard import LeaderboardRanker, PERIODS

from conftest import add_staff, add_hours


def test_daily_leaderboard_scenario(repo, now):
    b = add_staff(repo, 1, "bravo")
    c = add_staff(repo, 2, "charlie")
    add_hours(repo, b, now - timedelta(hours=1), 2.0)
    assert c.id

    rows = LeaderboardRanker(repo).leaderboard("daily", now)
    assert [(r["position"], r["username"], r["total_hours"]) for r in rows] == [
        (1, "bravo", 2.0),
        (2, "charlie", 0.0),
    ]


@pytest.mark.parametrize("period", PERIODS)
def test_positions_are_a_permutation(repo, now, period):
    staff = [add_staff(repo, i) for i in range(1, 6)]
    add_hours(repo, staff[3], now, 1.0)
    add_hours(repo, staff[1], now, 1.0)
    add_hours(repo, staff[4], now, 3.0)

    rows = LeaderboardRanker(repo).leaderboard(period, now)
    assert sorted(r["position"] for r in rows) == [1, 2, 3, 4, 5]
    totals = [r["total_hours"] for r in rows]
    assert totals == sorted(totals, reverse=True)


def test_ties_keep_roster_order_with_distinct_positions(repo, now):
    a = add_staff(repo, 1, "a")
    b = add_staff(repo, 2, "b")
    c = add_staff(repo, 3, "c")
    add_hours(repo, c, now, 1.0)
    add_hours(repo, a, now, 1.0)
    assert b.id

    rows = LeaderboardRanker(repo).leaderboard("daily", now)
    assert [(r["username"], r["position"]) for r in rows] == [("a", 1), ("c", 2), ("b", 3)]


def test_weekly_change_against_previous_week(repo, now):
    a = add_staff(repo, 1)
    add_hours(repo, a, datetime(2026, 10, 13, 10, 0), 3.0)    # this week
    add_hours(repo, a, datetime(2026, 10, 6, 10, 0), 1.0)     # last week
    add_hours(repo, a, datetime(2026, 9, 28, 10, 0), 7.0)     # two weeks ago

    row = LeaderboardRanker(repo).leaderboard("weekly", now)[0]
    assert row["total_hours"] == 3.0
    assert row["weekly_change"] == 2.0


def test_daily_change_can_be_negative(repo, now):
    a = add_staff(repo, 1)
    add_hours(repo, a, datetime(2026, 10, 13, 20, 0), 2.5)    # yesterday
    add_hours(repo, a, datetime(2026, 10, 14, 9, 0), 1.0)

    row = LeaderboardRanker(repo).leaderboard("daily", now)[0]
    assert row["weekly_change"] == -1.5


def test_monthly_windows(repo, now):
    ranker = LeaderboardRanker(repo)
    assert ranker.windows("monthly", now) == (datetime(2026, 10, 1), datetime(2026, 9, 1))

    a = add_staff(repo, 1)
    add_hours(repo, a, datetime(2026, 10, 1, 0, 0), 1.0)
    add_hours(repo, a, datetime(2026, 9, 30, 23, 0), 4.0)
    add_hours(repo, a, datetime(2026, 8, 31, 23, 0), 8.0)

    row = ranker.leaderboard("monthly", now)[0]
    assert row["total_hours"] == 1.0
    assert row["weekly_change"] == -3.0


def test_alltime_change_equals_total(repo, now):
    a = add_staff(repo, 1)
    add_hours(repo, a, datetime(2020, 1, 1), 5.0)
    add_hours(repo, a, now, 1.25)

    ranker = LeaderboardRanker(repo)
    assert ranker.windows("alltime", now) == (datetime(1970, 1, 1), datetime(1969, 12, 31))
    row = ranker.leaderboard("alltime", now)[0]
    assert row["total_hours"] == 6.25
    assert row["weekly_change"] == row["total_hours"]


def test_unknown_period_is_rejected(repo, now):
    with pytest.raises(InvalidInput):
        LeaderboardRanker(repo).leaderboard("yearly", now)


def test_empty_roster(repo, now):
    assert LeaderboardRanker(repo).leaderboard("weekly", now) == []

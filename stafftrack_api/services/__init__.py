# stafftrack_api/services/__init__.py
from flask import current_app

from stafftrack_api.repository import get_repository
from stafftrack_api.services.aggregation import HoursAggregator
from stafftrack_api.services.leaderboard import LeaderboardRanker
from stafftrack_api.services.quota import QuotaEvaluator
from stafftrack_api.services.roster import RosterService
from stafftrack_api.services.strikes import StrikeLedger


def aggregator():
    return HoursAggregator(get_repository())


def quota_evaluator():
    return QuotaEvaluator(get_repository(), current_app.config["DEMOTION_STRIKE_THRESHOLD"])


def ranker():
    return LeaderboardRanker(get_repository())


def strike_ledger():
    return StrikeLedger(get_repository(), current_app.config["DEMOTION_STRIKE_THRESHOLD"])


def roster():
    cfg = current_app.config
    return RosterService(
        get_repository(),
        min_rank=cfg["STAFF_MIN_RANK"],
        excluded_rank=cfg["STAFF_EXCLUDED_RANK"],
        demote_rank=cfg["DEMOTE_RANK"],
        demote_rank_name=cfg["DEMOTE_RANK_NAME"],
    )

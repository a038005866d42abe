# stafftrack_api/services/roblox.py
"""
Thin client for the public group-membership and thumbnail endpoints.

Group lookups raise UpstreamFailure when the platform cannot be reached.
Avatar lookups never fail the caller; they fall back to a default image.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from stafftrack_api.common.errors import UpstreamFailure

log = logging.getLogger(__name__)

GROUPS_URL = "https://groups.roblox.com/v1/groups/{group_id}/users"
THUMBNAILS_URL = "https://thumbnails.roblox.com/v1/users/avatar-headshot"
USER_AGENT = "StaffTrack/1.0"
PAGE_LIMIT = 100
MAX_PAGES = 50


class RobloxClient:

    def __init__(self, timeout: float = 10.0, default_avatar_url: Optional[str] = None, http=None):
        self.timeout = timeout
        self.default_avatar_url = default_avatar_url
        self.http = http or requests.Session()
        self.http.headers.update({"User-Agent": USER_AGENT})

    def _get(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = self.http.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json() or {}
        except (requests.RequestException, ValueError) as e:
            raise UpstreamFailure("Platform API request failed", payload=str(e)) from e

    def group_members(self, group_id: int) -> List[Dict[str, Any]]:
        """
        All members of a group as
        [{"user_id": "123", "username": "...", "rank": 5, "rank_name": "..."}].
        Follows nextPageCursor until the last page.
        """
        url = GROUPS_URL.format(group_id=group_id)
        out: List[Dict[str, Any]] = []
        cursor = None
        for _ in range(MAX_PAGES):
            params = {"sortOrder": "Asc", "limit": PAGE_LIMIT}
            if cursor:
                params["cursor"] = cursor
            payload = self._get(url, params)
            for item in payload.get("data") or []:
                user = item.get("user") or {}
                role = item.get("role") or {}
                if user.get("userId") is None or role.get("rank") is None:
                    continue
                out.append({
                    "user_id": str(user["userId"]),
                    "username": user.get("username") or user.get("displayName") or str(user["userId"]),
                    "rank": int(role["rank"]),
                    "rank_name": role.get("name") or f"Rank {role['rank']}",
                })
            cursor = payload.get("nextPageCursor")
            if not cursor:
                break
        return out

    def avatar_url(self, user_id: str) -> Optional[str]:
        params = {"userIds": user_id, "size": "150x150", "format": "Png", "isCircular": "true"}
        try:
            payload = self._get(THUMBNAILS_URL, params)
        except UpstreamFailure as e:
            log.warning("avatar lookup for %s failed, using default: %s", user_id, e.payload)
            return self.default_avatar_url
        data = payload.get("data") or []
        if not data or not data[0].get("imageUrl"):
            log.warning("no avatar returned for %s, using default", user_id)
            return self.default_avatar_url
        return data[0]["imageUrl"]


def client_from_config(config) -> RobloxClient:
    return RobloxClient(
        timeout=float(config.get("ROBLOX_HTTP_TIMEOUT", 10)),
        default_avatar_url=config.get("DEFAULT_AVATAR_URL"),
    )

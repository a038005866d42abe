# stafftrack_api/common/parsing.py
from flask import request

from stafftrack_api.common.errors import InvalidInput


def json_body() -> dict:
    d = request.get_json(silent=True, force=True)
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise InvalidInput("JSON object body expected")
    return d


def pick(d: dict, *names: str):
    """First present key among names (camelCase/snake_case aliases)."""
    for n in names:
        if n in d:
            return d[n]
    return None

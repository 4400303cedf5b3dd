from flask import request

from campus_events.errors import BadRequest


def json_body():
    """The request's JSON object, or {} when there is no parseable body."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')
    return data

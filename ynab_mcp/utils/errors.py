"""Error message extraction for tool responses."""

import json

from ynab_mcp.exceptions import ApiError


def get_error_message(error: object) -> str:
    """
    Best human-readable message for an error of any shape.

    Handles our exceptions, plain exceptions, and raw YNAB error bodies
    of the form {"error": {"id": ..., "name": ..., "detail": ...}}.
    """
    if isinstance(error, ApiError):
        return error.detail or error.error_name or str(error)

    if isinstance(error, BaseException):
        return str(error) or type(error).__name__

    if isinstance(error, dict) and isinstance(error.get("error"), dict):
        upstream = error["error"]
        if upstream.get("detail"):
            return str(upstream["detail"])
        if upstream.get("name"):
            return str(upstream["name"])

    try:
        dumped = json.dumps(error)
    except (TypeError, ValueError):
        dumped = ""
    if dumped and dumped not in ("{}", "null", '""'):
        return dumped

    return "Unknown error occurred"

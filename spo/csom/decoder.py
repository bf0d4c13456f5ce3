"""
CSOM Action-Batch Decoder

ProcessQuery answers with a JSON array:

    [
        {"SchemaVersion": "15.0.0.0", "ErrorInfo": null, ...},   # header
        4, {"IsNull": false},                                     # action 4
        5, {"_ObjectIdentity_": "...", "_ObjectType_": "..."},    # action 5
        ...
    ]

Element 0 describes the batch. A non-null ErrorInfo means the whole batch
failed and nothing after the header is meaningful. Every other result follows
the integer id of the action that produced it.
"""

import json

from spo.errors import ProcessQueryParseError, ServerError


def parse_response(text: str) -> list:
    """Parse raw ProcessQuery text into the response array."""
    try:
        items = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ProcessQueryParseError(f"Invalid ProcessQuery response: {e}") from e

    if not isinstance(items, list) or not items:
        raise ProcessQueryParseError("Invalid ProcessQuery response: expected a non-empty array")
    return items


def check_response(items: list) -> dict:
    """Raise ServerError if the batch header carries ErrorInfo. Returns the header."""
    header = items[0]
    if not isinstance(header, dict):
        raise ProcessQueryParseError("Invalid ProcessQuery response: missing batch header")

    error_info = header.get("ErrorInfo")
    if error_info:
        raise ServerError(
            error_info.get("ErrorMessage", ""),
            error_type=error_info.get("ErrorTypeName"),
            correlation_id=header.get("TraceCorrelationId"),
        )
    return header


def last_result(items: list):
    return items[-1]


def result_for(items: list, action_id: int):
    """Return the result produced by action `action_id`."""
    # Results come as (id, value) pairs after the header
    for index in range(1, len(items) - 1, 2):
        if items[index] == action_id and not isinstance(items[index], bool):
            return items[index + 1]
    raise ProcessQueryParseError(f"ProcessQuery response has no result for action {action_id}")


def decode(text: str, action_id: int = None):
    """Parse, check for server errors, and pick out one result.

    Without an action id the last element of the array is returned.
    """
    items = parse_response(text)
    check_response(items)
    if action_id is None:
        return last_result(items)
    return result_for(items, action_id)

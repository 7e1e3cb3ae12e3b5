"""Helpers shared by the controllers."""

import uuid
from typing import Any, Dict, Optional, Tuple

from ..exceptions import BadRequest

ResponseData = Tuple[Any, int, dict]


def parse_id(value: str) -> str:
    """
    Validate and normalize an identifier taken from the path or a payload.

    Raises
    ------
    :class:`.BadRequest`
        The value is not a UUID.

    """
    try:
        return str(uuid.UUID(str(value)))
    except ValueError as e:
        raise BadRequest(f'Invalid identifier: {value}') from e


def get_payload(payload: Optional[Any]) -> Dict[str, Any]:
    """Require a JSON object as the request body."""
    if not isinstance(payload, dict):
        raise BadRequest('Expected a JSON object')
    return payload


def require(payload: Dict[str, Any], *fields: str) -> Tuple[str, ...]:
    """Get required, non-empty string fields from a request body."""
    values = []
    for field in fields:
        value = payload.get(field)
        if not isinstance(value, str) or not value.strip():
            raise BadRequest(f'Missing or invalid field: {field}')
        values.append(value)
    return tuple(values)


def optional(payload: Dict[str, Any], field: str,
             default: Optional[str] = None) -> Optional[str]:
    """Get an optional string field from a request body."""
    value = payload.get(field, default)
    if value is not None and not isinstance(value, str):
        raise BadRequest(f'Invalid field: {field}')
    return value

"""
Query string projection for Results API requests.

A request's role table decides what reaches the URL: every named field
except ``parent`` (consumed by the path) and binary payloads, each under
its wire name. Values are rendered as strings; zero values are kept as
"0" or "" and unset messages render as "".
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from ..models import FieldRole, Message
from ..models.fields import render_json

PARENT_FIELD = "parent"


def render_value(value: Any) -> str:
    """Render a single field value for the query string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ").replace(".000000Z", "Z")
    if isinstance(value, (Message, dict, list)):
        return render_json(value)
    return str(value)


def project_query(message: Message) -> Dict[str, str]:
    """
    Project a request into query parameters.

    Args:
        message: Typed request

    Returns:
        Mapping of wire name to rendered value; a later field with the
        same wire name overwrites an earlier one
    """
    params: Dict[str, str] = {}
    for wire_name, value, role in message.wire_fields():
        if wire_name is None or role is FieldRole.INTERNAL:
            continue
        if wire_name == PARENT_FIELD:
            continue
        if role is FieldRole.BINARY:
            continue
        params[wire_name] = render_value(value)
    return params

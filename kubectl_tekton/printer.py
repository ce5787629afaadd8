"""
Table rendering for stored PipelineRuns and TaskRuns.

Columns are NAME, STARTED, DURATION, STATUS and UID. STARTED is the age
of status.startTime relative to now; DURATION runs from startTime to
completionTime. Missing values render as "---".
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import DecodingError
from .modules.action import nested_mapping

HEADER = ["NAME", "STARTED", "DURATION", "STATUS", "UID"]
MISSING = "---"

_TIMESTAMP = TypeAdapter(datetime)


def parse_time(value: Any, field: str) -> Optional[datetime]:
    """
    Parse an RFC 3339 timestamp from a stored object.

    Raises:
        DecodingError: If the value is present but not a timestamp
    """
    if value is None or value == "":
        return None
    try:
        parsed = _TIMESTAMP.validate_python(value)
    except ValidationError as e:
        raise DecodingError(f"stored object field {field} is not a timestamp: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def human_duration(seconds: float) -> str:
    """Approximate, human readable length of time ("3 minutes", "About an hour")."""
    if seconds < 1:
        return "Less than a second"
    if int(seconds) == 1:
        return "1 second"
    if seconds < 60:
        return f"{int(seconds)} seconds"
    minutes = int(seconds // 60)
    if minutes == 1:
        return "About a minute"
    if minutes < 60:
        return f"{minutes} minutes"
    hours = round(seconds / 3600)
    if hours == 1:
        return "About an hour"
    if hours < 48:
        return f"{hours} hours"
    if hours < 24 * 7 * 2:
        return f"{hours // 24} days"
    if hours < 24 * 30 * 2:
        return f"{hours // 24 // 7} weeks"
    if hours < 24 * 365 * 2:
        return f"{hours // 24 // 30} months"
    return f"{hours // 24 // 365} years"


def exact_duration(seconds: float) -> str:
    """Duration rounded to the second, e.g. "1h2m3s", "45s"."""
    total = int(round(seconds))
    sign = "-" if total < 0 else ""
    hours, rest = divmod(abs(total), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def format_age(start: Optional[datetime], now: datetime) -> str:
    if start is None:
        return MISSING
    return f"{human_duration((now - start).total_seconds())} ago"


def format_duration(start: Optional[datetime], end: Optional[datetime]) -> str:
    if start is None or end is None:
        return MISSING
    return exact_duration((end - start).total_seconds())


def run_status(obj: Dict[str, Any]) -> str:
    """Reason of the Succeeded condition, e.g. "Succeeded", "Failed", "Running"."""
    conditions = nested_mapping(obj, "status").get("conditions") or []
    if not isinstance(conditions, list):
        raise DecodingError("stored object field status.conditions is not a list")
    for condition in conditions:
        if isinstance(condition, dict) and condition.get("type") == "Succeeded":
            return condition.get("reason") or condition.get("status") or "Unknown"
    return "Unknown"


def run_row(obj: Dict[str, Any], now: Optional[datetime] = None) -> List[str]:
    """
    Render one stored run as table cells.

    Raises:
        DecodingError: If the object is not shaped like a Kubernetes object
    """
    now = now or datetime.now(timezone.utc)
    metadata = nested_mapping(obj, "metadata")
    status = nested_mapping(obj, "status")
    start = parse_time(status.get("startTime"), "status.startTime")
    end = parse_time(status.get("completionTime"), "status.completionTime")
    return [
        str(metadata.get("name", "")),
        format_age(start, now),
        format_duration(start, end),
        run_status(obj),
        str(metadata.get("uid", "")),
    ]

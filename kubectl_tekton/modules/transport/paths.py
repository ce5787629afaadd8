"""
Resource path construction for the Results REST gateway.

Resource names are hierarchical ("<namespace>/results/<result>/records/<record>"),
so a slash inside a segment is a hierarchy separator. Each component
between slashes is percent-encoded on its own; empty components are
dropped so the same logical path always renders the same way.
"""

from typing import List
from urllib.parse import quote

from ...errors import ConfigurationError

RESULTS_API_GROUP = "results.tekton.dev"
RESULTS_API_VERSION = "v1alpha2"
BASE_PATH = f"/apis/{RESULTS_API_GROUP}/{RESULTS_API_VERSION}/parents"

# Collection literals
RESULTS = "results"
RECORDS = "records"
LOGS = "logs"


def split_name(segment: str) -> List[str]:
    """Split a segment into its non-empty hierarchy components."""
    components = [c for c in segment.split("/") if c]
    for c in components:
        if c in (".", ".."):
            raise ConfigurationError(f"relative path component in resource name {segment!r}")
    return components


def build_path(base_path: str, *segments: str) -> str:
    """
    Join the base path and resource segments into an escaped URL path.

    Args:
        base_path: Fixed API root, e.g. BASE_PATH
        segments: Parent or resource name, optionally followed by a
            collection literal and a resource name

    Returns:
        Absolute, percent-encoded path

    Raises:
        ConfigurationError: If no segment is given or a segment is empty
    """
    if not segments:
        raise ConfigurationError("at least one resource segment is required")

    parts = [p for p in base_path.split("/") if p]
    for segment in segments:
        components = split_name(segment)
        if not components:
            raise ConfigurationError("resource name must not be empty")
        parts.extend(quote(c, safe="") for c in components)
    return "/" + "/".join(parts)

"""Provenance tags for reconstructed values.

Every daily extreme and every hourly temperature leaving the pipeline carries
exactly one tag in a column beside the value it describes.

Rules:
- Tags travel with the value (same row), never in a side table
- Replacing a value means replacing its tag in the same assignment
- Proxy tags embed the proxy name: "proxy:<name>"
"""

from __future__ import annotations

# Daily extremes
SOURCE_OBSERVED = "observed"
SOURCE_SOLVED = "solved"
SOURCE_INTERPOLATED = "interpolated"
SOURCE_MISSING = "missing"
PROXY_PREFIX = "proxy:"

# Hourly temperatures
HOURLY_OBSERVED = "observed"
HOURLY_RECONSTRUCTED = "reconstructed"  # idealized curve + interpolated residual
HOURLY_IDEALIZED = "idealized"  # unanchored gap, residual taken as 0
HOURLY_MISSING = "missing"


def proxy_source(name: str) -> str:
    """Return the provenance tag for a value filled from proxy `name`."""
    return f"{PROXY_PREFIX}{name}"


def is_proxy_source(tag: str) -> bool:
    return isinstance(tag, str) and tag.startswith(PROXY_PREFIX)


def proxy_name(tag: str) -> str:
    """Extract the proxy name from a "proxy:<name>" tag.

    Raises:
        ValueError: If the tag is not a proxy tag
    """
    if not is_proxy_source(tag):
        raise ValueError(f"Not a proxy provenance tag: {tag!r}")
    return tag[len(PROXY_PREFIX):]

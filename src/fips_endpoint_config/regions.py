"""Region name helpers."""

from __future__ import annotations


def is_fips_pseudo_region(region: str | None) -> bool:
    """Return True for FIPS pseudo regions such as fips-us-east-1 or us-gov-west-1-fips."""
    if not region:
        return False
    return "fips-" in region or "-fips" in region

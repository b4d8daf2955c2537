"""
Address cleaning.

Free-text addresses scraped from directories carry unit designators ("Suite 200",
"#4B", "Ste. 3") that make geocoders miss or fall back to a ZIP centroid. We strip
those with a handful of regex substitutions and normalize whitespace/punctuation.
Street-type abbreviations ("St", "Ave") are left alone; geocoders accept them.
"""

from __future__ import annotations

import re

from geoaccess.domain.models import Location

_UNIT_DESIGNATOR = re.compile(
    r"""
    ,?\s*                                        # optional comma before the unit
    (?:
        \b(?:suite|ste|unit|apt|apartment|bldg|room|rm)\b\.?\s*
        (?:\d[\w-]*|[a-z](?:-\w+)?)              # "100", "3B", "B", "A-1"; never a word like "Road"
      | \#\s*[a-z0-9-]+
    )
    \b
    """,
    re.IGNORECASE | re.VERBOSE,
)
_MULTI_SPACE = re.compile(r"\s+")
_SPACE_BEFORE_COMMA = re.compile(r"\s+,")
_REPEATED_COMMA = re.compile(r",(\s*,)+")
_ZIP = re.compile(r"^(\d{5})(?:-?\d{4})?$")


def clean_address(text: str | None) -> str:
    """Return a geocoder-friendly street address (may be empty)."""
    if not text:
        return ""
    out = _MULTI_SPACE.sub(" ", str(text)).strip()
    out = _UNIT_DESIGNATOR.sub("", out)
    out = _SPACE_BEFORE_COMMA.sub(",", out)
    out = _REPEATED_COMMA.sub(",", out)
    out = _MULTI_SPACE.sub(" ", out)
    return out.strip(" ,")


def clean_zip(text: str | None) -> str | None:
    """Reduce ZIP+4 to the 5-digit ZIP; unrecognized values are only trimmed."""
    if text is None:
        return None
    value = str(text).strip()
    if not value:
        return None
    m = _ZIP.match(value)
    return m.group(1) if m else value


def _trimmed(text: str | None) -> str | None:
    if text is None:
        return None
    value = _MULTI_SPACE.sub(" ", str(text)).strip()
    return value or None


def clean_location(location: Location) -> Location:
    """Return a copy of `location` with address fields cleaned."""
    state = _trimmed(location.state)
    return location.model_copy(
        update={
            "address": clean_address(location.address) or None,
            "city": _trimmed(location.city),
            "state": state.upper() if state else None,
            "zip_code": clean_zip(location.zip_code),
        }
    )

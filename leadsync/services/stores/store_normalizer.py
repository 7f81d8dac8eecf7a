"""Canonicalize raw upstream store names into ``"<Brand> - <Location>"``."""

from __future__ import annotations

import re
from typing import Optional

from leadsync.services.stores.store_aliases import KNOWN_SPELLINGS, LOCATION_CORRECTIONS

ZORUCCI = "Zorucci"
SUITOR_GUY = "Suitor Guy"

_ZORUCCI_TOKENS = re.compile(r"description|zorucci|zurocci|z-|z\.", re.IGNORECASE)
_SUITOR_GUY_TOKENS = re.compile(r"suitor guy|sg-|sg\.|^sg\b", re.IGNORECASE)
_LEADING_SEPARATORS = re.compile(r"^[-.\s]+")


def brand_from_marker(lower: str) -> Optional[str]:
    """Detect a brand from its markers in an already lower-cased store name."""

    if lower.startswith(("z-", "z.")) or "zorucci" in lower or "zurocci" in lower:
        return ZORUCCI
    if lower.startswith("sg") or "suitor guy" in lower:
        return SUITOR_GUY
    return None


def _title_case(value: str) -> str:
    """Capitalize every word and collapse repeated whitespace."""

    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split())


def detect_brand(raw: Optional[str]) -> Optional[str]:
    """Return the canonical brand carried by ``raw``, or None when it has none."""

    if not raw:
        return None
    lower = raw.strip().lower()
    known = KNOWN_SPELLINGS.get(lower)
    if known:
        return known.split(" - ", 1)[0]
    return brand_from_marker(lower)


def normalize(raw: Optional[str]) -> str:
    """
    Canonicalize a raw store name.

    Known spellings are resolved through the exact-match table. Anything else has
    its brand detected and stripped, and the remainder is title-cased and
    spelling-corrected. A name with no recognizable brand is returned trimmed but
    otherwise unchanged.

    Args:
        raw (Optional[str]): Store name as received from an upstream source.

    Returns:
        str: The canonical store name, or an empty string for empty input.
    """

    if not raw:
        return ""
    name = raw.strip()
    lower = name.lower()

    known = KNOWN_SPELLINGS.get(lower)
    if known:
        return known

    brand = brand_from_marker(lower)
    if brand is None:
        return name

    if brand == ZORUCCI:
        location = _ZORUCCI_TOKENS.sub("", name)
    else:
        location = _SUITOR_GUY_TOKENS.sub("", name)

    location = _title_case(_LEADING_SEPARATORS.sub("", location.strip()))
    if not location:
        return brand
    location = LOCATION_CORRECTIONS.get(location.lower(), location)
    return f"{brand} - {location}"

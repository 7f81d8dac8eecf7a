"""Typed extraction of logical fields from loosely keyed upstream rows.

Spreadsheet exports and reporting APIs name the same column in many ways
("Customer Name", "customerName", "__EMPTY_1", ...). Each logical field is described
by one ``Field``: an ordered tuple of accepted column names, compared
case-insensitively, and one extractor that turns the raw cell into a typed value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

_EXCEL_EPOCH = date(1899, 12, 30)
_ISO_PREFIX = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")
_SERIAL = re.compile(r"^\d{5}(\.\d+)?$")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def lower_keys(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``row`` keyed by trimmed, lower-cased column names."""

    lowered: Dict[str, Any] = {}
    for key, value in row.items():
        if key is None:
            continue
        normalized = str(key).strip().lower()
        if normalized not in lowered or _is_blank(lowered[normalized]):
            lowered[normalized] = value
    return lowered


def first_present(row: Mapping[str, Any], aliases: Tuple[str, ...]) -> Any:
    """Return the first non-blank value among ``aliases`` in a lower-keyed row."""

    for alias in aliases:
        value = row.get(alias.lower())
        if not _is_blank(value):
            return value
    return None


def as_text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def as_phone(value: Any) -> Optional[str]:
    """
    Reduce a phone cell to ten digits.

    International numbers keep their last ten digits and nine-digit numbers get a
    leading zero. Anything else is returned as bare digits so the resolver can
    report it as invalid.
    """

    text = as_text(value)
    if text is None:
        return None
    digits = re.sub(r"\D", "", text)
    if len(digits) > 10:
        return digits[-10:]
    if len(digits) == 9:
        return "0" + digits
    return digits or None


def as_amount(value: Any) -> Optional[float]:
    if _is_blank(value):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = re.sub(r"[^\d.\-]", "", str(value))
    try:
        return float(cleaned)
    except ValueError:
        return None


def _build_date(year: int, month: int, day: int, min_year: int) -> Optional[date]:
    if not min_year <= year <= 2100:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _from_excel_serial(serial: float) -> Optional[date]:
    try:
        parsed = _EXCEL_EPOCH + timedelta(days=int(serial))
    except OverflowError:
        return None
    return parsed if 1900 <= parsed.year <= 2100 else None


def as_sheet_date(value: Any) -> Optional[date]:
    """
    Parse a spreadsheet date.

    Accepts ``DD-MM-YYYY`` and ``DD/MM/YYYY`` (day first), ``YYYY-MM-DD``, ISO
    timestamps and Excel serial day numbers. Years outside 1900-2100 are rejected.
    """

    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        return _from_excel_serial(value)

    text = str(value).strip()
    if _SERIAL.match(text):
        return _from_excel_serial(float(text))

    separator = "-" if "-" in text else "/" if "/" in text else None
    if separator:
        parts = [part.strip() for part in text.split("T", 1)[0].split(separator)]
        if len(parts) == 3 and all(part.isdigit() for part in parts):
            first, second, third = parts
            if len(third) == 4:
                return _build_date(int(third), int(second), int(first), 1900)
            if len(first) == 4:
                return _build_date(int(first), int(second), int(third), 1900)

    return _from_iso(text, 1900)


def as_api_date(value: Any) -> Optional[date]:
    """
    Parse a reporting API date such as ``2025-03-13T07:04:47``.

    ISO dates are read first, then day-first dates. Years before 2000 are rejected
    as parsing accidents.
    """

    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    match = _ISO_PREFIX.match(text)
    if match:
        year, month, day = (int(group) for group in match.groups())
        return _build_date(year, month, day, 2000)

    separator = "-" if "-" in text else "/" if "/" in text else None
    if separator:
        parts = [part.strip() for part in text.split(separator)]
        if len(parts) == 3 and all(part.isdigit() for part in parts) and len(parts[2]) == 4:
            return _build_date(int(parts[2]), int(parts[1]), int(parts[0]), 2000)

    return _from_iso(text, 2000)


def _from_iso(text: str, min_year: int) -> Optional[date]:
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return _build_date(parsed.year, parsed.month, parsed.day, min_year)


@dataclass(frozen=True)
class Field:
    """One logical field: accepted column names in priority order and an extractor."""

    aliases: Tuple[str, ...]
    extract: Callable[[Any], Any] = as_text

    def read(self, row: Mapping[str, Any]) -> Any:
        return self.extract(first_present(row, self.aliases))


def read_fields(row: Mapping[str, Any], table: Mapping[str, Field]) -> Dict[str, Any]:
    """
    Extract every field of ``table`` from ``row``.

    Args:
        row (Mapping[str, Any]): Raw row with arbitrary column-name casing.
        table (Mapping[str, Field]): Logical field name to its ``Field``.

    Returns:
        Dict[str, Any]: Logical field name to typed value, None when absent.
    """

    lowered = lower_keys(row)
    return {name: field.read(lowered) for name, field in table.items()}

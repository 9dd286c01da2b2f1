from __future__ import annotations

import logging
import re
from calendar import timegm
from datetime import datetime, timezone
from typing import Optional

from .models import Entity, ParsedTimestamp

logger = logging.getLogger("modelatlas.date_index")

MONTH_INDEX = {
    "jan": 0,
    "feb": 1,
    "mar": 2,
    "apr": 3,
    "may": 4,
    "jun": 5,
    "jul": 6,
    "aug": 7,
    "sep": 8,
    "oct": 9,
    "nov": 10,
    "dec": 11,
}

FALLBACK_YEAR = 2020
MIN_YEAR = 1
MAX_YEAR = 9999

YEAR_PATTERN = re.compile(r"^[+]?(\d+)")


def epoch_for(year: int, month_index: int = 0) -> int:
    """Milliseconds since 1970-01-01 UTC for the first day of ``year``/``month_index``."""
    month_index = min(max(month_index, 0), 11)
    return timegm((year, month_index + 1, 1, 0, 0, 0)) * 1000


FALLBACK_EPOCH = epoch_for(FALLBACK_YEAR, 0)


def year_of(epoch: int) -> int:
    return datetime.fromtimestamp(epoch / 1000, tz=timezone.utc).year


def _parse_month(token: str) -> int:
    return MONTH_INDEX.get(token[:3].lower(), 0)


def _parse_year(token: str) -> Optional[int]:
    match = YEAR_PATTERN.match(token)
    if not match:
        return None
    year = int(match.group(1))
    if not (MIN_YEAR <= year <= MAX_YEAR):
        return None
    return year


def parse(raw: Optional[str]) -> int:
    """Convert ``"Mon YYYY"`` into an epoch usable for linear interpolation.

    Unknown month tokens count as January and a missing or unreadable year
    counts as the fallback year, so a single bad record cannot abort a layout.
    Anything that is not exactly two tokens maps to ``FALLBACK_EPOCH``.
    """

    parts = (raw or "").split()
    if len(parts) != 2:
        if raw:
            logger.debug("Unparsable date %r, using fallback epoch", raw)
        return FALLBACK_EPOCH

    month_token, year_token = parts
    year = _parse_year(year_token)
    if year is None:
        logger.debug("Unreadable year in %r, using %d", raw, FALLBACK_YEAR)
        year = FALLBACK_YEAR
    return epoch_for(year, _parse_month(month_token))


def parse_timestamp(entity: Entity) -> ParsedTimestamp:
    return ParsedTimestamp(entity_id=entity.id, epoch=parse(entity.date), raw=entity.date)


__all__ = [
    "FALLBACK_EPOCH",
    "FALLBACK_YEAR",
    "MONTH_INDEX",
    "epoch_for",
    "parse",
    "parse_timestamp",
    "year_of",
]

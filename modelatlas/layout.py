from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from . import date_index
from .eras import DEFAULT_ERAS, percent_for, segment
from .models import (
    EraSegment,
    Entity,
    LabelFootprint,
    LayoutConfig,
    LayoutResult,
    Marker,
    YearTick,
)

logger = logging.getLogger("modelatlas.layout")

DEFAULT_VIEWPORT_WIDTH_UNITS = 1200.0
DEFAULT_LAYOUT_CONFIG = LayoutConfig()


@dataclass
class _PlacedEntity:
    entity: Entity
    percent: float
    width: float


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _collides(left: float, right: float, occupied: Sequence[Tuple[float, float]], margin: float) -> bool:
    return any(not (right < o_left - margin or left > o_right + margin) for o_left, o_right in occupied)


def assign_levels(
    intervals: Sequence[Tuple[float, float]],
    margin: float,
) -> List[int]:
    """Greedy first-fit level assignment.

    ``intervals`` are ``(left, right)`` footprints in processing order. Each one
    goes to the lowest level on which it keeps ``margin`` units of clearance
    from every interval already placed there; a new level is opened when no
    existing level fits. Not globally optimal, but deterministic.
    """

    levels: List[List[Tuple[float, float]]] = []
    assigned: List[int] = []
    for left, right in intervals:
        level = 0
        while level < len(levels) and _collides(left, right, levels[level], margin):
            level += 1
        if level == len(levels):
            levels.append([])
        levels[level].append((left, right))
        assigned.append(level)
    return assigned


def _year_ticks(min_epoch: int, max_epoch: int, config: LayoutConfig) -> List[YearTick]:
    pad = config.pad_percent
    last_year = date_index.year_of(max_epoch)
    span = last_year - config.floor_year + 1
    step = max(1, -(-span // config.max_year_ticks))
    ticks: List[YearTick] = []
    for year in range(config.floor_year, last_year + 1, step):
        percent = percent_for(date_index.epoch_for(year), min_epoch, max_epoch, pad)
        if pad <= percent <= 100 - pad:
            ticks.append(YearTick(percent=percent, year=year))
    return ticks


def layout(
    entities: Sequence[Entity],
    eras: Sequence[EraSegment] = DEFAULT_ERAS,
    viewport_width_units: float = DEFAULT_VIEWPORT_WIDTH_UNITS,
    config: Optional[LayoutConfig] = None,
) -> LayoutResult:
    """Place entity markers chronologically and stack their labels without overlap."""

    if config is None:
        config = DEFAULT_LAYOUT_CONFIG
    pad = config.pad_percent
    min_epoch = date_index.epoch_for(config.floor_year)
    ceiling_epoch = date_index.epoch_for(config.ceiling_year)

    if not entities:
        return LayoutResult(
            era_bands=tuple(segment(eras, min_epoch, ceiling_epoch, pad)),
            track_height=config.empty_track_height,
        )

    timestamps = [date_index.parse_timestamp(entity) for entity in entities]
    # same-date entities keep input order
    ordered = sorted(zip(entities, timestamps), key=lambda pair: pair[1].epoch)
    max_epoch = max(max(ts.epoch for ts in timestamps), ceiling_epoch)

    placed = [
        _PlacedEntity(
            entity=entity,
            percent=_clamp(percent_for(ts.epoch, min_epoch, max_epoch, pad), pad, 100 - pad),
            width=len(entity.name) * config.char_width,
        )
        for entity, ts in ordered
    ]

    intervals = []
    for item in placed:
        centre = item.percent / 100 * viewport_width_units
        intervals.append((centre - item.width / 2, centre + item.width / 2))
    levels = assign_levels(intervals, config.label_margin)

    markers = tuple(
        Marker(entity_id=item.entity.id, percent=item.percent, date_text=item.entity.date)
        for item in placed
    )
    labels = tuple(
        LabelFootprint(
            entity_id=item.entity.id,
            text=item.entity.name,
            center_percent=item.percent,
            half_width_units=item.width / 2,
            level=level,
            stem_height=config.stem_base + level * config.level_height,
        )
        for item, level in zip(placed, levels)
    )

    max_level = max(levels)
    track_height = config.base_height + (max_level + 1) * config.level_height + config.bottom_margin
    logger.debug("Laid out %d entities on %d label levels", len(placed), max_level + 1)

    return LayoutResult(
        markers=markers,
        labels=labels,
        era_bands=tuple(segment(eras, min_epoch, max_epoch, pad)),
        year_ticks=tuple(_year_ticks(min_epoch, max_epoch, config)),
        track_height=track_height,
    )


__all__ = ["DEFAULT_LAYOUT_CONFIG", "DEFAULT_VIEWPORT_WIDTH_UNITS", "assign_levels", "layout"]

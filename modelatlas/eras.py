from __future__ import annotations

from typing import List, Sequence

from . import date_index
from .models import EraBand, EraSegment

DEFAULT_PAD_PERCENT = 3.0

# Eras of the robot foundation model landscape, oldest first.
DEFAULT_ERAS: tuple[EraSegment, ...] = (
    EraSegment(start=None, end="Apr 2022", color="var(--gray-200)", label=None),
    EraSegment(start="Apr 2022", end="Jul 2023", color="#8b5cf6", label="LLM Era"),
    EraSegment(start="Jul 2023", end="Dec 2025", color="#22c55e", label="VLA Era"),
    EraSegment(start="Dec 2025", end=None, color="#f97316", label="VAM Era"),
)


def percent_for(epoch: int, min_epoch: int, max_epoch: int, pad: float = DEFAULT_PAD_PERCENT) -> float:
    """Map an epoch linearly onto ``[pad, 100 - pad]`` (unclamped)."""
    span = (max_epoch - min_epoch) or 1
    return pad + ((epoch - min_epoch) / span) * (100 - pad * 2)


def segment(
    eras: Sequence[EraSegment],
    min_epoch: int,
    max_epoch: int,
    pad: float = DEFAULT_PAD_PERCENT,
) -> List[EraBand]:
    """Resolve era bounds to percent intervals of the layout axis."""

    bands: List[EraBand] = []
    for era in eras:
        start_epoch = date_index.parse(era.start) if era.start else min_epoch
        end_epoch = date_index.parse(era.end) if era.end else max_epoch
        bands.append(
            EraBand(
                percent_start=percent_for(start_epoch, min_epoch, max_epoch, pad),
                percent_end=percent_for(end_epoch, min_epoch, max_epoch, pad),
                color=era.color,
                label=era.label,
            )
        )
    return bands


__all__ = ["DEFAULT_ERAS", "DEFAULT_PAD_PERCENT", "percent_for", "segment"]

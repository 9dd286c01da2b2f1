"""Timeline layout and glossary / cross-link annotation for the model catalogue."""

from __future__ import annotations

from .annotator import annotate, annotate_spans, build_glossary, lookup
from .catalog import (
    access_label,
    access_level,
    extract_datasets,
    format_number,
    has_value,
    summarize,
)
from .date_index import FALLBACK_EPOCH, epoch_for, parse_timestamp, year_of
from .date_index import parse as parse_date
from .eras import DEFAULT_ERAS, percent_for, segment
from .layout import assign_levels, layout
from .linker import link, link_spans
from .models import (
    AnnotatedSpan,
    EraSegment,
    Entity,
    GlossaryEntry,
    LayoutConfig,
    LayoutResult,
)

__all__ = [
    "AnnotatedSpan",
    "DEFAULT_ERAS",
    "EraSegment",
    "Entity",
    "FALLBACK_EPOCH",
    "GlossaryEntry",
    "LayoutConfig",
    "LayoutResult",
    "access_label",
    "access_level",
    "annotate",
    "annotate_spans",
    "assign_levels",
    "build_glossary",
    "epoch_for",
    "extract_datasets",
    "format_number",
    "has_value",
    "layout",
    "link",
    "link_spans",
    "lookup",
    "parse_date",
    "parse_timestamp",
    "percent_for",
    "segment",
    "summarize",
    "year_of",
]

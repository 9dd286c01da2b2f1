from __future__ import annotations

from typing import List, Optional, Sequence

from .models import AnnotatedSpan, Entity
from .text_scan import Candidate, rescan_plain, scan


def _followed_by_decimal(text: str, start: int, end: int) -> bool:
    return end + 1 < len(text) and text[end] == "." and text[end + 1].isdigit()


def _accept(text: str, start: int, end: int) -> bool:
    # "N1" must not link inside "N1.5"
    return not _followed_by_decimal(text, start, end)


def _candidates(entities: Sequence[Entity], current_entity_id: Optional[str]) -> List[Candidate]:
    current = None if current_entity_id is None else str(current_entity_id)
    return [
        Candidate(needle=entity.name, ref_id=entity.id)
        for entity in entities
        if entity.name and entity.id != current
    ]


def link(text: str, entities: Sequence[Entity], current_entity_id: Optional[str] = None) -> List[AnnotatedSpan]:
    """Cross-link mentions of other entities' names in ``text``.

    The entity being displayed (``current_entity_id``) is never linked to itself.
    """
    return scan(
        text or "", _candidates(entities, current_entity_id), "model-link", _accept, ignore_case=False
    )


def link_spans(
    spans: Sequence[AnnotatedSpan],
    entities: Sequence[Entity],
    current_entity_id: Optional[str] = None,
) -> List[AnnotatedSpan]:
    candidates = _candidates(entities, current_entity_id)
    return rescan_plain(spans, lambda text: scan(text, candidates, "model-link", _accept, ignore_case=False))


__all__ = ["link", "link_spans"]

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import AnnotatedSpan, GlossaryEntry
from .text_scan import Candidate, rescan_plain, scan


def build_glossary(pairs: Iterable[Tuple[str, str]]) -> List[GlossaryEntry]:
    """Turn ``(term, definition)`` rows into glossary entries keyed by lowercase term.

    Rows with a blank term or definition are skipped. A repeated key keeps its
    first position and takes the later definition.
    """

    entries: Dict[str, GlossaryEntry] = {}
    for term, definition in pairs:
        term = (term or "").strip()
        definition = (definition or "").strip()
        if not term or not definition:
            continue
        key = term.lower()
        entries[key] = GlossaryEntry(term_key=key, display_term=term, definition=definition)
    return list(entries.values())


def lookup(glossary: Sequence[GlossaryEntry], term: str) -> Optional[GlossaryEntry]:
    key = (term or "").strip().lower()
    for entry in glossary:
        if entry.term_key == key:
            return entry
    return None


def _candidates(glossary: Sequence[GlossaryEntry]) -> List[Candidate]:
    return [Candidate(needle=entry.display_term, ref_id=entry.term_key) for entry in glossary]


def annotate(text: str, glossary: Sequence[GlossaryEntry]) -> List[AnnotatedSpan]:
    """Wrap glossary terms found in ``text``, longest terms first."""
    return scan(text or "", _candidates(glossary), "glossary")


def annotate_spans(spans: Sequence[AnnotatedSpan], glossary: Sequence[GlossaryEntry]) -> List[AnnotatedSpan]:
    candidates = _candidates(glossary)
    return rescan_plain(spans, lambda text: scan(text, candidates, "glossary"))


__all__ = ["annotate", "annotate_spans", "build_glossary", "lookup"]

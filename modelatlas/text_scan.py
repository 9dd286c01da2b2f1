"""Longest-first, word-boundary aware matching shared by the annotators.

Candidates are tried in descending length. Every accepted occurrence claims its
character range; later (shorter) candidates skip anything overlapping a claim.
The claims are finally cut into an ordered span sequence that concatenates
back to the input text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from .models import AnnotatedSpan, AnnotationKind


@dataclass(frozen=True)
class Candidate:
    needle: str
    ref_id: str


@dataclass(frozen=True)
class Claim:
    start: int
    end: int
    ref_id: str


# (text, start, end) -> keep the match?
MatchFilter = Callable[[str, int, int], bool]


def is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def on_word_boundaries(text: str, start: int, end: int) -> bool:
    """True unless the match edges cut through a run of word characters."""
    if start > 0 and is_word_char(text[start - 1]) and is_word_char(text[start]):
        return False
    if end < len(text) and is_word_char(text[end - 1]) and is_word_char(text[end]):
        return False
    return True


def _overlaps(start: int, end: int, claims: Iterable[Claim]) -> bool:
    return any(start < claim.end and claim.start < end for claim in claims)


def find_claims(
    text: str,
    candidates: Sequence[Candidate],
    accept: Optional[MatchFilter] = None,
    ignore_case: bool = True,
) -> List[Claim]:
    """Claim non-overlapping occurrences of ``candidates`` in ``text``, ordered by position."""

    claims: List[Claim] = []
    if not text:
        return claims

    flags = re.IGNORECASE if ignore_case else 0

    # sorted() is stable: equal-length candidates keep their given order.
    for candidate in sorted(candidates, key=lambda c: len(c.needle), reverse=True):
        if not candidate.needle:
            continue
        pattern = re.compile(re.escape(candidate.needle), flags)
        position = 0
        while True:
            match = pattern.search(text, position)
            if match is None:
                break
            start, end = match.span()
            if (
                on_word_boundaries(text, start, end)
                and not _overlaps(start, end, claims)
                and (accept is None or accept(text, start, end))
            ):
                claims.append(Claim(start=start, end=end, ref_id=candidate.ref_id))
                position = end
            else:
                position = start + 1

    claims.sort(key=lambda claim: claim.start)
    return claims


def build_spans(text: str, claims: Sequence[Claim], kind: AnnotationKind) -> List[AnnotatedSpan]:
    spans: List[AnnotatedSpan] = []
    cursor = 0
    for claim in claims:
        if claim.start > cursor:
            spans.append(AnnotatedSpan(text=text[cursor : claim.start]))
        spans.append(
            AnnotatedSpan(
                text=text[claim.start : claim.end],
                is_annotation=True,
                annotation_kind=kind,
                ref_id=claim.ref_id,
            )
        )
        cursor = claim.end
    if cursor < len(text):
        spans.append(AnnotatedSpan(text=text[cursor:]))
    return spans


def scan(
    text: str,
    candidates: Sequence[Candidate],
    kind: AnnotationKind,
    accept: Optional[MatchFilter] = None,
    ignore_case: bool = True,
) -> List[AnnotatedSpan]:
    return build_spans(text, find_claims(text, candidates, accept, ignore_case), kind)


def rescan_plain(
    spans: Sequence[AnnotatedSpan],
    annotate_text: Callable[[str], List[AnnotatedSpan]],
) -> List[AnnotatedSpan]:
    """Run ``annotate_text`` over the plain spans only; annotations stay opaque."""
    result: List[AnnotatedSpan] = []
    for span in spans:
        if span.is_annotation:
            result.append(span)
        else:
            result.extend(annotate_text(span.text))
    return result


def join_spans(spans: Iterable[AnnotatedSpan]) -> str:
    return "".join(span.text for span in spans)


def count_annotations(spans: Iterable[AnnotatedSpan]) -> int:
    return sum(1 for span in spans if span.is_annotation)

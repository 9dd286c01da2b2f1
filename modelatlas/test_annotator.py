from __future__ import annotations

from .annotator import annotate, annotate_spans, build_glossary, lookup
from .text_scan import count_annotations, join_spans


def _glossary():
    return build_glossary(
        [
            ("robot", "A machine that acts in the physical world."),
            ("robot hours", "Hours of teleoperated robot data."),
            ("VLA", "Vision-language-action model."),
            ("Flow matching", "A generative training objective."),
            ("C++", "A programming language."),
        ]
    )


def _annotated(spans):
    return [(span.text, span.ref_id) for span in spans if span.is_annotation]


def test_longest_term_wins_over_prefix():
    spans = annotate("500 robot hours logged", _glossary())
    assert _annotated(spans) == [("robot hours", "robot hours")]
    assert join_spans(spans) == "500 robot hours logged"


def test_shorter_term_still_matches_elsewhere():
    text = "One robot logged 500 robot hours."
    spans = annotate(text, _glossary())
    assert _annotated(spans) == [("robot", "robot"), ("robot hours", "robot hours")]
    assert join_spans(spans) == text


def test_matching_is_case_insensitive_and_keeps_source_text():
    spans = annotate("Trained with flow Matching on a vla backbone.", _glossary())
    assert _annotated(spans) == [("flow Matching", "flow matching"), ("vla", "vla")]
    assert all(span.annotation_kind == "glossary" for span in spans if span.is_annotation)


def test_whole_word_only():
    spans = annotate("robotics and VLAs are not terms", _glossary())
    assert count_annotations(spans) == 0
    assert len(spans) == 1
    assert spans[0].text == "robotics and VLAs are not terms"


def test_terms_with_symbols_match_next_to_punctuation():
    spans = annotate("Written in C++, mostly.", _glossary())
    assert _annotated(spans) == [("C++", "c++")]


def test_round_trip_and_no_gaps():
    text = "The VLA era started when robot hours became the unit; robots followed."
    spans = annotate(text, _glossary())
    assert join_spans(spans) == text
    assert all(span.text for span in spans)
    for previous, current in zip(spans, spans[1:]):
        assert previous.is_annotation or current.is_annotation


def test_empty_text_and_empty_glossary():
    assert annotate("", _glossary()) == []
    spans = annotate("robot", [])
    assert [(span.text, span.is_annotation) for span in spans] == [("robot", False)]


def test_reannotating_output_adds_nothing():
    glossary = _glossary()
    first = annotate("A VLA logs robot hours, and a robot learns.", glossary)
    second = annotate_spans(first, glossary)
    assert second == first
    assert count_annotations(second) == count_annotations(first)


def test_annotate_spans_leaves_existing_annotations_opaque():
    glossary = _glossary()
    first = annotate("robot hours", build_glossary([("robot", "x")]))
    second = annotate_spans(first, glossary)
    assert _annotated(second) == [("robot", "robot")]
    assert join_spans(second) == "robot hours"


def test_build_glossary_normalises_keys_and_skips_blank_rows():
    glossary = build_glossary(
        [
            ("Action Chunking", "Predicting several actions at once."),
            ("", "orphan definition"),
            ("Empty", "   "),
            ("action chunking", "Updated definition."),
        ]
    )
    assert [entry.term_key for entry in glossary] == ["action chunking"]
    assert glossary[0].definition == "Updated definition."


def test_lookup_is_case_insensitive():
    glossary = _glossary()
    assert lookup(glossary, "Robot Hours").definition.startswith("Hours")
    assert lookup(glossary, "unknown") is None

#!/usr/bin/env python3
"""
Test suite for deck normalization / repair

Tests:
1. Layout inference from slide kind
2. Garbage input still yields a valid deck
3. Slide count clamping
4. Per-slide repair: truncation, enum fallback, block nulling, images
5. Unlocked anchors and trimming
6. Padding before the final slide
7. Locked decks keep the fixed sequence
8. Theme, brand logo and trace fields
9. Idempotency
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.core.normalizer import infer_layout_from_kind, normalize_plan
from src.core.planning_catalog import get_planning_catalog

print("=" * 60)
print("BRIEFDECK NORMALIZER TEST SUITE")
print("=" * 60)
print()


def _content_slides(count):
    slides = [{"kind": "cover", "layout": "hero", "title": "Cover"}]
    slides += [
        {"kind": "content", "layout": "split", "title": f"Point {i}", "bullets": [f"Detail {i}"]}
        for i in range(1, count)
    ]
    return slides


def _mixed_plan():
    return {
        "deck_type": "sales_deck",
        "deck_title": "Win the Quarter",
        "recommended_slide_count": 7,
        "theme": {"primary_color": "#FF0000", "brand_logo": "https://example.com/logo.png"},
        "slides": [
            {"kind": "cover", "layout": "hero", "title": "Win the Quarter",
             "kpis": [{"label": "Win rate", "value": "32%"}]},
            {"kind": "Q3 KPI Dashboard", "layout": "not_a_layout", "title": "Numbers",
             "kpis": [{"label": f"K{i}", "value": str(i)} for i in range(10)], "image_prompt": ""},
            {"kind": "status", "layout": "traffic_light", "title": "Status",
             "status_items": [{"item": "Launch", "status": "purple"}, {"item": "Hiring", "status": "GREEN"}]},
            {"kind": "trend", "layout": "chart_bar", "title": "Growth",
             "chart": {"chart_type": "pie", "labels": ["a", "b", "c", "d"], "values": ["1", "x", float("nan"), 3]}},
            {"kind": "comparison", "layout": "comparison_matrix", "title": "Us vs Them",
             "matrix": {"x_labels": ["Us", "Them"], "y_labels": ["Price"], "cells": [["Low", "High"]]}},
            {"kind": "cta", "layout": "cta", "title": "Let's start", "cta": {"headline": "Sign today"}},
        ],
        "_extract": {"title": "Win the Quarter", "objective": "Close the quarter with the enterprise tier."},
    }


def test_infer_layout_from_kind():
    """Test 1: Kind keywords map to layouts."""
    print("[TEST 1] Layout Inference")
    print("-" * 50)

    cases = {
        "Q3 KPI Dashboard": "kpi_dashboard",
        "Client Logos": "logo_wall",
        "cover": "hero",
        "Product Roadmap": "timeline",
        "Now / Next / Later": "now_next_later",
        "Process flow": "process_steps",
        "Pricing packages": "pricing",
        "Meet the team": "team_grid",
        "Strategy pillars": "infographic_3",
        "Contact us": "cta",
        "something else": None,
        "": None,
    }
    for kind, expected in cases.items():
        actual = infer_layout_from_kind(kind)
        assert actual == expected, f"{kind!r}: expected {expected}, got {actual}"
    print(f"  ✓ {len(cases)} kinds mapped correctly")
    print("  ✓ TEST 1 PASSED!")
    print()


def test_garbage_input():
    """Test 2: Any input produces a valid 5-30 slide deck."""
    print("[TEST 2] Garbage Input")
    print("-" * 50)

    for garbage in (None, "not a plan", 42, {"slides": "nope"}, {"slides": [None, 5, {"title": {"x": 1}}]}):
        deck = normalize_plan(garbage)
        assert 5 <= len(deck.slides) <= 30, f"{garbage!r}: {len(deck.slides)} slides"
        assert deck.deck_type == "other"
        assert deck.deck_title == "Untitled Deck"
    print("  ✓ None, strings, numbers and malformed dicts repaired")

    deck = normalize_plan(None)
    assert len(deck.slides) == 10
    assert deck.slides[0].kind == "cover" and deck.slides[0].layout == "hero"
    print("  ✓ Empty input gets a cover and the default 10 slides")

    deck = normalize_plan({"slides": _content_slides(6)}, {"nSlides": "many"})
    assert 5 <= len(deck.slides) <= 30
    print("  ✓ Invalid options ignored")
    print("  ✓ TEST 2 PASSED!")
    print()


def test_slide_count_clamping():
    """Test 3: Target count clamped into [5, 30]."""
    print("[TEST 3] Slide Count Clamping")
    print("-" * 50)

    assert len(normalize_plan({"slides": _content_slides(3)}, {"nSlides": 50}).slides) == 30
    assert len(normalize_plan({"slides": _content_slides(40)}, {"nSlides": 2}).slides) == 5
    assert len(normalize_plan({"slides": _content_slides(40)}).slides) == 30
    print("  ✓ n_slides and slide count clamped")

    deck = normalize_plan({"slides": _content_slides(8), "recommended_slide_count": 99})
    assert deck.recommended_slide_count == 30
    print("  ✓ recommended_slide_count clamped")
    print("  ✓ TEST 3 PASSED!")
    print()


def test_slide_repair():
    """Test 4: Fields repaired per layout."""
    print("[TEST 4] Slide Repair")
    print("-" * 50)

    plan = _mixed_plan()
    plan["slides"][0]["title"] = "T" * 200
    deck = normalize_plan(plan, {"nSlides": 8})
    by_title = {s.title: s for s in deck.slides}

    cover = deck.slides[0]
    assert len(cover.title) == 140
    assert cover.kpis is None, "Blocks the layout does not render are nulled"
    print("  ✓ Title truncated, stray block nulled")

    numbers = by_title["Numbers"]
    assert numbers.layout == "kpi_dashboard"
    assert len(numbers.kpis) == 8
    assert numbers.image_prompt == "NONE"
    print("  ✓ Invalid layout inferred from kind; kpis capped; data slide has no image")

    status = by_title["Status"]
    assert [item.status for item in status.status_items] == ["yellow", "green"]
    print("  ✓ Unknown status falls back to yellow")

    chart = by_title["Growth"].chart
    assert chart.chart_type == "bar"
    assert chart.labels == ["a", "d"] and chart.values == [1.0, 3.0]
    print("  ✓ Chart type from layout; non-finite values dropped with their labels")

    matrix = by_title["Us vs Them"].comparison_matrix
    assert matrix is not None and matrix.x_labels == ["Us", "Them"]
    print("  ✓ Legacy 'matrix' key mapped to comparison_matrix")

    assert by_title["Let's start"].cta.headline == "Sign today"
    print("  ✓ TEST 4 PASSED!")
    print()


def test_anchors_and_trim():
    """Test 5: Summary and quote anchors injected and never trimmed."""
    print("[TEST 5] Anchors + Trim")
    print("-" * 50)

    plan = {
        "deck_type": "marketing_strategy",
        "slides": _content_slides(12),
        "_extract": {"objective": "Make the brand the default choice."},
        "_messaging": {
            "anchors": ["One city. One frequency."],
            "section_concepts": [
                {"section_id": f"s{i}", "concept": f"Concept {i}", "proof_points": [f"Proof {i}"]}
                for i in range(1, 5)
            ],
        },
    }
    deck = normalize_plan(plan, {"nSlides": 6})
    layouts = [s.layout for s in deck.slides]
    titles = [s.title for s in deck.slides]

    assert len(deck.slides) == 6
    assert titles == ["Cover", "Point 1", "One city. One frequency.", "Point 2", "Point 3", "Key Thought"]
    print("  ✓ Trimmed from the end, anchors kept")

    summary = deck.slides[2]
    assert summary.layout == "infographic_3" and summary.kind == "infographic_summary"
    assert [c.title for c in summary.cards] == ["Concept 1", "Concept 2", "Concept 3"]
    assert summary.cards[0].body == "Proof 1"
    print("  ✓ Summary cards built from section concepts")

    quote = deck.slides[layouts.index("quote")]
    assert quote.quote.text == "Make the brand the default choice."
    print("  ✓ Pull-quote from the extracted objective")

    plan["slides"].insert(1, {"kind": "Customer quote", "layout": "quote", "quote": {"text": "Loved it"}})
    deck = normalize_plan(plan, {"nSlides": 6})
    assert [s.layout for s in deck.slides].count("quote") == 1
    print("  ✓ Existing quote slide prevents a second one")
    print("  ✓ TEST 5 PASSED!")
    print()


def test_padding():
    """Test 6: Placeholders padded before the final slide."""
    print("[TEST 6] Padding")
    print("-" * 50)

    slides = _content_slides(2) + [{"kind": "cta", "layout": "cta", "title": "Call us"}]
    deck = normalize_plan({"deck_type": "sales_deck", "slides": slides}, {"nSlides": 8})

    assert len(deck.slides) == 8
    assert deck.slides[-1].title == "Call us"
    assert deck.slides[0].title == "Cover"
    placeholders = [s for s in deck.slides if s.kind == "content" and s.title.startswith("Slide ")]
    assert len(placeholders) == 3
    print("  ✓ Three placeholders inserted before the final slide")
    print("  ✓ TEST 6 PASSED!")
    print()


def test_locked_deck():
    """Test 7: Requested or suggested ad_agency decks come out in the locked sequence."""
    print("[TEST 7] Locked Deck")
    print("-" * 50)

    rule = get_planning_catalog().get_lock_rule("ad_agency")
    plan = {"slides": _content_slides(4), "_extract": {"deck_type_suggestion": "ad_agency"}}
    deck = normalize_plan(plan, {"nSlides": 6})

    assert [s.kind for s in deck.slides] == rule.kind_sequence
    assert deck.deck_type == "ad_agency"
    assert deck.recommended_slide_count == 10
    assert not any(s.layout == "quote" for s in deck.slides)
    print("  ✓ Suggested type locks: 10 slides, n_slides ignored, no anchors injected")

    deck = normalize_plan({"slides": []}, {"deckType": "ad_agency"})
    assert deck.deck_type == "ad_agency" and len(deck.slides) == 10
    print("  ✓ Requested type from options locks")

    for slides in (5, True, "slides", None, {"kind": "cover"}):
        deck = normalize_plan({"deck_type": "ad_agency", "slides": slides}, {"deckType": "ad_agency"})
        assert [s.kind for s in deck.slides] == rule.kind_sequence, f"slides={slides!r}"
    print("  ✓ Non-list slides on the locked path synthesize every beat")

    labelled = {
        "deck_type": "ad_agency",
        "slides": [{"kind": "content", "layout": "split", "title": f"Point {i}"} for i in range(8)],
        "_extract": {"deck_type_suggestion": "sales_deck"},
    }
    deck = normalize_plan(labelled, {"nSlides": 8, "deckType": "sales_deck"})
    assert len(deck.slides) == 8
    assert deck.deck_type == "sales_deck"
    assert [s.kind for s in deck.slides] != rule.kind_sequence[:8]
    print("  ✓ A draft labelled ad_agency is not locked by its own label")

    deck = normalize_plan({"deck_type": "ad_agency", "slides": _content_slides(7)})
    assert deck.deck_type == "other" and len(deck.slides) == 7
    print("  ✓ Unlocked ad_agency label falls back to 'other'")

    os.environ["LOCK_ON_SUGGESTED_DECK_TYPE"] = "false"
    try:
        deck = normalize_plan(plan, {"nSlides": 6})
    finally:
        del os.environ["LOCK_ON_SUGGESTED_DECK_TYPE"]
    assert len(deck.slides) == 6 and deck.deck_type == "other"
    print("  ✓ Suggestion ignored when escalation is switched off")
    print("  ✓ TEST 7 PASSED!")
    print()


def test_theme_and_trace():
    """Test 8: Theme merge, brand logo and trace fields."""
    print("[TEST 8] Theme + Trace")
    print("-" * 50)

    deck = normalize_plan(_mixed_plan(), {"deckStyle": "minimal"})
    assert deck.theme.primary_color == "#FF0000"
    assert deck.theme.font_heading == "Aptos Display"
    assert deck.theme.deck_style == "minimal"
    assert deck.brand_logo == "https://example.com/logo.png"
    print("  ✓ Theme merged with defaults; brand logo from theme")

    payload = deck.to_render_payload()
    assert payload["_extract"]["title"] == "Win the Quarter"
    assert payload["_narrative"] is None
    print("  ✓ Trace fields serialized under underscored names")
    print("  ✓ TEST 8 PASSED!")
    print()


def test_idempotency():
    """Test 9: normalize(normalize(x)) == normalize(x)."""
    print("[TEST 9] Idempotency")
    print("-" * 50)

    cases = [
        (_mixed_plan(), {"nSlides": 8}),
        ({"slides": _content_slides(14)}, {"nSlides": 6}),
        ({"slides": _content_slides(5), "_extract": {"deck_type_suggestion": "ad_agency"}},
         {"deckStyle": "agency_typographic"}),
        ({"deck_type": "ad_agency", "slides": _content_slides(9)}, {"nSlides": 8}),
        (None, None),
    ]
    for plan, options in cases:
        once = normalize_plan(plan, options)
        twice = normalize_plan(once, options)
        assert twice.to_render_payload() == once.to_render_payload(), f"Not idempotent for {options}"
    print(f"  ✓ {len(cases)} plans stable under re-normalization")

    anchors_only = [{"kind": "quote", "layout": "quote", "title": f"Quote {i}"} for i in range(6)]
    anchors_only.append({"kind": "pillar", "layout": "cards", "title": "Pillars"})
    once = normalize_plan({"slides": anchors_only}, {"nSlides": 5})
    kinds = [s.kind for s in once.slides]
    assert len(kinds) == 5 and "pillar" in kinds and "quote" in kinds, kinds
    twice = normalize_plan(once, {"nSlides": 5})
    assert twice.to_render_payload() == once.to_render_payload()
    print("  ✓ Trimming surplus anchors keeps one summary and one quote anchor")
    print("  ✓ TEST 9 PASSED!")
    print()


def main():
    tests = [
        ("Layout Inference", test_infer_layout_from_kind),
        ("Garbage Input", test_garbage_input),
        ("Slide Count Clamping", test_slide_count_clamping),
        ("Slide Repair", test_slide_repair),
        ("Anchors + Trim", test_anchors_and_trim),
        ("Padding", test_padding),
        ("Locked Deck", test_locked_deck),
        ("Theme + Trace", test_theme_and_trace),
        ("Idempotency", test_idempotency),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  ✗ {name} FAILED: {e}")
            results.append((name, False))

    print("=" * 60)
    passed = sum(1 for _, p in results if p)
    print(f"RESULTS: {passed}/{len(results)} tests passed")
    print("=" * 60)

    if passed != len(results):
        sys.exit(1)
    print("✓ ALL TESTS PASSED!")


if __name__ == "__main__":
    main()

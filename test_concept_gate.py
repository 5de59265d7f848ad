#!/usr/bin/env python3
"""
Test suite for the agency concept-quality gate

Tests:
1. Weak-line classifier rules
2. Brief keyword overlap rule
3. Refinement patching (keep_existing overridden while weak)
4. Gate calls the model once for a weak line
5. Gate skips the model for a strong line
"""

import sys
import os
import asyncio
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.core.concept_gate import ConceptQualityGate, apply_refinement, brief_keywords, is_weak_line
from src.core.planning_catalog import get_planning_catalog
from src.models.brief import BriefFacts, ExplicitOutlineSignal
from src.models.deck import ConceptRefinement
from src.models.options import PlanningOptions
from src.services.generation_service import GenerationService

print("=" * 60)
print("BRIEFDECK CONCEPT GATE TEST SUITE")
print("=" * 60)
print()

BRIEF = "Launch a radio campaign in Riyadh so the whole city tunes in to one station."
WHITELIST = ["radio", "city", "tune", "frequency", "riyadh", "out of home"]

REFINEMENT = {
    "keep_existing": False,
    "concept_line": "Tune the City to One Frequency",
    "supporting_line": "One shared station becomes the sound of Riyadh.",
    "proof_points": [
        "Drive-time listening is the city's shared ritual.",
        "Local hosts make the station feel like a neighbour.",
        "One frequency gives the campaign a memorable call to action.",
    ],
    "rationale": "Concrete, on-brief, and free of label-style punctuation.",
}


class CountingGenerationService(GenerationService):
    """Returns a fixed refinement and counts calls."""

    provider = "scripted"

    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    async def _generate(self, stage, system_prompt, user_prompt, temperature):
        self.calls.append((stage, temperature, user_prompt))
        return self.payload


def _plan(concept_title):
    return {
        "deck_title": "Tune In",
        "slides": [
            {"kind": "title", "title": "Tune In"},
            {"kind": "creative_concept", "title": concept_title, "subtitle": "", "bullets": ["old"]},
            {"kind": "thank_you", "title": "Thanks"},
        ],
    }


def test_weak_line_rules():
    """Test 1: Each structural weak-line rule."""
    print("[TEST 1] Weak Line Rules")
    print("-" * 50)

    assert is_weak_line("")
    assert is_weak_line("   ")
    print("  ✓ Empty lines are weak")

    assert is_weak_line("Campaign: Louder Together")
    print("  ✓ Colon label is weak")

    assert is_weak_line("Radio Campaign for the Summer")
    assert is_weak_line("A bold campaign across out of home")
    assert is_weak_line("Big OOH campaign")
    print("  ✓ Campaign-format lines are weak")

    assert is_weak_line("Vivid, Vibrant, Victorious")
    assert not is_weak_line("Vivid, Bold, Loud")
    print("  ✓ Alliterative lists are weak")

    assert is_weak_line("one two three four five six seven eight nine ten eleven twelve thirteen")
    assert not is_weak_line("one two three four five six seven eight nine ten eleven twelve")
    assert is_weak_line("a.b.c.d.e.f.g.h.i.j.k.l.m")
    print("  ✓ Lines over 12 words are weak (dots count as separators)")

    assert not is_weak_line("Louder Together")
    print("  ✓ Short line without brief keywords is fine when no brief is given")
    print("  ✓ TEST 1 PASSED!")
    print()


def test_brief_keyword_rule():
    """Test 2: Short lines must echo the brief when the brief has whitelisted keywords."""
    print("[TEST 2] Brief Keyword Overlap")
    print("-" * 50)

    keywords = brief_keywords(BRIEF, WHITELIST)
    assert keywords == {"radio", "city", "tune", "riyadh"}, f"Unexpected keywords: {keywords}"
    print("  ✓ Whitelisted keywords found in brief")

    assert brief_keywords("We buy out of home media", WHITELIST) == {"out"}
    print("  ✓ Multi-word entries reduced to first token")

    assert is_weak_line("Bold Moves Win", BRIEF, WHITELIST)
    assert not is_weak_line("Tune the City to One Frequency", BRIEF, WHITELIST)
    print("  ✓ Short off-brief line weak, on-brief line strong")

    assert not is_weak_line("Bold Moves Win", "A bakery opening downtown", WHITELIST)
    print("  ✓ Rule skipped when brief has no whitelisted keywords")

    seven_words = "Bold moves win hearts and minds forever"
    assert not is_weak_line(seven_words, BRIEF, WHITELIST)
    print("  ✓ Rule only applies to lines of six words or fewer")
    print("  ✓ TEST 2 PASSED!")
    print()


def test_apply_refinement():
    """Test 3: Patching only touches title, subtitle and bullets."""
    print("[TEST 3] Apply Refinement")
    print("-" * 50)

    slide = {"kind": "creative_concept", "title": "Campaign: Louder Together",
             "subtitle": "old", "bullets": ["old"], "layout": "hero"}
    keep = ConceptRefinement(**{**REFINEMENT, "keep_existing": True})

    patched = apply_refinement(slide, keep, True, BRIEF, WHITELIST)
    assert patched["title"] == "Tune the City to One Frequency", "Weak line must be replaced"
    assert patched["subtitle"] == REFINEMENT["supporting_line"]
    assert patched["bullets"] == REFINEMENT["proof_points"]
    assert patched["layout"] == "hero" and patched["kind"] == "creative_concept"
    assert slide["title"] == "Campaign: Louder Together", "Input must not be mutated"
    print("  ✓ keep_existing overridden while current line is weak")

    strong = {**slide, "title": "Riyadh Radio Finds Its Voice"}
    patched = apply_refinement(strong, keep, False, BRIEF, WHITELIST)
    assert patched["title"] == "Riyadh Radio Finds Its Voice"
    print("  ✓ keep_existing honoured for a strong line")
    print("  ✓ TEST 3 PASSED!")
    print()


def test_gate_refines_weak_line():
    """Test 4: One model call replaces a weak concept line."""
    print("[TEST 4] Gate Refines Weak Line")
    print("-" * 50)

    rule = get_planning_catalog().get_lock_rule("ad_agency")
    service = CountingGenerationService(REFINEMENT)
    gate = ConceptQualityGate(service, rule)
    plan = _plan("Campaign: Louder Together")

    refined = asyncio.run(gate.refine(
        plan, BRIEF, BriefFacts(), ExplicitOutlineSignal(), None, None, PlanningOptions()
    ))

    assert len(service.calls) == 1, f"Expected one call, got {len(service.calls)}"
    stage, temperature, user_prompt = service.calls[0]
    assert stage == "concept" and temperature == 0.6
    assert "Campaign: Louder Together" in user_prompt
    print("  ✓ Single concept call at temperature 0.6")

    assert refined["slides"][1]["title"] == "Tune the City to One Frequency"
    assert refined["slides"][0] == plan["slides"][0]
    assert plan["slides"][1]["title"] == "Campaign: Louder Together", "Input plan must not be mutated"
    print("  ✓ Only the concept slide changed")
    print("  ✓ TEST 4 PASSED!")
    print()


def test_gate_skips_strong_line():
    """Test 5: A strong line costs no model call."""
    print("[TEST 5] Gate Skips Strong Line")
    print("-" * 50)

    rule = get_planning_catalog().get_lock_rule("ad_agency")
    service = CountingGenerationService(REFINEMENT)
    gate = ConceptQualityGate(service, rule)
    plan = _plan("Tune the City to One Frequency")

    result = asyncio.run(gate.refine(
        plan, BRIEF, BriefFacts(), ExplicitOutlineSignal(), None, None, PlanningOptions()
    ))

    assert service.calls == []
    assert result is plan
    print("  ✓ No call, plan returned unchanged")
    print("  ✓ TEST 5 PASSED!")
    print()


def main():
    tests = [
        ("Weak Line Rules", test_weak_line_rules),
        ("Brief Keyword Overlap", test_brief_keyword_rule),
        ("Apply Refinement", test_apply_refinement),
        ("Gate Refines Weak Line", test_gate_refines_weak_line),
        ("Gate Skips Strong Line", test_gate_skips_strong_line),
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

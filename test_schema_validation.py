#!/usr/bin/env python3
"""
Test suite for stage schemas and the generation service contract

Tests:
1. Stage schema registry
2. Payload forms accepted by validation
3. Empty / non-JSON payloads vs schema mismatches
4. Closed JSON schemas exported for structured output
5. generate_structured error mapping
6. pydantic-ai backend with TestModel
"""

import sys
import os
import asyncio
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest
from pydantic import ValidationError
from pydantic_ai.models.test import TestModel

from src.models.brief import BriefFacts
from src.models.deck import ConceptRefinement
from src.services.generation_service import (
    GenerationFailure,
    GenerationService,
    PydanticAIGenerationService,
    SchemaValidationFailure
)
from src.utils.schema_validation import (
    STAGE_SCHEMAS,
    export_json_schema,
    get_stage_schema,
    validate_stage_output
)

print("=" * 60)
print("BRIEFDECK SCHEMA VALIDATION TEST SUITE")
print("=" * 60)
print()

REFINEMENT = {
    "keep_existing": False,
    "concept_line": "Tune the City to One Frequency",
    "supporting_line": "One station becomes the sound of the city.",
    "proof_points": ["Shared commute ritual", "Local hosts", "One memorable frequency"],
    "rationale": "On-brief and concrete.",
}


class StubGenerationService(GenerationService):
    """Returns or raises whatever it was given."""

    provider = "stub"

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    async def _generate(self, stage, system_prompt, user_prompt, temperature):
        if self.error is not None:
            raise self.error
        return self.result


def _generate(service, stage="concept"):
    return asyncio.run(service.generate_structured(stage, "system", "user", 0.5))


def test_registry():
    """Test 1: Every stage has a named, versioned schema."""
    print("[TEST 1] Schema Registry")
    print("-" * 50)

    names = {stage: schema.name for stage, schema in STAGE_SCHEMAS.items()}
    assert names == {
        "extract": "brief_extract",
        "narrative": "narrative_plan",
        "messaging": "messaging_map",
        "assemble": "deck_plan",
        "edit": "deck_plan",
        "concept": "agency_concept_refine",
        "one_pass": "deck_plan_legacy",
    }
    assert all(schema.version == "1.0" for schema in STAGE_SCHEMAS.values())
    print("  ✓ Seven stages registered")

    with pytest.raises(KeyError):
        get_stage_schema("render")
    print("  ✓ Unknown stage raises KeyError")
    print("  ✓ TEST 1 PASSED!")
    print()


def test_payload_forms():
    """Test 2: Models, dicts, JSON text and bytes validate."""
    print("[TEST 2] Payload Forms")
    print("-" * 50)

    facts = BriefFacts(title="Radio Riyadh")
    assert validate_stage_output("extract", facts) is facts
    assert validate_stage_output("extract", {"title": "Radio Riyadh"}).title == "Radio Riyadh"
    assert validate_stage_output("extract", '{"title": "Radio Riyadh"}').title == "Radio Riyadh"
    assert validate_stage_output("extract", b'{"title": "Radio Riyadh"}').title == "Radio Riyadh"
    print("  ✓ Model, dict, str and bytes accepted")

    refinement = validate_stage_output("concept", REFINEMENT)
    assert isinstance(refinement, ConceptRefinement)
    print("  ✓ TEST 2 PASSED!")
    print()


def test_invalid_payloads():
    """Test 3: Empty and non-JSON are ValueError; mismatches are ValidationError."""
    print("[TEST 3] Invalid Payloads")
    print("-" * 50)

    for empty in (None, "", "   "):
        with pytest.raises(ValueError):
            validate_stage_output("extract", empty)
    with pytest.raises(ValueError):
        validate_stage_output("extract", "{not json")
    print("  ✓ Empty and non-JSON payloads rejected")

    with pytest.raises(ValidationError):
        validate_stage_output("extract", {"title": "x", "unexpected": True})
    with pytest.raises(ValidationError):
        validate_stage_output("extract", {"constraints": ["c"] * 13})
    with pytest.raises(ValidationError):
        validate_stage_output("messaging", {"anchors": [], "locked_phrases": [], "section_concepts": []})
    with pytest.raises(ValidationError):
        validate_stage_output("concept", {**REFINEMENT, "proof_points": ["only one"]})
    print("  ✓ Extra keys and bound violations rejected")
    print("  ✓ TEST 3 PASSED!")
    print()


def test_export_json_schema():
    """Test 4: Exported schemas are closed."""
    print("[TEST 4] JSON Schema Export")
    print("-" * 50)

    exported = export_json_schema("extract")
    assert exported["name"] == "brief_extract"
    assert exported["strict"] is True
    assert exported["schema"]["additionalProperties"] is False
    print("  ✓ brief_extract is closed")

    deck_schema = export_json_schema("assemble")["schema"]
    assert deck_schema["properties"]["slides"]["maxItems"] == 30
    print("  ✓ deck_plan bounds slides to 30")
    print("  ✓ TEST 4 PASSED!")
    print()


def test_generation_error_mapping():
    """Test 5: Backend errors become GenerationFailure naming the stage."""
    print("[TEST 5] Generation Error Mapping")
    print("-" * 50)

    assert _generate(StubGenerationService(REFINEMENT)).concept_line == REFINEMENT["concept_line"]
    print("  ✓ Valid dict output returned as model")

    with pytest.raises(GenerationFailure) as exc:
        _generate(StubGenerationService(error=RuntimeError("network down")), stage="narrative")
    assert exc.value.stage == "narrative"
    assert "network down" in str(exc.value)
    assert not isinstance(exc.value, SchemaValidationFailure)
    print("  ✓ Call errors wrapped with stage name")

    with pytest.raises(SchemaValidationFailure) as exc:
        _generate(StubGenerationService({"concept_line": "x"}))
    assert exc.value.stage == "concept"
    assert exc.value.details["schema"] == "agency_concept_refine"
    assert exc.value.details["errors"]
    print("  ✓ Schema mismatch raises SchemaValidationFailure with errors")

    with pytest.raises(GenerationFailure) as exc:
        _generate(StubGenerationService(""))
    assert not isinstance(exc.value, SchemaValidationFailure)
    print("  ✓ Empty output raises GenerationFailure")
    print("  ✓ TEST 5 PASSED!")
    print()


def test_pydantic_ai_backend():
    """Test 6: The pydantic-ai backend returns the stage's output model."""
    print("[TEST 6] pydantic-ai Backend")
    print("-" * 50)

    service = PydanticAIGenerationService(TestModel(custom_output_args=REFINEMENT), provider="test")
    refinement = _generate(service)

    assert isinstance(refinement, ConceptRefinement)
    assert refinement.concept_line == "Tune the City to One Frequency"
    assert len(refinement.proof_points) == 3
    print("  ✓ TestModel output validated as ConceptRefinement")
    print("  ✓ TEST 6 PASSED!")
    print()


def main():
    tests = [
        ("Schema Registry", test_registry),
        ("Payload Forms", test_payload_forms),
        ("Invalid Payloads", test_invalid_payloads),
        ("JSON Schema Export", test_export_json_schema),
        ("Generation Error Mapping", test_generation_error_mapping),
        ("pydantic-ai Backend", test_pydantic_ai_backend),
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

"""
Stage schema registry and validation.

Every generation stage has one named, versioned output schema. The
generation backend asks the registry which model a stage returns, and
raw payloads (dicts or JSON text) are validated here before any stage
sees them.
"""

from typing import Any, Dict, NamedTuple, Type
import json

from pydantic import BaseModel

from src.models.brief import BriefFacts
from src.models.narrative import NarrativePlan, MessagingMap
from src.models.deck import DeckDraft, ConceptRefinement


class StageSchema(NamedTuple):
    """Output contract for one pipeline stage."""
    name: str
    version: str
    model: Type[BaseModel]


STAGE_SCHEMAS: Dict[str, StageSchema] = {
    "extract": StageSchema("brief_extract", "1.0", BriefFacts),
    "narrative": StageSchema("narrative_plan", "1.0", NarrativePlan),
    "messaging": StageSchema("messaging_map", "1.0", MessagingMap),
    "assemble": StageSchema("deck_plan", "1.0", DeckDraft),
    "edit": StageSchema("deck_plan", "1.0", DeckDraft),
    "concept": StageSchema("agency_concept_refine", "1.0", ConceptRefinement),
    "one_pass": StageSchema("deck_plan_legacy", "1.0", DeckDraft),
}


def get_stage_schema(stage: str) -> StageSchema:
    """Look up the schema for a stage; unknown stages are a programming error."""
    try:
        return STAGE_SCHEMAS[stage]
    except KeyError:
        raise KeyError(f"No output schema registered for stage '{stage}'") from None


def validate_stage_output(stage: str, payload: Any) -> BaseModel:
    """
    Validate a stage payload against its schema.

    Args:
        stage: Stage name (extract, narrative, messaging, assemble, edit, concept, one_pass)
        payload: Model instance, dict, or JSON text

    Returns:
        Instance of the stage's output model

    Raises:
        ValueError: Empty or non-JSON payload
        pydantic.ValidationError: Payload does not match the schema
    """
    model = get_stage_schema(stage).model

    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()

    if payload is None or (isinstance(payload, str) and not payload.strip()):
        raise ValueError(f"Empty output for stage '{stage}'")

    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValueError(f"Output for stage '{stage}' is not valid JSON: {e}") from e

    return model.model_validate(payload)


def export_json_schema(stage: str) -> Dict[str, Any]:
    """JSON Schema for a stage, as sent to structured-output backends."""
    schema = get_stage_schema(stage)
    return {
        "name": schema.name,
        "version": schema.version,
        "strict": True,
        "schema": schema.model.model_json_schema(),
    }

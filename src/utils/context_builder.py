"""
Context Builder Module
Selects only the upstream artifacts each generation stage needs and
renders them into that stage's user prompt.
"""

from typing import Dict, List, Any, Optional
import json
from abc import ABC, abstractmethod

from pydantic import BaseModel

from src.models.brief import ExplicitOutlineSignal


def _as_json(value: Any) -> str:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)
    return json.dumps(value, indent=2, ensure_ascii=False)


def _outline_block(outline: Optional[ExplicitOutlineSignal]) -> str:
    if not outline or not outline.entries:
        return ""
    lines = "\n".join(outline.to_prompt_lines())
    return (
        "Explicit slide outline detected in brief "
        f"(use it as backbone; expand naturally):\n{lines}"
    )


class StageContextStrategy(ABC):
    """Abstract base for stage-specific context strategies"""

    @abstractmethod
    def build_context(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        """Build minimal context for this stage"""
        pass

    @abstractmethod
    def get_required_fields(self) -> List[str]:
        """List fields this stage needs from pipeline data"""
        pass

    @abstractmethod
    def render(self, context: Dict[str, Any]) -> str:
        """Render the context as the stage's user prompt"""
        pass


class ExtractStrategy(StageContextStrategy):
    """Extraction reads only the raw brief"""

    def build_context(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        return {"brief_text": pipeline_data.get("brief_text", "")}

    def get_required_fields(self) -> List[str]:
        return ["brief_text"]

    def render(self, context: Dict[str, Any]) -> str:
        return (
            "Brief (may include messy notes; extract intent, facts, and structure):\n\n"
            f"{context['brief_text']}"
        )


class NarrativeStrategy(StageContextStrategy):
    """Narrative planning needs facts + outline"""

    def build_context(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "facts": pipeline_data.get("facts"),
            "outline": pipeline_data.get("outline"),
        }

    def get_required_fields(self) -> List[str]:
        return ["facts"]

    def render(self, context: Dict[str, Any]) -> str:
        parts = [
            "Extracted brief JSON (source of truth):",
            _as_json(context["facts"]),
            _outline_block(context.get("outline")),
            "Now output narrative_plan JSON per schema.",
        ]
        return "\n\n".join(p for p in parts if p)


class MessagingStrategy(StageContextStrategy):
    """Messaging needs facts + outline + the (possibly locked) narrative"""

    def build_context(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "facts": pipeline_data.get("facts"),
            "outline": pipeline_data.get("outline"),
            "narrative": pipeline_data.get("narrative"),
            "voice_profile": pipeline_data.get("voice_profile", ""),
        }

    def get_required_fields(self) -> List[str]:
        return ["facts", "narrative"]

    def render(self, context: Dict[str, Any]) -> str:
        parts = [
            "Extracted brief JSON (facts):",
            _as_json(context["facts"]),
            _outline_block(context.get("outline")),
            "Narrative_plan JSON (journey blueprint):",
            _as_json(context["narrative"]),
            f"Requested voice_profile: {context.get('voice_profile')}",
            "Now output messaging_map JSON per schema.",
        ]
        return "\n\n".join(p for p in parts if p)


class AssembleStrategy(StageContextStrategy):
    """Assembly needs facts + outline + narrative + messaging"""

    def build_context(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "facts": pipeline_data.get("facts"),
            "outline": pipeline_data.get("outline"),
            "narrative": pipeline_data.get("narrative"),
            "messaging": pipeline_data.get("messaging"),
        }

    def get_required_fields(self) -> List[str]:
        return ["facts", "narrative", "messaging"]

    def render(self, context: Dict[str, Any]) -> str:
        parts = [
            "Here is the extracted brief JSON (source of truth):",
            _as_json(context["facts"]),
            _outline_block(context.get("outline")),
            "Here is the narrative_plan JSON (journey blueprint; follow section order):",
            _as_json(context["narrative"]),
            "Here is the messaging_map JSON (copy constraints; anchors + section concepts; you MUST comply):",
            _as_json(context["messaging"]),
        ]
        return "\n\n".join(p for p in parts if p)


class EditStrategy(AssembleStrategy):
    """Editing sees everything assembly saw, plus the draft to rewrite"""

    def build_context(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        context = super().build_context(pipeline_data)
        context["draft"] = pipeline_data.get("draft")
        return context

    def get_required_fields(self) -> List[str]:
        return ["facts", "narrative", "messaging", "draft"]

    def render(self, context: Dict[str, Any]) -> str:
        return "\n\n".join([
            super().render(context),
            "Initial deck_plan JSON to edit:",
            _as_json(context["draft"]),
        ])


class ConceptStrategy(StageContextStrategy):
    """Concept refinement needs the verbatim brief and the one slide it may change"""

    def build_context(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "brief_text": pipeline_data.get("brief_text", ""),
            "facts": pipeline_data.get("facts"),
            "outline": pipeline_data.get("outline"),
            "narrative": pipeline_data.get("narrative"),
            "messaging": pipeline_data.get("messaging"),
            "concept_slide": pipeline_data.get("concept_slide", {}),
        }

    def get_required_fields(self) -> List[str]:
        return ["brief_text", "facts", "concept_slide"]

    def render(self, context: Dict[str, Any]) -> str:
        parts = [
            "BRIEF (verbatim):",
            context["brief_text"],
            "Extracted brief JSON:",
            _as_json(context["facts"]),
            _outline_block(context.get("outline")),
        ]
        if context.get("narrative") is not None:
            parts += ["Narrative plan JSON:", _as_json(context["narrative"])]
        if context.get("messaging") is not None:
            parts += ["Messaging map JSON:", _as_json(context["messaging"])]
        parts += [
            "Current Creative Concept slide (only this slide may be changed):",
            _as_json(context["concept_slide"]),
            "Deliver:\n"
            "1) concept_line (the campaign platform line)\n"
            "2) supporting_line (1 sentence: what it means + how it solves the brief)\n"
            "3) proof_points (3-4 bullets: concrete reasons, grounded in the brief)\n"
            "4) rationale (short: why this is better than the current line)",
        ]
        return "\n\n".join(p for p in parts if p)


class ContextBuilder:
    """Stage-aware context builder"""

    def __init__(self):
        self.strategies: Dict[str, StageContextStrategy] = {
            "extract": ExtractStrategy(),
            "one_pass": ExtractStrategy(),
            "narrative": NarrativeStrategy(),
            "messaging": MessagingStrategy(),
            "assemble": AssembleStrategy(),
            "edit": EditStrategy(),
            "concept": ConceptStrategy(),
        }

    def build_user_prompt(self, stage: str, pipeline_data: Dict[str, Any]) -> str:
        """Build the user prompt for a stage from only the data it needs"""
        strategy = self.strategies.get(stage)
        if not strategy:
            raise ValueError(f"No strategy defined for stage: {stage}")

        missing = [f for f in strategy.get_required_fields() if pipeline_data.get(f) is None]
        if missing:
            raise ValueError(f"Stage '{stage}' is missing required context: {', '.join(missing)}")

        return strategy.render(strategy.build_context(pipeline_data))

    def estimate_tokens(self, text: str) -> int:
        """Simple token estimation"""
        return len(text) // 4

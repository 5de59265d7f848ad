"""
Deck Planner for BriefDeck

Turns a free-text brief into a renderer-ready DeckPlan.

Two-pass pipeline (default):
1. Outline signals parsed from the raw brief (deterministic)
2. Brief extraction -> BriefFacts
3. Narrative planning -> NarrativePlan (locked for locked archetypes)
4. Messaging -> MessagingMap
5. Assembly -> DeckDraft
6. Editorial pass -> DeckDraft (optional)
7. Structural lock + concept-quality gate (locked archetypes only)
8. Normalization -> DeckPlan

One-pass mode (two_pass=False) asks for the deck directly from the
brief and normalizes it. Kept for debugging.

Any GenerationFailure propagates; no partial plan is returned.
"""

from typing import Any, Dict, Mapping, Optional, Union

from config.settings import get_settings
from src.models.brief import BriefFacts, ExplicitOutlineSignal
from src.models.catalog import PlanningCatalog
from src.models.deck import DeckPlan
from src.models.options import PlanningOptions
from src.core.brief_extractor import BriefExtractor
from src.core.concept_gate import ConceptQualityGate
from src.core.deck_assembler import DeckAssembler
from src.core.deck_editor import DeckEditor
from src.core.messaging_planner import MessagingPlanner
from src.core.narrative_planner import NarrativePlanner
from src.core.normalizer import normalize_plan
from src.core.outline_signals import extract_outline_signals
from src.core.planning_catalog import get_planning_catalog
from src.core.planning_stage import resolve_prompt_context
from src.core.structural_lock import lock_deck_plan, lock_narrative, resolve_lock_rule
from src.services.generation_service import GenerationService, build_generation_service
from src.utils.context_builder import ContextBuilder
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_extract_trace(facts: BriefFacts, outline: ExplicitOutlineSignal) -> Dict[str, Any]:
    """Extracted facts plus the outline hints, as attached to the plan under _extract."""
    trace = facts.model_dump(mode="json")
    if outline.entries:
        trace["explicit_outline"] = [
            {"slide": entry.slide_number, "title": entry.title} for entry in outline.entries
        ]
    if outline.slide_count_range:
        trace["slide_count_range_hint"] = outline.slide_count_range.model_dump()
    return trace


class DeckPlanner:
    """
    Orchestrates the planning pipeline for one brief.

    A generation service can be injected (tests, custom backends);
    otherwise one is built per request from options.provider.
    """

    ONE_PASS_SYSTEM_PROMPT = """You are a senior creative director and presentation strategist.

## TASK
Create a slide-by-slide plan. Output MUST match the schema strictly.
Use concise copy, strong narrative, layout variety.
Infer deck_type (or use the requested one).

## CONTEXT
{deck_type_line}
Target slide count: {n_slides}.
Language: {language}. Audience: {audience}. Vibe: {vibe}."""

    def __init__(
        self,
        generation_service: Optional[GenerationService] = None,
        catalog: Optional[PlanningCatalog] = None
    ):
        self.generation_service = generation_service
        self.catalog = catalog or get_planning_catalog()
        self.context_builder = ContextBuilder()
        logger.info(
            f"DeckPlanner initialized: {len(self.catalog.recipes)} recipes, "
            f"{len(self.catalog.locks)} locked archetypes"
        )

    def _service_for(self, options: PlanningOptions) -> GenerationService:
        if self.generation_service is not None:
            return self.generation_service
        return build_generation_service(options.provider)

    async def plan_deck(
        self,
        brief_text: str,
        options: Union[PlanningOptions, Mapping[str, Any], None] = None
    ) -> DeckPlan:
        """
        Plan a deck from a brief.

        Args:
            brief_text: Raw brief text
            options: PlanningOptions or a dict using snake_case or camelCase keys

        Returns:
            Normalized DeckPlan with _extract, _narrative and _messaging attached

        Raises:
            GenerationFailure: A generation stage failed (names the stage)
        """
        if not isinstance(options, PlanningOptions):
            options = PlanningOptions.model_validate(dict(options or {}))

        settings = get_settings()
        service = self._service_for(options)
        outline = extract_outline_signals(brief_text)

        if outline.entries:
            logger.info(f"Explicit outline detected: {len(outline.entries)} slides")

        if not options.two_pass:
            return await self._plan_one_pass(brief_text, options, service)

        stage_args = (service, self.catalog, self.context_builder)

        facts = await BriefExtractor(*stage_args).extract(brief_text, options)
        rule = resolve_lock_rule(self.catalog, facts, options, settings.LOCK_ON_SUGGESTED_DECK_TYPE)
        if rule is not None:
            logger.info(f"Structural lock '{rule.recipe_name}' applies to this brief")

        narrative = await NarrativePlanner(*stage_args).plan(facts, outline, options)
        if rule is not None:
            narrative = lock_narrative(narrative, facts, rule)

        messaging = await MessagingPlanner(*stage_args).plan(facts, outline, narrative, options)
        draft = await DeckAssembler(*stage_args).assemble(
            facts, outline, narrative, messaging, options, locked_rule=rule
        )

        if options.editor_pass and settings.EDITOR_PASS_ENABLED:
            draft = await DeckEditor(*stage_args).edit(
                facts, outline, narrative, messaging, draft, options, locked_rule=rule
            )
        else:
            logger.info("Editorial pass skipped")

        plan: Dict[str, Any] = draft.model_dump(mode="json")
        if rule is not None:
            plan = lock_deck_plan(plan, facts, rule, options)
            gate = ConceptQualityGate(service, rule, self.context_builder)
            plan = await gate.refine(plan, brief_text, facts, outline, narrative, messaging, options)

        plan["_extract"] = build_extract_trace(facts, outline)
        plan["_narrative"] = narrative.model_dump(mode="json")
        plan["_messaging"] = messaging.model_dump(mode="json")

        deck = normalize_plan(plan, options, self.catalog)
        logger.info(f"Deck planned: '{deck.deck_title}' ({deck.deck_type}, {len(deck.slides)} slides)")
        return deck

    async def _plan_one_pass(
        self,
        brief_text: str,
        options: PlanningOptions,
        service: GenerationService
    ) -> DeckPlan:
        """Legacy single-call planner: brief -> deck, then normalization."""
        settings = get_settings()
        vibe, audience, language = resolve_prompt_context(options)
        requested = options.requested_deck_type
        n_slides = options.n_slides if options.n_slides is not None else settings.DEFAULT_SLIDE_COUNT
        n_slides = max(settings.MIN_SLIDES, min(settings.MAX_SLIDES, n_slides))

        system_prompt = self.ONE_PASS_SYSTEM_PROMPT.format(
            deck_type_line=(
                f"Requested deck type: {requested}." if requested
                else "No explicit deck type; infer from brief."
            ),
            n_slides=n_slides,
            language=language,
            audience=audience,
            vibe=vibe,
        )
        user_prompt = self.context_builder.build_user_prompt("one_pass", {"brief_text": brief_text})

        logger.info("Planning deck in one-pass mode")
        draft = await service.generate_structured(
            stage="one_pass",
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=settings.ASSEMBLE_TEMPERATURE,
        )
        return normalize_plan(draft, options, self.catalog)

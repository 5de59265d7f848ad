"""
Narrative Planner for BriefDeck

Second generation stage: chooses a story recipe and writes the section
journey (thesis, story spine, lexicon, ordered sections with
transitions). Locked archetypes are forced onto their fixed sequence
afterwards by the structural lock, not here.
"""

from typing import Optional

from src.models.brief import BriefFacts, ExplicitOutlineSignal
from src.models.catalog import StructuralLockRule
from src.models.narrative import NarrativePlan
from src.models.options import PlanningOptions
from src.core.planning_stage import PlanningStage, resolve_prompt_context
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class NarrativePlanner(PlanningStage):
    """Builds the messaging journey for a deck."""

    STAGE = "narrative"
    TEMPERATURE_SETTING = "NARRATIVE_TEMPERATURE"

    def _locked_beats_rule(self, rule: StructuralLockRule) -> str:
        beats = " ".join(
            f"{idx}) {beat.display_name}"
            for idx, beat in enumerate(rule.required_kind_sequence, start=1)
        )
        return (
            f'- If the deck_type is "{rule.deck_type}" (or the user requested it), you MUST use '
            f'recipe_name "{rule.recipe_name}" and create EXACTLY {rule.slide_count} sections '
            f"matching these beats in this exact order: {beats}"
        )

    def build_system_prompt(self, facts: BriefFacts, options: PlanningOptions) -> str:
        vibe, audience, language = resolve_prompt_context(options, facts)
        voice = self.voice_rules(options)
        recipe_lines = "\n".join(f"- {recipe.to_prompt_line()}" for recipe in self.catalog.recipes)
        lock_rules = "\n".join(self._locked_beats_rule(rule) for rule in self.catalog.locks)
        requested = options.requested_deck_type
        deck_type_line = (
            f"Requested deck type: {requested}." if requested else "No explicit deck type requested."
        )

        return f"""You are a senior strategist and narrative director. Your job is to create the messaging journey for a deck.

## INPUT / OUTPUT
Input: extracted brief JSON (facts). Output: a narrative_plan that ensures slide-to-slide flow (no random jumps).

## RECIPES
Choose a recipe_name from: {', '.join(self.catalog.recipe_names)}.
Recipes are story templates (order of ideas), not visual templates.
{recipe_lines}

## RULES
- Do NOT invent hard facts. If something is unknown, keep it generic and add it to must_include as a question/placeholder.
{lock_rules}
- For marketing case studies, follow this arc: proof of signal, brand alignment, challenge, reframe to opportunity, pillars, platform, visual system, executions, measurement, next steps, close.
- Write crisp, declarative key_message lines.
- Each section must end with a transition_to_next that tees up the next beat.

## VOICE
Voice profile: {voice.name}. {voice.tagline}
Headline discipline: {' '.join(voice.headline_rules)}

## CONTEXT
{deck_type_line}
Language: {language}. Audience: {audience}. Vibe: {vibe}."""

    async def plan(
        self,
        facts: BriefFacts,
        outline: Optional[ExplicitOutlineSignal],
        options: PlanningOptions
    ) -> NarrativePlan:
        """
        Plan the narrative sections for a deck.

        Raises:
            GenerationFailure: Model call failed or returned an invalid payload
        """
        narrative = await self._generate(
            self.build_system_prompt(facts, options),
            {"facts": facts, "outline": outline},
        )
        logger.info(
            f"Narrative planned: recipe='{narrative.recipe_name}', "
            f"{len(narrative.sections)} sections"
        )
        return narrative

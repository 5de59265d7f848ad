"""
Messaging Planner for BriefDeck

Third generation stage: defines the copy constraints that make the deck
read as authored. Anchors, locked phrases, one concept per section and
the bridge into the next section.
"""

from typing import Optional

from src.models.brief import BriefFacts, ExplicitOutlineSignal
from src.models.narrative import MessagingMap, NarrativePlan
from src.models.options import PlanningOptions
from src.core.planning_stage import PlanningStage, resolve_prompt_context, resolve_voice_profile
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class MessagingPlanner(PlanningStage):
    """Builds the messaging map for a (possibly locked) narrative."""

    STAGE = "messaging"
    TEMPERATURE_SETTING = "MESSAGING_TEMPERATURE"

    def build_system_prompt(self, facts: BriefFacts, options: PlanningOptions) -> str:
        vibe, audience, language = resolve_prompt_context(options, facts)
        voice = self.voice_rules(options)
        buzzwords = ", ".join(voice.forbidden_terms) or "None"

        return f"""You are a creative director and narrative copy editor. Define the messaging constraints for this deck so the copy feels authored, not random.

## INPUT / OUTPUT
Input: extracted brief JSON and narrative_plan JSON. Output: messaging_map JSON per schema.

## CRITICAL RULES
- Do NOT invent hard facts. Anchors can be crafted as brand/platform phrases, but must be consistent with the brief and narrative.
- For each narrative section, output EXACTLY ONE concept (a short claim) that the section introduces. Everything else is proof or example.
- Provide a required_bridge for every section that tees up the next section cleanly (witty but not try-hard).

## VOICE
Voice profile: {voice.name}. {voice.tagline}
Headline rules: {' '.join(voice.headline_rules)}
Section rules: {' '.join(voice.section_rules)}
Diction rules: {' '.join(voice.diction_rules)}
Buzzwords to avoid: {buzzwords}.

## CONTEXT
Language: {language}. Audience: {audience}. Vibe: {vibe}."""

    async def plan(
        self,
        facts: BriefFacts,
        outline: Optional[ExplicitOutlineSignal],
        narrative: NarrativePlan,
        options: PlanningOptions
    ) -> MessagingMap:
        """
        Plan anchors and section concepts.

        Raises:
            GenerationFailure: Model call failed or returned an invalid payload
        """
        messaging = await self._generate(
            self.build_system_prompt(facts, options),
            {
                "facts": facts,
                "outline": outline,
                "narrative": narrative,
                "voice_profile": resolve_voice_profile(options),
            },
        )
        logger.info(
            f"Messaging planned: {len(messaging.anchors)} anchors, "
            f"{len(messaging.section_concepts)} section concepts"
        )
        return messaging

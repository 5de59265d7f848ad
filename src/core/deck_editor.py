"""
Deck Editor for BriefDeck

Optional fifth generation stage: a final creative-director pass that
rewrites the draft's messaging against the messaging map. Returns the
same deck schema as assembly.
"""

from typing import Optional

from src.models.brief import BriefFacts, ExplicitOutlineSignal
from src.models.catalog import StructuralLockRule
from src.models.deck import DeckDraft
from src.models.narrative import MessagingMap, NarrativePlan
from src.models.options import PlanningOptions
from src.core.deck_assembler import locked_mode_rules
from src.core.planning_stage import PlanningStage, resolve_prompt_context
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class DeckEditor(PlanningStage):
    """Rewrites a draft deck so it reads as one authored journey."""

    STAGE = "edit"
    TEMPERATURE_SETTING = "EDIT_TEMPERATURE"

    def build_system_prompt(
        self,
        facts: BriefFacts,
        options: PlanningOptions,
        locked_rule: Optional[StructuralLockRule] = None
    ) -> str:
        vibe, audience, language = resolve_prompt_context(options, facts)
        voice = self.voice_rules(options)
        structure_rule = (
            locked_mode_rules(locked_rule, editing=True)
            if locked_rule
            else "DO NOT change the deck structure unless needed for flow: merge or split slides ONLY if "
                 "absolutely necessary; prefer rewriting instead. Keep slide count within 5-18."
        )

        return f"""You are the final creative director pass ("deck editor"). Rewrite ONLY the messaging so the deck reads as one authored journey.

## INPUT / OUTPUT
Input: extracted brief JSON, narrative_plan JSON, messaging_map JSON, and an initial deck_plan JSON.
Output: an improved deck_plan JSON matching the SAME schema exactly.

## STRUCTURE
{structure_rule}
DO NOT invent new facts, numbers, dates, client names, or results. If unknown, keep placeholders in speaker_notes.

## CRITICAL RULES (must pass)
1) Headline = declarative claim (no labels).
2) Each section introduces one concept only (use messaging_map.section_concepts).
3) Bridges: every section ends with a bridge_line that tees up the next beat. Use messaging_map required_bridge verbatim where possible.
4) Anchors: repeat messaging_map.anchors verbatim as callbacks (no paraphrases).
5) Consistent lexicon: prefer narrative_plan.lexicon.prefer_terms; avoid narrative_plan.lexicon.avoid_terms and messaging_map.buzzwords_to_avoid.
6) Bullet density: rewrite any bullet shorter than 6 words or generic. Every bullet should be specific and self-contained.
7) Two-column slides: the first half are KEY POINTS and the second half are MORE DETAIL elaborations. No single-word bullets.

## VOICE
Voice profile: {voice.name}. {voice.tagline}
Diction rules: {' '.join(voice.diction_rules)}

## CONTEXT
Language: {language}. Audience: {audience}. Vibe: {vibe}."""

    async def edit(
        self,
        facts: BriefFacts,
        outline: Optional[ExplicitOutlineSignal],
        narrative: NarrativePlan,
        messaging: MessagingMap,
        draft: DeckDraft,
        options: PlanningOptions,
        locked_rule: Optional[StructuralLockRule] = None
    ) -> DeckDraft:
        """
        Run the editorial pass over a draft.

        Raises:
            GenerationFailure: Model call failed or returned an invalid payload
        """
        edited = await self._generate(
            self.build_system_prompt(facts, options, locked_rule),
            {
                "facts": facts,
                "outline": outline,
                "narrative": narrative,
                "messaging": messaging,
                "draft": draft,
            },
        )
        logger.info(f"Draft edited: {len(draft.slides)} -> {len(edited.slides)} slides")
        return edited

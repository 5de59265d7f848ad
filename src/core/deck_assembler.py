"""
Deck Assembler for BriefDeck

Fourth generation stage: writes the slide-by-slide draft from facts,
narrative and messaging. The draft is not yet renderer-safe; the
structural lock and normalizer run after it.
"""

from typing import Optional

from src.models.brief import BriefFacts, ExplicitOutlineSignal
from src.models.catalog import StructuralLockRule
from src.models.deck import DeckDraft
from src.models.narrative import MessagingMap, NarrativePlan
from src.models.options import PlanningOptions
from src.core.planning_stage import PlanningStage, resolve_prompt_context
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

BUSINESS_LAYOUTS = (
    "timeline, kpi_dashboard, traffic_light, table, pricing, comparison_matrix, "
    "process_steps, team_grid, logo_wall, agenda, section_header, swot, funnel, "
    "now_next_later, okr, case_study, chart_bar, chart_line, org_chart, faq, infographic_3"
)


def locked_mode_rules(rule: StructuralLockRule, editing: bool = False) -> str:
    """Prompt lines that pin a locked archetype's slide count and kinds."""
    if editing:
        return (
            f"LOCKED MODE (STRICT): Keep the deck at EXACTLY {rule.slide_count} slides. "
            "Do NOT merge, split, add, or remove slides. Only rewrite the messaging."
        )
    return (
        f"LOCKED MODE (STRICT): Output EXACTLY {rule.slide_count} slides, in this exact order, "
        f"with these slide.kind values: {', '.join(rule.kind_sequence)}. "
        "Do NOT add or remove slides. Do NOT rename kinds. "
        "Each slide.section should match the human-friendly page name."
    )


class DeckAssembler(PlanningStage):
    """Assembles a draft deck from the upstream plans."""

    STAGE = "assemble"
    TEMPERATURE_SETTING = "ASSEMBLE_TEMPERATURE"

    def build_system_prompt(
        self,
        facts: BriefFacts,
        options: PlanningOptions,
        locked_rule: Optional[StructuralLockRule] = None
    ) -> str:
        vibe, audience, language = resolve_prompt_context(options, facts)
        voice = self.voice_rules(options)
        requested = options.requested_deck_type

        deck_type_line = (
            f"Requested deck type: {requested} (respect unless clearly wrong)."
            if requested else "Deck type: infer from extracted brief."
        )
        slides_line = (
            f"Target slides: {options.n_slides} (soft target; keep structure coherent)."
            if options.n_slides else "Choose 5-18 slides as needed."
        )
        locked_line = f"\n- {locked_mode_rules(locked_rule)}" if locked_rule else ""

        return f"""You are a senior creative director and presentation architect.

## TASK
Assemble a coherent slide-by-slide plan from the extracted brief JSON (facts), the narrative_plan (journey) and the messaging_map (copy constraints). Output MUST follow the JSON schema strictly.

## CRITICAL
- Follow narrative_plan.sections in order. Do not shuffle beats. Do not introduce new topics late.
- Use narrative_plan.lexicon.prefer_terms and avoid narrative_plan.lexicon.avoid_terms to keep terminology consistent.
- Fill slide.section, slide.setup_line, slide.takeaway and slide.bridge_line to create smooth continuity.{locked_line}

## LAYOUTS
- Prefer the business layouts when appropriate: {BUSINESS_LAYOUTS}.
- Use slide.kind for semantics (cover, agenda, problem, solution, kpi dashboard, roadmap, status, pricing, cta, etc.).
- Make slide variety: alternate layouts, include at least one data-style slide when relevant.
- If layout is "two_column": output EXACTLY 8 bullets; bullets[0..3] are KEY POINTS (8-12 words), bullets[4..7] are MORE DETAIL (12-20 words with a concrete example, mechanism, or implication).
- For list-heavy layouts (process_steps, timeline, cards, kpi_dashboard, traffic_light), every item must include an insight sentence, not just a label.

## COPY
- Avoid filler. Make it crisp and executive-ready.
- Bullets must carry meaning: 8-18 words each, specific, adding new information.
- Never output empty bullets or placeholder bullets like "TBD"; use speaker_notes for unknowns.
- Write headlines as declarative claims that advance the story (not labels). Each slide must support its section's key_message.
- Introduce a core phrase once, then echo it later as a callback without becoming repetitive.
- If data is missing, use safe placeholders and explain missing inputs in speaker_notes.

## VOICE
Voice profile: {voice.name}. {voice.tagline}
Headline rules: {' '.join(voice.headline_rules)}
Subhead rules: {' '.join(voice.subhead_rules)}
Section rules: {' '.join(voice.section_rules)}
Diction rules: {' '.join(voice.diction_rules)}

## IMAGES
Image prompts: visually specific, no logos, no copyrighted characters, NEVER ask for text/words in images. For data/table slides, you may set image_prompt to "NONE".

## CONTEXT
{deck_type_line}
{slides_line}
Language: {language}. Audience: {audience}. Vibe: {vibe}."""

    async def assemble(
        self,
        facts: BriefFacts,
        outline: Optional[ExplicitOutlineSignal],
        narrative: NarrativePlan,
        messaging: MessagingMap,
        options: PlanningOptions,
        locked_rule: Optional[StructuralLockRule] = None
    ) -> DeckDraft:
        """
        Assemble the draft deck.

        Raises:
            GenerationFailure: Model call failed or returned an invalid payload
        """
        draft = await self._generate(
            self.build_system_prompt(facts, options, locked_rule),
            {
                "facts": facts,
                "outline": outline,
                "narrative": narrative,
                "messaging": messaging,
            },
        )
        logger.info(f"Draft assembled: '{draft.deck_title}', {len(draft.slides)} slides")
        return draft

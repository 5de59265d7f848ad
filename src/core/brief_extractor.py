"""
Brief Extractor for BriefDeck

First generation stage: turns a messy brief into BriefFacts, the single
source of truth every later stage reads.
"""

from src.models.brief import BriefFacts, DeckType
from src.models.options import PlanningOptions
from src.core.planning_stage import PlanningStage, resolve_prompt_context
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class BriefExtractor(PlanningStage):
    """Extracts structured facts from raw brief text."""

    STAGE = "extract"
    TEMPERATURE_SETTING = "EXTRACT_TEMPERATURE"

    def build_system_prompt(self, options: PlanningOptions) -> str:
        vibe, audience, language = resolve_prompt_context(options)
        return f"""You are a senior strategist. Extract structured facts from a messy brief so another model can build a deck.

## RULES
- Be faithful to the brief. Do NOT invent specific numbers, dates, names, or claims.
- Leave unknown fields empty and list the open questions in missing_info.
- Keep text short and usable.
- Output MUST match the JSON schema strictly.

## CONTEXT
Language: {language}. Audience: {audience}. Desired vibe: {vibe}."""

    async def extract(self, brief_text: str, options: PlanningOptions) -> BriefFacts:
        """
        Extract facts from a brief.

        Raises:
            GenerationFailure: Model call failed or returned an invalid payload
        """
        facts = await self._generate(self.build_system_prompt(options), {"brief_text": brief_text})
        logger.info(
            f"Extracted brief facts: type={DeckType(facts.deck_type_suggestion).value}, "
            f"title='{facts.title}', {len(facts.missing_info)} open questions"
        )
        return facts

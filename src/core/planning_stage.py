"""
Planning Stage Base for BriefDeck

Shared plumbing for the model-backed stages (extract, narrative,
messaging, assemble, edit): prompt context resolution, voice rules,
and one structured generation call per run.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel

from config.settings import get_settings
from src.models.brief import BriefFacts
from src.models.catalog import PlanningCatalog, VoiceRules
from src.models.narrative import VoiceProfile
from src.models.options import PlanningOptions
from src.core.planning_catalog import get_planning_catalog
from src.services.generation_service import GenerationService
from src.utils.context_builder import ContextBuilder
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

_VOICE_PROFILES = {profile.value for profile in VoiceProfile}


def resolve_voice_profile(options: PlanningOptions) -> str:
    """Requested voice profile if known, else the configured default."""
    raw = (options.voice_profile or "").strip().lower()
    return raw if raw in _VOICE_PROFILES else get_settings().DEFAULT_VOICE_PROFILE


def resolve_prompt_context(
    options: PlanningOptions,
    facts: Optional[BriefFacts] = None
) -> Tuple[str, str, str]:
    """(vibe, audience, language): request options first, then extracted facts, then defaults."""
    vibe = options.vibe or (facts.vibe if facts else "") or "Modern, premium"
    audience = options.audience or (facts.audience if facts else "") or "general"
    language = options.language or (facts.language if facts else "") or "English"
    return vibe[:120], audience[:120], language[:80]


class PlanningStage:
    """
    Base class for one generation stage.

    Subclasses set STAGE and TEMPERATURE_SETTING and build their own
    system prompt; the user prompt always comes from the ContextBuilder.
    """

    STAGE = ""
    TEMPERATURE_SETTING = ""

    def __init__(
        self,
        generation_service: GenerationService,
        catalog: Optional[PlanningCatalog] = None,
        context_builder: Optional[ContextBuilder] = None
    ):
        self.generation_service = generation_service
        self.catalog = catalog or get_planning_catalog()
        self.context_builder = context_builder or ContextBuilder()
        self.temperature = getattr(get_settings(), self.TEMPERATURE_SETTING)

    def voice_rules(self, options: PlanningOptions) -> VoiceRules:
        return self.catalog.get_voice(
            resolve_voice_profile(options),
            default=get_settings().DEFAULT_VOICE_PROFILE
        )

    async def _generate(self, system_prompt: str, pipeline_data: Dict[str, Any]) -> BaseModel:
        user_prompt = self.context_builder.build_user_prompt(self.STAGE, pipeline_data)
        logger.debug(
            f"Stage '{self.STAGE}' prompt size: "
            f"~{self.context_builder.estimate_tokens(system_prompt + user_prompt)} tokens"
        )
        return await self.generation_service.generate_structured(
            stage=self.STAGE,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=self.temperature,
        )

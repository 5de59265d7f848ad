"""
Concept-Quality Gate for BriefDeck

Checks the creative concept slide of a locked agency deck and, when its
headline reads like a label instead of a campaign line, asks the model
once for a better one. Only that slide's title, subtitle and bullets
can change; deck structure is never touched.

The weak-line classifier is deterministic and has final say over the
model's "keep existing" answer. A replacement that is still weak is
accepted as-is (best effort, no loop).
"""

from typing import Any, Dict, Iterable, Mapping, Optional, Set
import copy
import re

from config.settings import get_settings
from src.models.brief import BriefFacts, ExplicitOutlineSignal
from src.models.catalog import StructuralLockRule
from src.models.deck import ConceptRefinement
from src.models.narrative import MessagingMap, NarrativePlan
from src.models.options import PlanningOptions
from src.services.generation_service import GenerationService
from src.utils.context_builder import ContextBuilder
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

MAX_CONCEPT_WORDS = 12
SHORT_LINE_WORDS = 6

_CAMPAIGN = re.compile(r"\bcampaign\b", re.IGNORECASE)
_OUT_OF_HOME = re.compile(r"\b(out of home|ooh)\b", re.IGNORECASE)
_WORD_CAMPAIGN_PREFIX = re.compile(r"^\s*\w+\s+campaign\b", re.IGNORECASE)
_WORD_SEPARATORS = re.compile(r"[.·•]")


def brief_keywords(brief_text: str, whitelist: Iterable[str]) -> Set[str]:
    """
    Whitelisted terms present in the brief.

    Multi-word entries are reduced to their first token ("out of home" -> "out").
    """
    text = (brief_text or "").lower()
    return {term.split(" ")[0] for term in whitelist if term and term.lower() in text}


def is_weak_line(line: str, brief_text: str = "", whitelist: Iterable[str] = ()) -> bool:
    """
    Decide whether a concept line reads as generic.

    Weak when the line is empty, or:
    - contains a colon (label style, e.g. "Campaign: Louder Together")
    - names a campaign format ("... campaign ... out of home", "Radio Campaign ...")
    - is a list of three or more items sharing a first letter
    - runs past 12 words
    - is short (6 words or fewer) and shares no keyword with the brief;
      skipped when the brief contains none of the whitelisted keywords
    """
    s = (line or "").strip()
    if not s:
        return True

    if ":" in s:
        return True

    if _CAMPAIGN.search(s) and _OUT_OF_HOME.search(s):
        return True
    if _WORD_CAMPAIGN_PREFIX.search(s):
        return True

    parts = [p.strip() for p in s.split(",") if p.strip()]
    if len(parts) >= 3:
        first = parts[0][0].lower()
        if all(p[0].lower() == first for p in parts):
            return True

    words = _WORD_SEPARATORS.sub(" ", s).split()
    if len(words) > MAX_CONCEPT_WORDS:
        return True

    keywords = brief_keywords(brief_text, whitelist)
    if keywords and len(words) <= SHORT_LINE_WORDS:
        normalized = s.lower()
        if not any(k in normalized for k in keywords):
            return True

    return False


def find_concept_slide(plan: Mapping[str, Any], rule: StructuralLockRule) -> Optional[int]:
    """Index of the first slide whose kind is a concept kind, if any."""
    for idx, slide in enumerate(plan.get("slides") or []):
        if isinstance(slide, Mapping) and rule.is_concept_kind(str(slide.get("kind") or "")):
            return idx
    return None


def apply_refinement(
    slide: Mapping[str, Any],
    refinement: ConceptRefinement,
    needs_help: bool,
    brief_text: str,
    whitelist: Iterable[str]
) -> Dict[str, Any]:
    """Patch a concept slide with a refinement, keeping every other field."""
    current = str(slide.get("title") or "")
    concept_line = refinement.concept_line.strip()

    final_line = current if (refinement.keep_existing and not needs_help) else concept_line
    if is_weak_line(final_line, brief_text, whitelist):
        final_line = concept_line or current

    proof_points = [p for p in refinement.proof_points if p]
    patched = copy.deepcopy(dict(slide))
    patched["title"] = final_line or current or "Big idea"
    patched["subtitle"] = refinement.supporting_line or str(slide.get("subtitle") or "")
    patched["bullets"] = proof_points or list(slide.get("bullets") or [])
    return patched


class ConceptQualityGate:
    """
    Rewrites a weak creative concept headline with one generation call.

    Runs only for locked agency decks.
    """

    SYSTEM_PROMPT = """You are an award-winning creative director. You write REAL campaign platform lines, not labels.

## TASK
Refine ONLY the Creative Concept slide in an agency deck. Output JSON must match the provided schema exactly.

## HARD RULES FOR concept_line
- A single campaign platform line (2-8 words preferred; 12 max)
- Punctuation such as "X. Y." is welcome if it helps memorability
- NO colon anywhere. NO "Campaign:" prefixes. NO alliteration lists (e.g. "Vivid, Vibrant, Victorious")
- Clearly on-brief: echo the core tension and promise of the brief
- Do not invent facts, numbers, results, partners, or dates

If the current concept line is already excellent AND tightly on-brief, set keep_existing=true and repeat it verbatim.

Language: {language}."""

    def __init__(
        self,
        generation_service: GenerationService,
        rule: StructuralLockRule,
        context_builder: Optional[ContextBuilder] = None
    ):
        self.generation_service = generation_service
        self.rule = rule
        self.context_builder = context_builder or ContextBuilder()
        self.temperature = get_settings().CONCEPT_TEMPERATURE

    async def refine(
        self,
        plan: Dict[str, Any],
        brief_text: str,
        facts: BriefFacts,
        outline: ExplicitOutlineSignal,
        narrative: Optional[NarrativePlan],
        messaging: Optional[MessagingMap],
        options: PlanningOptions
    ) -> Dict[str, Any]:
        """
        Return the plan with its concept slide refined, or unchanged.

        Raises:
            GenerationFailure: The refinement call failed
        """
        idx = find_concept_slide(plan, self.rule)
        if idx is None:
            logger.info("No concept slide found; concept gate skipped")
            return plan

        slide = plan["slides"][idx]
        current = str(slide.get("title") or "")
        whitelist = self.rule.concept_keywords
        needs_help = is_weak_line(current, brief_text, whitelist)

        if not needs_help:
            logger.info(f"Concept line accepted: '{current}'")
            return plan

        logger.info(f"Concept line '{current}' is weak; requesting refinement")
        user_prompt = self.context_builder.build_user_prompt("concept", {
            "brief_text": brief_text,
            "facts": facts,
            "outline": outline,
            "narrative": narrative,
            "messaging": messaging,
            "concept_slide": slide,
        })
        refinement = await self.generation_service.generate_structured(
            stage="concept",
            system_prompt=self.SYSTEM_PROMPT.format(language=options.language or facts.language or "English"),
            user_prompt=user_prompt,
            temperature=self.temperature,
        )

        patched = apply_refinement(slide, refinement, needs_help, brief_text, whitelist)
        if is_weak_line(patched["title"], brief_text, whitelist):
            logger.warning(f"Refined concept line '{patched['title']}' is still weak; accepted best-effort")
        else:
            logger.info(f"Concept line refined to '{patched['title']}'")

        slides = list(plan["slides"])
        slides[idx] = patched
        return {**plan, "slides": slides}

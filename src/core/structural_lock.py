"""
Structural Lock for BriefDeck

Forces decks of a locked archetype (e.g. ad_agency) into a fixed slide
sequence, whatever the generation stages produced:
- lock_narrative: replaces the narrative sections with the rule's beats
- lock_deck_plan: maps draft slides onto the beats, synthesizing any
  beat the draft missed

Matching is injective and first-match: each beat consumes the first
unused draft slide whose kind is one of the beat's aliases. Matched
slides keep their authored content; only kind and section are forced.

Both functions return new objects and never mutate their inputs.
"""

from typing import Any, Dict, List, Mapping, Optional, Union
import copy

from pydantic import BaseModel

from src.models.brief import BriefFacts, DeckType
from src.models.catalog import PlanningCatalog, StructuralLockRule
from src.models.deck import Slide, SlideLayout
from src.models.narrative import NarrativePlan, NarrativeSection
from src.models.options import PlanningOptions
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

_VALID_LAYOUTS = {layout.value for layout in SlideLayout}
_SLIDE_FIELDS = tuple(Slide.model_fields)

FactsLike = Union[BriefFacts, Mapping[str, Any], None]


def _fact(facts: FactsLike, key: str) -> str:
    if facts is None:
        return ""
    value = getattr(facts, key, None) if isinstance(facts, BaseModel) else facts.get(key)
    if isinstance(value, DeckType):
        return value.value
    return _text(value)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def resolve_lock_rule(
    catalog: PlanningCatalog,
    facts: FactsLike,
    options: PlanningOptions,
    lock_on_suggestion: bool = True
) -> Optional[StructuralLockRule]:
    """
    Find the lock rule that applies to this request, if any.

    The requested deck type wins; otherwise, when lock_on_suggestion is
    set, the extraction's deck type suggestion can also trigger a lock.
    """
    requested = catalog.get_lock_rule(options.requested_deck_type)
    if requested is not None:
        return requested
    for rule in catalog.locks:
        if should_lock(facts, options, rule, lock_on_suggestion):
            return rule
    return None


def should_lock(
    facts: FactsLike,
    options: PlanningOptions,
    rule: StructuralLockRule,
    lock_on_suggestion: bool = True
) -> bool:
    """True when the request asked for, or extraction suggested, the rule's deck type."""
    if options.requested_deck_type == rule.deck_type:
        return True
    suggested = _fact(facts, "deck_type_suggestion").strip().lower()
    return lock_on_suggestion and suggested == rule.deck_type


def lock_narrative(
    narrative: NarrativePlan,
    facts: FactsLike,
    rule: StructuralLockRule
) -> NarrativePlan:
    """Replace the narrative's sections with exactly the rule's beats, in order."""
    thesis = (
        narrative.thesis
        or _fact(facts, "objective")
        or _fact(facts, "title")
        or rule.default_thesis
    )[:220]

    last = rule.slide_count - 1
    sections = [
        NarrativeSection(
            id=beat.id,
            name=beat.display_name,
            goal=f"Deliver {beat.display_name.lower()} with one clear idea.",
            key_message="",
            must_include=[],
            slide_kinds=list(beat.aliases),
            transition_to_next="" if idx == last else rule.section_transition,
        )
        for idx, beat in enumerate(rule.required_kind_sequence)
    ]

    logger.info(f"Narrative locked to recipe '{rule.recipe_name}' ({len(sections)} sections)")
    return narrative.model_copy(update={
        "deck_type": DeckType(rule.deck_type),
        "recipe_name": rule.recipe_name,
        "thesis": thesis,
        "sections": sections,
    })


def _blank_slide() -> Dict[str, Any]:
    return Slide().model_dump(mode="json")


def lock_deck_plan(
    plan: Union[BaseModel, Mapping[str, Any]],
    facts: FactsLike,
    rule: StructuralLockRule,
    options: Optional[PlanningOptions] = None
) -> Dict[str, Any]:
    """
    Map a draft deck onto the rule's required slide sequence.

    Args:
        plan: Draft deck (model or dict)
        facts: Extracted brief facts (model or dict), used for title defaults
        rule: The structural lock rule
        options: Request options (deck_style selects typographic layouts)

    Returns:
        New deck dict with exactly one slide per required beat

    Raises:
        StructuralLockViolation: Output shape is wrong (logic defect)
    """
    options = options or PlanningOptions()
    source = plan.model_dump(mode="json", by_alias=True) if isinstance(plan, BaseModel) else dict(plan or {})
    typographic = (options.deck_style or "").strip().lower() == rule.typographic_style

    deck_title = (_text(source.get("deck_title")) or _fact(facts, "title") or rule.default_title)[:120]
    deck_subtitle = (_text(source.get("deck_subtitle")) or _fact(facts, "subtitle") or "")[:140]

    raw_slides = source.get("slides")
    drafts = [s for s in raw_slides if isinstance(s, Mapping)] if isinstance(raw_slides, list) else []
    used = set()

    def take_first_match(beat) -> Optional[Mapping[str, Any]]:
        for i, draft in enumerate(drafts):
            if i in used:
                continue
            kind = draft.get("kind")
            if isinstance(kind, str) and beat.matches(kind):
                used.add(i)
                return draft
        return None

    last = rule.slide_count - 1
    slides: List[Dict[str, Any]] = []

    for idx, beat in enumerate(rule.required_kind_sequence):
        match = take_first_match(beat)
        defaults = rule.defaults_for(beat.kind)
        slide = _blank_slide()

        if match is not None:
            for field in _SLIDE_FIELDS:
                if field in match:
                    slide[field] = copy.deepcopy(match[field])
            if slide.get("comparison_matrix") is None and isinstance(match.get("matrix"), Mapping):
                slide["comparison_matrix"] = copy.deepcopy(match["matrix"])

        is_title = idx == 0
        layout = match.get("layout") if match is not None else None
        if not isinstance(layout, str) or layout not in _VALID_LAYOUTS:
            layout = rule.layout_for(beat.kind, typographic)

        slide["kind"] = beat.kind
        slide["section"] = beat.display_name
        slide["layout"] = layout
        slide["title"] = _text((match or {}).get("title")) or (deck_title if is_title else beat.display_name)
        slide["subtitle"] = _text((match or {}).get("subtitle")) or (deck_subtitle if is_title else "")
        slide["bullets"] = list(slide["bullets"]) if isinstance(slide.get("bullets"), list) else []
        image_prompt = (match or {}).get("image_prompt")
        slide["image_prompt"] = image_prompt if isinstance(image_prompt, str) else defaults.image_prompt
        slide["speaker_notes"] = _text((match or {}).get("speaker_notes")) or ""
        slide["setup_line"] = _text((match or {}).get("setup_line")) or ""
        slide["takeaway"] = _text((match or {}).get("takeaway")) or ""
        slide["bridge_line"] = _text((match or {}).get("bridge_line")) or ("" if idx == last else rule.bridge_line)

        if defaults.subtitle and not slide["subtitle"]:
            slide["subtitle"] = defaults.subtitle
        if defaults.max_bullets is not None:
            slide["bullets"] = slide["bullets"][:defaults.max_bullets]

        # Typographic decks stay sparse: big type, short subhead, few support lines
        if typographic:
            slide["bullets"] = slide["bullets"][:rule.typographic_bullet_cap(beat.kind)]

        slides.append(slide)

    logger.info(
        f"Deck locked to '{rule.recipe_name}': {len(used)}/{rule.slide_count} beats matched "
        f"from {len(drafts)} draft slides"
    )

    locked = dict(source)
    locked.update({
        "deck_type": rule.deck_type,
        "deck_title": deck_title,
        "deck_subtitle": deck_subtitle,
        "recommended_slide_count": rule.slide_count,
        "slides": slides,
    })
    _verify_locked(locked, rule)
    return locked


def _verify_locked(plan: Mapping[str, Any], rule: StructuralLockRule) -> None:
    kinds = [s.get("kind") for s in plan.get("slides", [])]
    if kinds != rule.kind_sequence:
        raise StructuralLockViolation(
            f"Locked deck has kinds {kinds}, expected {rule.kind_sequence}"
        )


class StructuralLockViolation(Exception):
    """Raised when a locked deck does not have the required shape. Indicates a logic defect."""
    pass

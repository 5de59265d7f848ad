"""
Normalization / Repair Pass for BriefDeck

Turns any deck-like input into a renderer-safe DeckPlan:
- every string and list truncated to renderer limits
- invalid enums replaced with safe defaults
- layout repaired from the slide kind, or a positional default
- content blocks the layout does not render set to null
- slide count forced into [5, 30] (or the locked archetype's length)

normalize_plan never raises on malformed input and is idempotent:
normalizing its own output returns the same plan.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from enum import Enum
import math

from pydantic import BaseModel, ValidationError

from config.settings import get_settings
from src.models.brief import DeckType
from src.models.catalog import PlanningCatalog
from src.models.deck import (
    DeckPlan,
    SlideLayout,
    Theme,
    DATA_LAYOUTS,
    CONTENT_BLOCK_FIELDS,
    blocks_for_layout
)
from src.models.options import PlanningOptions
from src.core.planning_catalog import get_planning_catalog
from src.core.structural_lock import lock_deck_plan, resolve_lock_rule
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_IMAGE_PROMPT = "Abstract premium background related to the slide topic"
QUOTE_IMAGE_PROMPT = "Abstract premium background, subtle texture, no text"
DEFAULT_QUOTE = "A single, memorable idea beats a dozen scattered messages."

_VALID_LAYOUTS = {layout.value for layout in SlideLayout}
_DECK_TYPES = {deck_type.value for deck_type in DeckType}
_STATUSES = ("red", "yellow", "green")

# (substrings, layout), checked in order; first hit wins
_KIND_LAYOUT_RULES = (
    (("cover",), SlideLayout.HERO),
    (("agenda",), SlideLayout.AGENDA),
    (("section",), SlideLayout.SECTION_HEADER),
    (("timeline", "roadmap"), SlideLayout.TIMELINE),
    (("swot",), SlideLayout.SWOT),
    (("funnel",), SlideLayout.FUNNEL),
    (None, SlideLayout.NOW_NEXT_LATER),
    (("okr",), SlideLayout.OKR),
    (("case study", "casestudy"), SlideLayout.CASE_STUDY),
    (("chart", "trend"), SlideLayout.CHART_LINE),
    (("diagram", "flow"), SlideLayout.PROCESS_STEPS),
    (("org",), SlideLayout.ORG_CHART),
    (("faq", "q&a"), SlideLayout.FAQ),
    (("kpi", "metrics", "dashboard"), SlideLayout.KPI_DASHBOARD),
    (("status", "ryg", "traffic"), SlideLayout.TRAFFIC_LIGHT),
    (("pricing", "package"), SlideLayout.PRICING),
    (("comparison", "matrix"), SlideLayout.COMPARISON_MATRIX),
    (("process", "steps"), SlideLayout.PROCESS_STEPS),
    (("team",), SlideLayout.TEAM_GRID),
    (("clients", "logos"), SlideLayout.LOGO_WALL),
    (("pillar", "infographic"), SlideLayout.INFOGRAPHIC_3),
    (("cta", "next steps", "contact"), SlideLayout.CTA),
)


def infer_layout_from_kind(kind: str) -> Optional[str]:
    """
    Map a free-text slide kind to a layout by keyword.

    >>> infer_layout_from_kind("Q3 KPI Dashboard")
    'kpi_dashboard'
    >>> infer_layout_from_kind("Client Logos")
    'logo_wall'
    """
    k = (kind or "").lower()
    for needles, layout in _KIND_LAYOUT_RULES:
        if needles is None:
            if "now" in k and "next" in k and "later" in k:
                return layout.value
        elif any(needle in k for needle in needles):
            return layout.value
    return None


# ============================================================================
# SCALAR HELPERS
# ============================================================================

def _text(value: Any, limit: int) -> str:
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        value = "true" if value else "false"
    return str(value)[:limit]


def _text_list(value: Any, max_items: int, limit: int) -> List[str]:
    if not isinstance(value, list):
        return []
    return [t for t in (_text(v, limit) for v in value[:max_items]) if t]


def _dict_list(value: Any, max_items: int, item: Callable[[Mapping[str, Any]], Dict[str, Any]]) -> Optional[List[Dict[str, Any]]]:
    if not isinstance(value, list):
        return None
    return [item(v) for v in value[:max_items] if isinstance(v, Mapping)]


def _mapping(value: Any) -> Optional[Mapping[str, Any]]:
    return value if isinstance(value, Mapping) else None


def _clamp_int(value: Any, lo: int, hi: int, fallback: int) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = float(fallback)
    if not math.isfinite(number):
        number = float(fallback)
    return max(lo, min(hi, int(math.floor(number))))


def _finite(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


# ============================================================================
# BLOCK SANITIZERS
# ============================================================================

def _stat(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"value": _text(v.get("value"), 40), "label": _text(v.get("label"), 80)}


def _quote(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"text": _text(v.get("text"), 260), "attribution": _text(v.get("attribution"), 80)}


def _card(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"title": _text(v.get("title"), 80), "body": _text(v.get("body"), 220), "tag": _text(v.get("tag"), 40)}


def _timeline_item(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "date_or_phase": _text(v.get("date_or_phase"), 40),
        "label": _text(v.get("label"), 80),
        "detail": _text(v.get("detail"), 140),
    }


def _kpi(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"label": _text(v.get("label"), 60), "value": _text(v.get("value"), 40), "delta": _text(v.get("delta"), 30)}


def _status_item(v: Mapping[str, Any]) -> Dict[str, Any]:
    status = _text(v.get("status"), 10).lower()
    return {
        "item": _text(v.get("item"), 90),
        "status": status if status in _STATUSES else "yellow",
        "owner": _text(v.get("owner"), 40),
        "eta": _text(v.get("eta"), 30),
        "blocker": _text(v.get("blocker"), 120),
    }


def _table(v: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    headers, rows = v.get("headers"), v.get("rows")
    if not isinstance(headers, list) or not isinstance(rows, list):
        return None
    clean_rows = [
        [_text(cell, 40) for cell in row[:6]]
        for row in rows[:12]
        if isinstance(row, list)
    ]
    return {
        "headers": [_text(h, 40) for h in headers[:6]],
        "rows": [row for row in clean_rows if len(row) >= 2],
    }


def _pricing_plan(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "name": _text(v.get("name"), 60),
        "price": _text(v.get("price"), 40),
        "period": _text(v.get("period"), 30),
        "bullets": _text_list(v.get("bullets"), 8, 120),
        "highlight": v.get("highlight") is True,
    }


def _pricing(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "currency": _text(v.get("currency"), 10),
        "plans": _dict_list(v.get("plans"), 4, _pricing_plan) or [],
        "notes": _text(v.get("notes"), 240),
    }


def _matrix(v: Mapping[str, Any]) -> Dict[str, Any]:
    cells = v.get("cells") if isinstance(v.get("cells"), list) else []
    return {
        "x_labels": _text_list(v.get("x_labels"), 6, 40),
        "y_labels": _text_list(v.get("y_labels"), 8, 40),
        "cells": [[_text(c, 80) for c in row[:6]] for row in cells[:8] if isinstance(row, list)],
    }


def _step(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"title": _text(v.get("title"), 70), "detail": _text(v.get("detail"), 160)}


def _person(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"name": _text(v.get("name"), 60), "role": _text(v.get("role"), 60), "bio": _text(v.get("bio"), 200)}


def _cta(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "headline": _text(v.get("headline"), 120),
        "primary_action": _text(v.get("primary_action"), 80),
        "secondary_action": _text(v.get("secondary_action"), 80),
    }


def _swot(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: _text_list(v.get(key), 8, 160) for key in ("strengths", "weaknesses", "opportunities", "threats")}


def _funnel_stage(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"label": _text(v.get("label"), 60), "value": _text(v.get("value"), 40)}


def _now_next_later(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: _text_list(v.get(key), 8, 120) for key in ("now", "next", "later")}


def _okr(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"objective": _text(v.get("objective"), 120), "key_results": _text_list(v.get("key_results"), 6, 160)}


def _case_study(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "client": _text(v.get("client"), 80),
        "challenge": _text(v.get("challenge"), 240),
        "approach": _text_list(v.get("approach"), 8, 160),
        "results": _text_list(v.get("results"), 8, 160),
    }


def _diagram(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"code": _text(v.get("code"), 4000), "theme": _text(v.get("theme"), 40)}


def _icon(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"name": _text(v.get("name"), 120), "label": _text(v.get("label"), 80)}


def _chart(v: Mapping[str, Any], layout: str) -> Dict[str, Any]:
    chart_type = _text(v.get("chart_type"), 20).lower()
    if chart_type not in ("bar", "line"):
        chart_type = "line" if layout == SlideLayout.CHART_LINE.value else "bar"

    labels = v.get("labels") if isinstance(v.get("labels"), list) else []
    values = v.get("values") if isinstance(v.get("values"), list) else []
    # Keep label/value pairs whose value is a finite number
    pairs = [
        (_text(label, 80), number)
        for label, number in ((label, _finite(value)) for label, value in zip(labels[:10], values[:10]))
        if number is not None
    ]
    return {
        "chart_type": chart_type,
        "labels": [label for label, _ in pairs],
        "values": [number for _, number in pairs],
        "value_suffix": _text(v.get("value_suffix"), 20),
    }


def _org_chart(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"head": _text(v.get("head"), 80), "reports": _text_list(v.get("reports"), 8, 80)}


def _faq(v: Mapping[str, Any]) -> Dict[str, Any]:
    return {"q": _text(v.get("q"), 140), "a": _text(v.get("a"), 220)}


def _object(builder: Callable[[Mapping[str, Any]], Any]) -> Callable[[Any, str], Any]:
    def sanitize(value: Any, layout: str) -> Any:
        mapping = _mapping(value)
        return builder(mapping) if mapping is not None else None
    return sanitize


def _items(max_items: int, builder: Callable[[Mapping[str, Any]], Dict[str, Any]]) -> Callable[[Any, str], Any]:
    def sanitize(value: Any, layout: str) -> Any:
        return _dict_list(value, max_items, builder)
    return sanitize


def _strings(max_items: int, limit: int) -> Callable[[Any, str], Any]:
    def sanitize(value: Any, layout: str) -> Any:
        return _text_list(value, max_items, limit) if isinstance(value, list) else None
    return sanitize


def _chart_block(value: Any, layout: str) -> Any:
    mapping = _mapping(value)
    return _chart(mapping, layout) if mapping is not None else None


BLOCK_SANITIZERS: Dict[str, Callable[[Any, str], Any]] = {
    "stat": _object(_stat),
    "quote": _object(_quote),
    "agenda_items": _strings(10, 120),
    "cards": _items(6, _card),
    "timeline_items": _items(12, _timeline_item),
    "kpis": _items(8, _kpi),
    "status_items": _items(12, _status_item),
    "table": _object(_table),
    "pricing": _object(_pricing),
    "comparison_matrix": _object(_matrix),
    "steps": _items(8, _step),
    "people": _items(10, _person),
    "logo_items": _strings(30, 40),
    "cta": _object(_cta),
    "swot": _object(_swot),
    "funnel": _items(7, _funnel_stage),
    "now_next_later": _object(_now_next_later),
    "okrs": _items(5, _okr),
    "case_study": _object(_case_study),
    "diagram": _object(_diagram),
    "icons": _items(6, _icon),
    "chart": _chart_block,
    "org_chart": _object(_org_chart),
    "faq": _items(8, _faq),
}


# ============================================================================
# SLIDES
# ============================================================================

def default_theme() -> Dict[str, Any]:
    return Theme().model_dump()


def default_slide(idx: int) -> Dict[str, Any]:
    """Placeholder slide for position idx (0 is the cover)."""
    slide: Dict[str, Any] = {
        "kind": "cover" if idx == 0 else "content",
        "layout": SlideLayout.HERO.value if idx == 0 else SlideLayout.SPLIT.value,
        "section": "",
        "setup_line": "",
        "takeaway": "",
        "bridge_line": "",
        "title": "Title" if idx == 0 else f"Slide {idx + 1}",
        "subtitle": "",
        "bullets": [],
        "image_prompt": DEFAULT_IMAGE_PROMPT,
        "speaker_notes": "",
    }
    slide.update({field: None for field in CONTENT_BLOCK_FIELDS})
    return slide


def normalize_slide(raw: Any, idx: int) -> Dict[str, Any]:
    """Repair one slide; never raises."""
    s = raw if isinstance(raw, Mapping) else {}
    base = default_slide(idx)

    kind = _text(s.get("kind"), 60) or base["kind"]
    raw_layout = s.get("layout")
    if isinstance(raw_layout, str) and raw_layout in _VALID_LAYOUTS:
        layout = raw_layout
    else:
        layout = infer_layout_from_kind(kind) or base["layout"]

    slide = dict(base)
    slide.update({
        "kind": kind,
        "layout": layout,
        "section": _text(s.get("section"), 120),
        "setup_line": _text(s.get("setup_line"), 240),
        "takeaway": _text(s.get("takeaway"), 240),
        "bridge_line": _text(s.get("bridge_line"), 240),
        "title": _text(s.get("title"), 140) or base["title"],
        "subtitle": _text(s.get("subtitle"), 240),
        "bullets": _text_list(s.get("bullets"), 8, 180),
        "speaker_notes": _text(s.get("speaker_notes"), 1600),
    })

    image_prompt = s.get("image_prompt")
    slide["image_prompt"] = base["image_prompt"] if image_prompt is None else _text(image_prompt, 800)

    rendered = set(blocks_for_layout(layout))
    for field, sanitize in BLOCK_SANITIZERS.items():
        value = s.get(field)
        if field == "comparison_matrix" and value is None:
            value = s.get("matrix")
        slide[field] = sanitize(value, layout) if field in rendered else None

    # Data-heavy layouts get no image unless one was asked for
    if SlideLayout(layout) in DATA_LAYOUTS:
        prompt = slide["image_prompt"].strip()
        if not prompt or prompt.lower() == "none":
            slide["image_prompt"] = "NONE"

    return slide


def _is_quote_anchor(slide: Mapping[str, Any]) -> bool:
    return slide.get("layout") == SlideLayout.QUOTE.value or "quote" in str(slide.get("kind") or "").lower()


def _is_summary_anchor(slide: Mapping[str, Any]) -> bool:
    return slide.get("layout") == SlideLayout.INFOGRAPHIC_3.value or "pillar" in str(slide.get("kind") or "").lower()


def _is_anchor(slide: Mapping[str, Any]) -> bool:
    return _is_quote_anchor(slide) or _is_summary_anchor(slide)


def _is_surplus_anchor(slides: List[Mapping[str, Any]], idx: int) -> bool:
    """True when removing slides[idx] still leaves every anchor type it covers."""
    rest = slides[:idx] + slides[idx + 1:]
    slide = slides[idx]
    if _is_summary_anchor(slide) and not any(_is_summary_anchor(s) for s in rest):
        return False
    if _is_quote_anchor(slide) and not any(_is_quote_anchor(s) for s in rest):
        return False
    return True


def _summary_cards(messaging: Optional[Mapping[str, Any]], extract: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Three cards for the summary anchor: section concepts, then differentiators, then generic."""
    concepts = (messaging or {}).get("section_concepts")
    if isinstance(concepts, list):
        cards = []
        for concept in concepts:
            if not isinstance(concept, Mapping) or not _text(concept.get("concept"), 80):
                continue
            proof = _text_list(concept.get("proof_points"), 1, 220)
            cards.append({
                "title": _text(concept.get("concept"), 80),
                "body": proof[0] if proof else _text(concept.get("required_bridge"), 220),
                "tag": "",
            })
        if len(cards) >= 3:
            return cards[:3]

    differentiators = _text_list((extract or {}).get("differentiators"), 3, 80)
    if len(differentiators) == 3:
        return [{"title": d, "body": "", "tag": ""} for d in differentiators]

    return [
        {"title": "One clear idea", "body": "Every slide builds toward a single message.", "tag": ""},
        {"title": "Proof over promises", "body": "Claims are backed by what the brief can show.", "tag": ""},
        {"title": "A simple next step", "body": "The ask is specific and easy to act on.", "tag": ""},
    ]


def _summary_anchor(messaging: Optional[Mapping[str, Any]], extract: Optional[Mapping[str, Any]], idx: int) -> Dict[str, Any]:
    anchors = _text_list((messaging or {}).get("anchors"), 1, 140)
    slide = default_slide(idx)
    slide.update({
        "kind": "infographic_summary",
        "layout": SlideLayout.INFOGRAPHIC_3.value,
        "title": anchors[0] if anchors else "Three ideas carry the plan.",
        "subtitle": "The strategy in three simple pillars.",
        "cards": _summary_cards(messaging, extract),
        "image_prompt": "NONE",
    })
    return slide


def _quote_anchor(extract: Optional[Mapping[str, Any]], idx: int) -> Dict[str, Any]:
    extract = extract or {}
    text = _text(extract.get("objective"), 260) or _text(extract.get("source_summary"), 260) or DEFAULT_QUOTE
    slide = default_slide(idx)
    slide.update({
        "kind": "quote",
        "layout": SlideLayout.QUOTE.value,
        "title": "Key Thought",
        "quote": {"text": text, "attribution": ""},
        "image_prompt": QUOTE_IMAGE_PROMPT,
    })
    return slide


def _fit_slide_count(slides: List[Dict[str, Any]], target: int) -> List[Dict[str, Any]]:
    """
    Trim from the end, then pad before the final slide.

    Non-anchor slides go first. Surplus anchors go next, but the deck
    always keeps one summary anchor and one quote anchor if it had them.
    """
    slides = list(slides)
    while len(slides) > target:
        removable = [i for i in range(len(slides) - 1, -1, -1) if not _is_anchor(slides[i])]
        if not removable:
            removable = [i for i in range(len(slides) - 1, -1, -1) if _is_surplus_anchor(slides, i)]
        if not removable:
            break
        del slides[removable[0]]
    slides = slides[:target]

    while len(slides) < target:
        position = max(len(slides) - 1, 0) if len(slides) > 1 else len(slides)
        slides.insert(position, default_slide(position))
    return slides


# ============================================================================
# DECK
# ============================================================================

def _as_plan_dict(plan_like: Any) -> Dict[str, Any]:
    if isinstance(plan_like, BaseModel):
        return plan_like.model_dump(mode="json", by_alias=True)
    if isinstance(plan_like, Mapping):
        return dict(plan_like)
    return {}


def _as_options(options: Union[PlanningOptions, Mapping[str, Any], None]) -> PlanningOptions:
    if isinstance(options, PlanningOptions):
        return options
    if isinstance(options, Mapping):
        try:
            return PlanningOptions.model_validate(dict(options))
        except ValidationError as e:
            logger.warning(f"Ignoring invalid planning options: {e.error_count()} errors")
    return PlanningOptions()


def _theme(raw: Any, options: PlanningOptions) -> Dict[str, Any]:
    theme = default_theme()
    raw = raw if isinstance(raw, Mapping) else {}
    for key in ("vibe", "primary_color", "secondary_color", "font_heading", "font_body"):
        value = _text(raw.get(key), 80)
        if value:
            theme[key] = value
    deck_style = _text(raw.get("deck_style"), 40) or _text(options.deck_style, 40)
    theme["deck_style"] = deck_style or None
    return theme


def _unlocked_deck_type(
    plan: Mapping[str, Any],
    options: PlanningOptions,
    extract: Optional[Mapping[str, Any]],
    catalog: PlanningCatalog
) -> str:
    """First valid deck type from plan, options, extraction; locked types are skipped."""
    candidates = (
        plan.get("deck_type"),
        options.deck_type,
        (extract or {}).get("deck_type_suggestion"),
    )
    for candidate in candidates:
        deck_type = _text(candidate, 80).strip().lower()
        if deck_type in _DECK_TYPES and catalog.get_lock_rule(deck_type) is None:
            return deck_type
    return DeckType.OTHER.value


def normalize_plan(
    plan_like: Any,
    options: Union[PlanningOptions, Mapping[str, Any], None] = None,
    catalog: Optional[PlanningCatalog] = None
) -> DeckPlan:
    """
    Repair any deck-like input into a renderer-safe DeckPlan.

    Args:
        plan_like: Dict, DeckDraft/DeckPlan, or anything else
        options: Request options (n_slides, deck_type, deck_style)
                 The lock applies when options.deck_type or
                 _extract.deck_type_suggestion names a locked type
        catalog: Planning catalog; defaults to the shared one

    Returns:
        DeckPlan with 5-30 slides (exactly the lock length for locked types)
    """
    settings = get_settings()
    options = _as_options(options)
    catalog = catalog or get_planning_catalog()
    plan = _as_plan_dict(plan_like)

    extract = _mapping(plan.get("_extract"))
    narrative = _mapping(plan.get("_narrative"))
    messaging = _mapping(plan.get("_messaging"))

    # Only the request or the extraction can lock a deck, never the draft's own label
    rule = resolve_lock_rule(catalog, extract, options, settings.LOCK_ON_SUGGESTED_DECK_TYPE)
    deck_type = rule.deck_type if rule is not None else _unlocked_deck_type(plan, options, extract, catalog)

    if rule is not None:
        plan = lock_deck_plan(plan, extract, rule, options)
        target = rule.slide_count
    else:
        raw_slides = plan.get("slides") if isinstance(plan.get("slides"), list) else []
        target = _clamp_int(
            options.n_slides
            if options.n_slides is not None
            else plan.get("recommended_slide_count")
            if plan.get("recommended_slide_count") is not None
            else len(raw_slides) or settings.DEFAULT_SLIDE_COUNT,
            settings.MIN_SLIDES,
            settings.MAX_SLIDES,
            settings.DEFAULT_SLIDE_COUNT,
        )

    raw_slides = plan.get("slides") if isinstance(plan.get("slides"), list) else []
    slides = [normalize_slide(s, idx) for idx, s in enumerate(raw_slides)]

    if rule is None:
        if not slides:
            slides.append(default_slide(0))
        if not any(_is_summary_anchor(s) for s in slides):
            position = min(2, len(slides))
            slides.insert(position, _summary_anchor(messaging, extract, position))
        if not any(_is_quote_anchor(s) for s in slides):
            position = max(len(slides) - 1, 1)
            slides.insert(position, _quote_anchor(extract, position))

    slides = _fit_slide_count(slides, target)

    recommended = plan.get("recommended_slide_count")
    recommended = target if rule is not None else _clamp_int(
        recommended if recommended is not None else target,
        settings.MIN_SLIDES,
        settings.MAX_SLIDES,
        target,
    )

    theme = _theme(plan.get("theme"), options)
    brand_logo = plan.get("brand_logo") or (_mapping(plan.get("theme")) or {}).get("brand_logo")

    normalized = DeckPlan.model_validate({
        "deck_type": deck_type,
        "deck_title": _text(plan.get("deck_title"), 140) or _text((extract or {}).get("title"), 140) or "Untitled Deck",
        "deck_subtitle": _text(plan.get("deck_subtitle"), 200) or _text((extract or {}).get("subtitle"), 200),
        "recommended_slide_count": recommended,
        "theme": theme,
        "slides": slides,
        "brand_logo": brand_logo if isinstance(brand_logo, str) and brand_logo else None,
        "_extract": dict(extract) if extract is not None else None,
        "_narrative": dict(narrative) if narrative is not None else None,
        "_messaging": dict(messaging) if messaging is not None else None,
    })

    logger.debug(
        f"Normalized deck '{normalized.deck_title}': type={deck_type}, "
        f"{len(normalized.slides)} slides (target {target})"
    )
    return normalized

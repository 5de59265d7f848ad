"""
Deck Models for BriefDeck

Pydantic models for slides, content blocks and whole-deck plans.

Two deck shapes exist:
- DeckDraft: what the assembly and editorial stages return (5-30 slides)
- DeckPlan: the normalized, renderer-ready output, with trace fields

A Slide carries every content block as an optional field. Which block a
renderer reads is decided by the slide layout (see LAYOUT_CONTENT_BLOCKS);
normalization nulls every block the layout does not render.
"""

from typing import Dict, Any, Optional, List, Tuple
from pydantic import BaseModel, Field
from enum import Enum

from .brief import DeckType, TrafficStatus


class SlideLayout(str, Enum):
    """Layouts the rendering service can draw."""
    # Text and image
    HERO = "hero"
    SPLIT = "split"
    FULL_BLEED = "full_bleed"
    QUOTE = "quote"
    STATS = "stats"
    TWO_COLUMN = "two_column"
    IMAGE_CAPTION = "image_caption"
    SECTION_HEADER = "section_header"
    APPENDIX = "appendix"

    # Agency typographic
    AGENCY_CENTER = "agency_center"
    AGENCY_HALF = "agency_half"
    AGENCY_INFOGRAPHIC = "agency_infographic"

    # Business and data
    AGENDA = "agenda"
    CARDS = "cards"
    TIMELINE = "timeline"
    KPI_DASHBOARD = "kpi_dashboard"
    TRAFFIC_LIGHT = "traffic_light"
    TABLE = "table"
    PRICING = "pricing"
    COMPARISON_MATRIX = "comparison_matrix"
    PROCESS_STEPS = "process_steps"
    TEAM_GRID = "team_grid"
    LOGO_WALL = "logo_wall"
    CTA = "cta"
    SWOT = "swot"
    FUNNEL = "funnel"
    NOW_NEXT_LATER = "now_next_later"
    OKR = "okr"
    CASE_STUDY = "case_study"
    CHART_BAR = "chart_bar"
    CHART_LINE = "chart_line"
    ORG_CHART = "org_chart"
    FAQ = "faq"
    INFOGRAPHIC_3 = "infographic_3"


class ChartType(str, Enum):
    BAR = "bar"
    LINE = "line"


class _Block(BaseModel):
    class Config:
        extra = "forbid"


# ============================================================================
# CONTENT BLOCKS
# ============================================================================

class StatBlock(_Block):
    value: str = Field("", description="Headline number")
    label: str = Field("", description="What the number measures")


class QuoteBlock(_Block):
    text: str = Field("", description="Quote text")
    attribution: str = Field("", description="Who said it")


class CardItem(_Block):
    title: str = ""
    body: str = ""
    tag: str = ""


class TimelineItem(_Block):
    date_or_phase: str = ""
    label: str = ""
    detail: str = ""


class KpiItem(_Block):
    label: str = ""
    value: str = ""
    delta: str = ""


class StatusItem(_Block):
    item: str = ""
    status: TrafficStatus = TrafficStatus.YELLOW
    owner: str = ""
    eta: str = ""
    blocker: str = ""


class TableBlock(_Block):
    headers: List[str] = Field(default_factory=list, max_length=6)
    rows: List[List[str]] = Field(default_factory=list, max_length=12)


class PricingPlan(_Block):
    name: str = ""
    price: str = ""
    period: str = ""
    bullets: List[str] = Field(default_factory=list, max_length=8)
    highlight: bool = False


class PricingBlock(_Block):
    currency: str = ""
    plans: List[PricingPlan] = Field(default_factory=list, max_length=4)
    notes: str = ""


class ComparisonMatrix(_Block):
    x_labels: List[str] = Field(default_factory=list, max_length=6)
    y_labels: List[str] = Field(default_factory=list, max_length=8)
    cells: List[List[str]] = Field(default_factory=list, max_length=8)


class StepItem(_Block):
    title: str = ""
    detail: str = ""


class PersonItem(_Block):
    name: str = ""
    role: str = ""
    bio: str = ""


class CtaBlock(_Block):
    headline: str = ""
    primary_action: str = ""
    secondary_action: str = ""


class SwotBlock(_Block):
    strengths: List[str] = Field(default_factory=list, max_length=8)
    weaknesses: List[str] = Field(default_factory=list, max_length=8)
    opportunities: List[str] = Field(default_factory=list, max_length=8)
    threats: List[str] = Field(default_factory=list, max_length=8)


class FunnelStage(_Block):
    label: str = ""
    value: str = ""


class NowNextLater(_Block):
    now: List[str] = Field(default_factory=list, max_length=8)
    next: List[str] = Field(default_factory=list, max_length=8)
    later: List[str] = Field(default_factory=list, max_length=8)


class OkrItem(_Block):
    objective: str = ""
    key_results: List[str] = Field(default_factory=list, max_length=6)


class CaseStudyBlock(_Block):
    client: str = ""
    challenge: str = ""
    approach: List[str] = Field(default_factory=list, max_length=8)
    results: List[str] = Field(default_factory=list, max_length=8)


class DiagramBlock(_Block):
    code: str = Field("", description="Mermaid source")
    theme: str = ""


class IconItem(_Block):
    name: str = Field("", description="Iconify icon name")
    label: str = ""


class ChartBlock(_Block):
    chart_type: ChartType = ChartType.BAR
    labels: List[str] = Field(default_factory=list, max_length=10)
    values: List[float] = Field(default_factory=list, max_length=10)
    value_suffix: str = ""


class OrgChartBlock(_Block):
    head: str = ""
    reports: List[str] = Field(default_factory=list, max_length=8)


class FaqItem(_Block):
    q: str = ""
    a: str = ""


# ============================================================================
# SLIDE
# ============================================================================

class Slide(BaseModel):
    """
    One slide of a deck.

    Narrative glue (setup_line, takeaway, bridge_line) links the slide to
    its neighbours; only the block matching the layout is rendered.
    """
    kind: str = Field("content", description="Semantic role, e.g. cover, problem, kpi_dashboard")
    layout: SlideLayout = Field(SlideLayout.SPLIT)
    section: str = Field("", description="Narrative section this slide belongs to")
    setup_line: str = Field("", description="Why this slide follows the previous one")
    takeaway: str = Field("", description="What the audience should remember")
    bridge_line: str = Field("", description="Tee-up for the next slide")
    title: str = Field("", description="Headline")
    subtitle: str = Field("", description="One-sentence subhead")
    bullets: List[str] = Field(default_factory=list, max_length=8)

    stat: Optional[StatBlock] = None
    quote: Optional[QuoteBlock] = None
    agenda_items: Optional[List[str]] = Field(None, max_length=10)
    cards: Optional[List[CardItem]] = Field(None, max_length=6)
    timeline_items: Optional[List[TimelineItem]] = Field(None, max_length=12)
    kpis: Optional[List[KpiItem]] = Field(None, max_length=8)
    status_items: Optional[List[StatusItem]] = Field(None, max_length=12)
    table: Optional[TableBlock] = None
    pricing: Optional[PricingBlock] = None
    comparison_matrix: Optional[ComparisonMatrix] = None
    steps: Optional[List[StepItem]] = Field(None, max_length=8)
    people: Optional[List[PersonItem]] = Field(None, max_length=10)
    logo_items: Optional[List[str]] = Field(None, max_length=30)
    cta: Optional[CtaBlock] = None
    swot: Optional[SwotBlock] = None
    funnel: Optional[List[FunnelStage]] = Field(None, max_length=7)
    now_next_later: Optional[NowNextLater] = None
    okrs: Optional[List[OkrItem]] = Field(None, max_length=5)
    case_study: Optional[CaseStudyBlock] = None
    diagram: Optional[DiagramBlock] = None
    icons: Optional[List[IconItem]] = Field(None, max_length=6)
    chart: Optional[ChartBlock] = None
    org_chart: Optional[OrgChartBlock] = None
    faq: Optional[List[FaqItem]] = Field(None, max_length=8)

    image_prompt: str = Field(
        "",
        description='Prompt for a supporting visual. "NONE" when no image is needed.'
    )
    speaker_notes: str = Field("", description="What the presenter says")

    class Config:
        extra = "forbid"
        use_enum_values = True

    @property
    def content_block(self) -> Any:
        """Primary content block rendered for this slide's layout, if any."""
        blocks = LAYOUT_CONTENT_BLOCKS.get(SlideLayout(self.layout), ())
        return getattr(self, blocks[0]) if blocks else None


# Layout -> blocks it renders. The first entry is the primary block.
# Layouts not listed render only the text fields.
LAYOUT_CONTENT_BLOCKS: Dict[SlideLayout, Tuple[str, ...]] = {
    SlideLayout.QUOTE: ("quote",),
    SlideLayout.STATS: ("stat",),
    SlideLayout.AGENDA: ("agenda_items",),
    SlideLayout.CARDS: ("cards", "icons"),
    SlideLayout.INFOGRAPHIC_3: ("cards", "icons"),
    SlideLayout.AGENCY_INFOGRAPHIC: ("cards", "icons"),
    SlideLayout.TIMELINE: ("timeline_items",),
    SlideLayout.KPI_DASHBOARD: ("kpis",),
    SlideLayout.TRAFFIC_LIGHT: ("status_items",),
    SlideLayout.TABLE: ("table",),
    SlideLayout.PRICING: ("pricing",),
    SlideLayout.COMPARISON_MATRIX: ("comparison_matrix",),
    SlideLayout.PROCESS_STEPS: ("steps", "diagram"),
    SlideLayout.TEAM_GRID: ("people",),
    SlideLayout.LOGO_WALL: ("logo_items",),
    SlideLayout.CTA: ("cta",),
    SlideLayout.SWOT: ("swot",),
    SlideLayout.FUNNEL: ("funnel",),
    SlideLayout.NOW_NEXT_LATER: ("now_next_later",),
    SlideLayout.OKR: ("okrs",),
    SlideLayout.CASE_STUDY: ("case_study",),
    SlideLayout.CHART_BAR: ("chart",),
    SlideLayout.CHART_LINE: ("chart",),
    SlideLayout.ORG_CHART: ("org_chart",),
    SlideLayout.FAQ: ("faq",),
}

CONTENT_BLOCK_FIELDS: Tuple[str, ...] = (
    "stat", "quote", "agenda_items", "cards", "timeline_items", "kpis",
    "status_items", "table", "pricing", "comparison_matrix", "steps", "people",
    "logo_items", "cta", "swot", "funnel", "now_next_later", "okrs",
    "case_study", "diagram", "icons", "chart", "org_chart", "faq",
)

# Layouts that default to no background image
DATA_LAYOUTS = frozenset({
    SlideLayout.KPI_DASHBOARD, SlideLayout.TRAFFIC_LIGHT, SlideLayout.TABLE,
    SlideLayout.PRICING, SlideLayout.COMPARISON_MATRIX, SlideLayout.PROCESS_STEPS,
    SlideLayout.TEAM_GRID, SlideLayout.LOGO_WALL, SlideLayout.SWOT,
    SlideLayout.FUNNEL, SlideLayout.NOW_NEXT_LATER, SlideLayout.OKR,
    SlideLayout.CHART_BAR, SlideLayout.CHART_LINE, SlideLayout.ORG_CHART,
    SlideLayout.FAQ, SlideLayout.CASE_STUDY, SlideLayout.APPENDIX,
    SlideLayout.INFOGRAPHIC_3,
})


def blocks_for_layout(layout: str) -> Tuple[str, ...]:
    """Blocks a layout renders; empty for text-only or unknown layouts."""
    try:
        return LAYOUT_CONTENT_BLOCKS.get(SlideLayout(layout), ())
    except ValueError:
        return ()


# ============================================================================
# DECK
# ============================================================================

class Theme(BaseModel):
    """Visual theme hints for the renderer."""
    vibe: str = Field("Modern, premium")
    primary_color: str = Field("#0B0F1A")
    secondary_color: str = Field("#2A7FFF")
    font_heading: str = Field("Aptos Display")
    font_body: str = Field("Aptos")
    deck_style: Optional[str] = Field(
        None,
        description="Presentation style, e.g. agency_typographic"
    )

    class Config:
        extra = "forbid"


class DeckDraft(BaseModel):
    """Deck returned by assembly and editing (schema name: deck_plan)."""
    deck_type: DeckType = Field(DeckType.OTHER)
    deck_title: str = Field("", description="Deck title")
    deck_subtitle: str = Field("", description="Deck subtitle")
    recommended_slide_count: int = Field(10, ge=5, le=30)
    theme: Theme = Field(default_factory=Theme)
    slides: List[Slide] = Field(..., min_length=5, max_length=30)

    class Config:
        extra = "forbid"


class DeckPlan(BaseModel):
    """
    Normalized, renderer-ready deck.

    Trace fields carry the upstream stage outputs and serialize under
    their underscored names (_extract, _narrative, _messaging).
    """
    deck_type: DeckType = Field(DeckType.OTHER)
    deck_title: str = Field("Untitled Deck")
    deck_subtitle: str = Field("")
    recommended_slide_count: int = Field(10, ge=5, le=30)
    theme: Theme = Field(default_factory=Theme)
    slides: List[Slide] = Field(default_factory=list, max_length=30)
    brand_logo: Optional[str] = Field(None, description="Logo data URL or link, passed through")

    extract: Optional[Dict[str, Any]] = Field(None, alias="_extract")
    narrative: Optional[Dict[str, Any]] = Field(None, alias="_narrative")
    messaging: Optional[Dict[str, Any]] = Field(None, alias="_messaging")

    class Config:
        populate_by_name = True
        use_enum_values = True

    def to_render_payload(self) -> Dict[str, Any]:
        """Serialize for the rendering service."""
        return self.model_dump(mode="json", by_alias=True)


class ConceptRefinement(BaseModel):
    """Rewrite of the creative concept slide (schema name: agency_concept_refine)."""
    keep_existing: bool = Field(False, description="True if the current line already works")
    concept_line: str = Field(..., description="Campaign line, 3-9 words, no colon")
    supporting_line: str = Field("", description="One sentence that explains the line")
    proof_points: List[str] = Field(..., min_length=3, max_length=4)
    rationale: str = Field("", description="Why the line fits the brief")

    class Config:
        extra = "forbid"

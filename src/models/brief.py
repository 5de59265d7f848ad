"""
Brief Models for BriefDeck

Pydantic models for the facts extracted from a brief and the explicit
outline signal parsed from its raw text.

BriefFacts is the single source of truth for every downstream stage.
It is frozen once created: later stages read it, never edit it.
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from enum import Enum


class DeckType(str, Enum):
    """High-level deck intents the planner can produce."""
    AD_AGENCY = "ad_agency"
    INVESTOR_PITCH = "investor_pitch"
    SALES_DECK = "sales_deck"
    BUSINESS_PROPOSAL = "business_proposal"
    MARKETING_STRATEGY = "marketing_strategy"
    QBR = "qbr"
    PRODUCT_ROADMAP = "product_roadmap"
    COMPANY_PROFILE = "company_profile"
    TRAINING_WORKSHOP = "training_workshop"
    PROJECT_STATUS_UPDATE = "project_status_update"
    KEYNOTE_THOUGHT_LEADERSHIP = "keynote_thought_leadership"
    OTHER = "other"


class TrafficStatus(str, Enum):
    """Red/yellow/green status for project items."""
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"


class _FactModel(BaseModel):
    """Closed, immutable base for extracted facts."""

    class Config:
        extra = "forbid"
        frozen = True


class TimelineFact(_FactModel):
    date_or_phase: str = Field("", description="Date, quarter or phase label")
    label: str = Field("", description="Milestone name")
    detail: str = Field("", description="One-line detail")


class KpiFact(_FactModel):
    label: str = Field("", description="Metric name")
    value: str = Field("", description="Metric value as written in the brief")
    delta: str = Field("", description="Change versus prior period, if stated")


class StatusFact(_FactModel):
    item: str = Field("", description="Workstream or deliverable")
    status: TrafficStatus = Field(TrafficStatus.YELLOW, description="red, yellow or green")
    owner: str = Field("", description="Accountable person or team")
    eta: str = Field("", description="Expected completion")
    blocker: str = Field("", description="Current blocker, if any")


class PricingPlanFact(_FactModel):
    name: str = Field("", description="Plan or package name")
    price: str = Field("", description="Price as written")
    period: str = Field("", description="Billing period")
    bullets: List[str] = Field(default_factory=list, max_length=8)
    highlight: bool = Field(False, description="Recommended plan")


class PricingFact(_FactModel):
    currency: str = Field("", description="ISO currency or symbol")
    plans: List[PricingPlanFact] = Field(default_factory=list, max_length=4)
    notes: str = Field("", description="Terms, discounts, caveats")


class TeamMemberFact(_FactModel):
    name: str = Field("", description="Person name")
    role: str = Field("", description="Role or title")
    bio: str = Field("", description="One-line bio")


class BriefFacts(_FactModel):
    """
    Structured facts extracted from a brief.

    Unknown values stay empty; gaps are listed in missing_info rather
    than invented.
    """
    deck_type_suggestion: DeckType = Field(
        DeckType.OTHER,
        description="Best-fit deck type for this brief"
    )
    title: str = Field("", description="Working deck title")
    subtitle: str = Field("", description="Working deck subtitle")
    audience: str = Field("", description="Who the deck is for")
    language: str = Field("", description="Output language")
    vibe: str = Field("", description="Tone and visual mood")
    objective: str = Field("", description="What the deck must achieve")
    ask_or_cta: str = Field("", description="The ask or call to action")
    constraints: List[str] = Field(default_factory=list, max_length=12)

    problem: str = Field("", description="Problem statement")
    solution: str = Field("", description="Proposed solution")
    product_or_service: str = Field("", description="Product or service being presented")
    differentiators: List[str] = Field(default_factory=list, max_length=10)
    market: str = Field("", description="Market or category")
    business_model: str = Field("", description="How money is made")
    traction_or_proof: List[str] = Field(default_factory=list, max_length=10)
    competition: List[str] = Field(default_factory=list, max_length=8)

    scope: List[str] = Field(default_factory=list, max_length=12)
    deliverables: List[str] = Field(default_factory=list, max_length=12)
    timeline: List[TimelineFact] = Field(default_factory=list, max_length=12)
    risks: List[str] = Field(default_factory=list, max_length=10)
    kpis: List[KpiFact] = Field(default_factory=list, max_length=10)
    status_items: List[StatusFact] = Field(default_factory=list, max_length=12)
    pricing: Optional[PricingFact] = Field(None, description="Pricing, only if stated")
    team: List[TeamMemberFact] = Field(default_factory=list, max_length=10)

    missing_info: List[str] = Field(
        default_factory=list,
        max_length=12,
        description="Questions the brief leaves open"
    )
    source_summary: str = Field("", description="Two or three sentence summary of the brief")


class OutlineEntry(BaseModel):
    """One numbered slide title found in the brief."""
    slide_number: int = Field(..., ge=0, description="Slide number as written")
    title: str = Field(..., description="Slide title as written")


class SlideCountRange(BaseModel):
    """A slide count range hint such as '8-10 slides'."""
    min: int = Field(..., ge=0)
    max: int = Field(..., ge=0)


class ExplicitOutlineSignal(BaseModel):
    """
    Advisory outline parsed from the brief text.

    Rendered into prompts as a backbone suggestion; never enforced.
    """
    entries: List[OutlineEntry] = Field(default_factory=list)
    slide_count_range: Optional[SlideCountRange] = Field(None)

    @property
    def is_empty(self) -> bool:
        return not self.entries and self.slide_count_range is None

    def to_prompt_lines(self) -> List[str]:
        """Render the outline as prompt lines."""
        lines = [f"- Slide {entry.slide_number}: {entry.title}" for entry in self.entries]
        if self.slide_count_range:
            lines.append(
                f"- Requested length: {self.slide_count_range.min}-{self.slide_count_range.max} slides"
            )
        return lines

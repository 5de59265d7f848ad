"""
Narrative Models for BriefDeck

Story-level plans produced before any slide is written:
- NarrativePlan: recipe, thesis, story spine and ordered sections
- MessagingMap: voice, anchor lines and one concept per section
"""

from typing import List
from pydantic import BaseModel, Field
from enum import Enum

from .brief import DeckType


class VoiceProfile(str, Enum):
    """Copywriting voice applied to headlines and bridges."""
    WITTY_AGENCY = "witty_agency"
    CINEMATIC_MINIMAL = "cinematic_minimal"
    CORPORATE_CLEAR = "corporate_clear"
    ACADEMIC_FORMAL = "academic_formal"


class StorySpine(BaseModel):
    """Six-beat story arc behind the deck."""
    setup: str = Field("", description="Where the audience is today")
    tension: str = Field("", description="What is at stake")
    insight: str = Field("", description="The non-obvious realization")
    solution: str = Field("", description="What we propose")
    proof: str = Field("", description="Why it will work")
    action: str = Field("", description="What happens next")

    class Config:
        extra = "forbid"


class Lexicon(BaseModel):
    """Words the deck should and should not use."""
    prefer_terms: List[str] = Field(default_factory=list, max_length=15)
    avoid_terms: List[str] = Field(default_factory=list, max_length=15)

    class Config:
        extra = "forbid"


class NarrativeSection(BaseModel):
    """One beat of the narrative, mapped later to one or more slides."""
    id: str = Field(..., description="Stable section identifier")
    name: str = Field(..., description="Display name")
    goal: str = Field("", description="What this section must achieve")
    key_message: str = Field("", description="One declarative line")
    must_include: List[str] = Field(
        default_factory=list,
        max_length=6,
        description="Facts or open questions that must appear"
    )
    slide_kinds: List[str] = Field(
        default_factory=list,
        max_length=8,
        description="Slide kinds that can carry this section"
    )
    transition_to_next: str = Field("", description="Bridge into the next section")

    class Config:
        extra = "forbid"


class NarrativePlan(BaseModel):
    """Messaging journey for the deck (schema name: narrative_plan)."""
    deck_type: DeckType = Field(DeckType.OTHER)
    recipe_name: str = Field("", description="Recipe from the catalog")
    thesis: str = Field("", description="The deck in one sentence")
    story_spine: StorySpine = Field(default_factory=StorySpine)
    lexicon: Lexicon = Field(default_factory=Lexicon)
    sections: List[NarrativeSection] = Field(..., min_length=4, max_length=10)

    class Config:
        extra = "forbid"


class SectionConcept(BaseModel):
    """The single concept a section introduces."""
    section_id: str = Field(..., description="Matches NarrativeSection.id")
    concept: str = Field("", description="The one new idea")
    proof_points: List[str] = Field(default_factory=list, max_length=4)
    forbidden: List[str] = Field(default_factory=list, max_length=6)
    required_bridge: str = Field("", description="Bridge line into the next section")

    class Config:
        extra = "forbid"


class MessagingMap(BaseModel):
    """Concept and voice constraints for assembly (schema name: messaging_map)."""
    voice_profile: VoiceProfile = Field(VoiceProfile.WITTY_AGENCY)
    anchors: List[str] = Field(
        ...,
        min_length=1,
        max_length=3,
        description="Platform lines repeated verbatim across the deck"
    )
    locked_phrases: List[str] = Field(..., min_length=5, max_length=12)
    section_concepts: List[SectionConcept] = Field(..., min_length=4, max_length=10)
    buzzwords_to_avoid: List[str] = Field(default_factory=list, max_length=20)

    class Config:
        extra = "forbid"

"""
Planning Catalog Models for BriefDeck

Read-only configuration tables loaded from config/planning:
- Recipe: canonical section sequence for a deck type
- VoiceRules: copywriting rules for a voice profile
- StructuralLockRule: the fixed slide sequence for a locked archetype

All models are frozen; one catalog instance is shared by every request.
"""

from typing import Dict, Optional, List
from pydantic import BaseModel, Field


class _CatalogModel(BaseModel):
    class Config:
        extra = "forbid"
        frozen = True


class Recipe(_CatalogModel):
    """A named story template (order of ideas, not visuals)."""
    recipe_name: str = Field(..., description="Unique recipe identifier")
    description: Optional[str] = Field(None)
    section_ids: List[str] = Field(..., min_length=1)

    def to_prompt_line(self) -> str:
        return f"{self.recipe_name}: {' -> '.join(self.section_ids)}"


class VoiceRules(_CatalogModel):
    """Copywriting rules for one voice profile."""
    profile_id: str
    name: str
    tagline: str
    headline_rules: List[str] = Field(default_factory=list)
    subhead_rules: List[str] = Field(default_factory=list)
    section_rules: List[str] = Field(default_factory=list)
    diction_rules: List[str] = Field(default_factory=list)
    forbidden_terms: List[str] = Field(default_factory=list)


class LockedBeat(_CatalogModel):
    """One required position in a locked slide sequence."""
    id: str
    kind: str = Field(..., description="Canonical slide kind")
    display_name: str = Field(..., description="Section name shown on the slide")
    aliases: List[str] = Field(..., min_length=1, description="Draft kinds accepted for this beat")

    def matches(self, kind: str) -> bool:
        return (kind or "").strip().lower() in {alias.lower() for alias in self.aliases}


class KindDefaults(_CatalogModel):
    """Content used when a beat has no matching draft slide."""
    image_prompt: str = ""
    subtitle: str = ""
    max_bullets: Optional[int] = None


class StructuralLockRule(_CatalogModel):
    """
    Fixed slide sequence for a locked deck archetype.

    When the rule applies, the final deck has exactly one slide per
    required beat, in order, whatever the drafts produced.
    """
    deck_type: str
    recipe_name: str
    default_title: str = "Creative Campaign"
    default_thesis: str = ""
    section_transition: str = ""
    bridge_line: str = "Next:"
    typographic_style: str = "agency_typographic"
    required_kind_sequence: List[LockedBeat] = Field(..., min_length=1)
    default_layout_by_kind: Dict[str, str] = Field(default_factory=dict)
    typographic_layout_by_kind: Dict[str, str] = Field(default_factory=dict)
    default_content_by_kind: Dict[str, KindDefaults] = Field(default_factory=dict)
    typographic_max_bullets: Dict[str, int] = Field(default_factory=dict)
    concept_kinds: List[str] = Field(default_factory=list)
    concept_keywords: List[str] = Field(default_factory=list)

    @property
    def slide_count(self) -> int:
        return len(self.required_kind_sequence)

    @property
    def kind_sequence(self) -> List[str]:
        return [beat.kind for beat in self.required_kind_sequence]

    def layout_for(self, kind: str, typographic: bool = False) -> str:
        table = self.typographic_layout_by_kind if typographic else self.default_layout_by_kind
        return table.get(kind, "split")

    def defaults_for(self, kind: str) -> KindDefaults:
        return self.default_content_by_kind.get(kind, KindDefaults())

    def typographic_bullet_cap(self, kind: str) -> int:
        return self.typographic_max_bullets.get(kind, self.typographic_max_bullets.get("*", 2))

    def is_concept_kind(self, kind: str) -> bool:
        return (kind or "").strip().lower() in self.concept_kinds


class PlanningCatalog(_CatalogModel):
    """All planning tables, loaded once."""
    recipes: List[Recipe] = Field(default_factory=list)
    voice_profiles: List[VoiceRules] = Field(default_factory=list)
    locks: List[StructuralLockRule] = Field(default_factory=list)

    @property
    def recipe_names(self) -> List[str]:
        return [recipe.recipe_name for recipe in self.recipes]

    def get_recipe(self, recipe_name: str) -> Optional[Recipe]:
        for recipe in self.recipes:
            if recipe.recipe_name == recipe_name:
                return recipe
        return None

    def get_voice(self, profile_id: Optional[str], default: str = "witty_agency") -> VoiceRules:
        """Voice rules for a profile, falling back to the default profile."""
        by_id = {voice.profile_id: voice for voice in self.voice_profiles}
        voice = by_id.get(profile_id or "") or by_id.get(default)
        if voice is None:
            raise KeyError(f"Voice profile '{default}' missing from catalog")
        return voice

    def get_lock_rule(self, deck_type: Optional[str]) -> Optional[StructuralLockRule]:
        """Lock rule for a deck type, if that type is locked."""
        wanted = (deck_type or "").strip().lower()
        for rule in self.locks:
            if rule.deck_type == wanted:
                return rule
        return None

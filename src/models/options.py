"""
Request options for a single planning run.
"""

from typing import Optional
from pydantic import BaseModel, Field


class PlanningOptions(BaseModel):
    """
    Options for one planning request.

    Accepts both snake_case and the camelCase names used by callers
    (deckType, nSlides, voiceProfile, deckStyle, editorPass, twoPass).
    """
    provider: Optional[str] = Field(None, description="openai or gemini; defaults to settings")
    deck_type: Optional[str] = Field(None, alias="deckType")
    n_slides: Optional[int] = Field(None, alias="nSlides", description="Target slide count")
    vibe: Optional[str] = Field(None)
    audience: Optional[str] = Field(None)
    language: Optional[str] = Field(None)
    voice_profile: Optional[str] = Field(None, alias="voiceProfile")
    deck_style: Optional[str] = Field(None, alias="deckStyle", description="e.g. agency_typographic")
    editor_pass: bool = Field(True, alias="editorPass")
    two_pass: bool = Field(True, alias="twoPass", description="False runs the one-pass legacy planner")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @property
    def requested_deck_type(self) -> str:
        return (self.deck_type or "").strip().lower()

"""
Models Package for BriefDeck

Pydantic models for brief facts, narrative plans, slides and decks,
planning catalog tables and request options.
"""

from .brief import (
    DeckType,
    TrafficStatus,
    BriefFacts,
    OutlineEntry,
    SlideCountRange,
    ExplicitOutlineSignal
)

from .narrative import (
    VoiceProfile,
    StorySpine,
    Lexicon,
    NarrativeSection,
    NarrativePlan,
    SectionConcept,
    MessagingMap
)

from .deck import (
    SlideLayout,
    ChartType,
    Slide,
    Theme,
    DeckDraft,
    DeckPlan,
    ConceptRefinement,
    LAYOUT_CONTENT_BLOCKS,
    CONTENT_BLOCK_FIELDS,
    DATA_LAYOUTS,
    blocks_for_layout
)

from .catalog import (
    Recipe,
    VoiceRules,
    LockedBeat,
    KindDefaults,
    StructuralLockRule,
    PlanningCatalog
)

from .options import PlanningOptions

__all__ = [
    # Brief models
    'DeckType',
    'TrafficStatus',
    'BriefFacts',
    'OutlineEntry',
    'SlideCountRange',
    'ExplicitOutlineSignal',

    # Narrative models
    'VoiceProfile',
    'StorySpine',
    'Lexicon',
    'NarrativeSection',
    'NarrativePlan',
    'SectionConcept',
    'MessagingMap',

    # Deck models
    'SlideLayout',
    'ChartType',
    'Slide',
    'Theme',
    'DeckDraft',
    'DeckPlan',
    'ConceptRefinement',
    'LAYOUT_CONTENT_BLOCKS',
    'CONTENT_BLOCK_FIELDS',
    'DATA_LAYOUTS',
    'blocks_for_layout',

    # Catalog models
    'Recipe',
    'VoiceRules',
    'LockedBeat',
    'KindDefaults',
    'StructuralLockRule',
    'PlanningCatalog',

    # Request options
    'PlanningOptions'
]

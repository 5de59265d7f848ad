"""
Core Module for BriefDeck

Planning stages and the deterministic passes around them:
outline signals, structural lock, concept-quality gate, normalization.
"""

from .outline_signals import extract_outline_signals
from .planning_catalog import PlanningCatalogLoader, PlanningCatalogError, get_planning_catalog
from .brief_extractor import BriefExtractor
from .narrative_planner import NarrativePlanner
from .messaging_planner import MessagingPlanner
from .deck_assembler import DeckAssembler
from .deck_editor import DeckEditor
from .structural_lock import (
    resolve_lock_rule,
    should_lock,
    lock_narrative,
    lock_deck_plan,
    StructuralLockViolation
)
from .concept_gate import ConceptQualityGate, is_weak_line
from .normalizer import normalize_plan, infer_layout_from_kind

__all__ = [
    # Outline + catalog
    'extract_outline_signals',
    'PlanningCatalogLoader',
    'PlanningCatalogError',
    'get_planning_catalog',

    # Generation stages
    'BriefExtractor',
    'NarrativePlanner',
    'MessagingPlanner',
    'DeckAssembler',
    'DeckEditor',

    # Structural lock
    'resolve_lock_rule',
    'should_lock',
    'lock_narrative',
    'lock_deck_plan',
    'StructuralLockViolation',

    # Concept gate
    'ConceptQualityGate',
    'is_weak_line',

    # Normalization
    'normalize_plan',
    'infer_layout_from_kind',
]

"""
Agents Package for BriefDeck

Contains the planning pipeline orchestrator.
"""

from .deck_planner import DeckPlanner, build_extract_trace

__all__ = [
    'DeckPlanner',
    'build_extract_trace'
]

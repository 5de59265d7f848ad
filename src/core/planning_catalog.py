"""
Planning Catalog Loader for BriefDeck

Loads the read-only planning tables from config/planning:
- recipe_catalog.json: story recipes per deck type
- voice_profiles.json: copywriting rules per voice profile
- structural_locks.json: fixed slide sequences for locked archetypes

The catalog is loaded once per process and passed explicitly to the
stages that need it. A missing or malformed file is a configuration
error and fails loudly.
"""

from typing import Any, Dict, Optional
from pathlib import Path
import json

from pydantic import ValidationError

from src.models.catalog import (
    PlanningCatalog,
    Recipe,
    VoiceRules,
    StructuralLockRule
)
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class PlanningCatalogLoader:
    """Reads the planning JSON files into a frozen PlanningCatalog."""

    RECIPES_FILE = "recipe_catalog.json"
    VOICES_FILE = "voice_profiles.json"
    LOCKS_FILE = "structural_locks.json"

    def __init__(self, catalog_dir: Optional[str] = None):
        """
        Initialize the loader.

        Args:
            catalog_dir: Directory containing the planning JSON files.
                         Defaults to config/planning/
        """
        base_dir = Path(__file__).parent.parent.parent
        self.catalog_dir = Path(catalog_dir) if catalog_dir else base_dir / "config" / "planning"

    def _read(self, filename: str) -> Dict[str, Any]:
        path = self.catalog_dir / filename
        if not path.exists():
            raise PlanningCatalogError(f"Planning catalog file not found: {path}")
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise PlanningCatalogError(f"Invalid JSON in {path}: {e}") from e

    def load(self) -> PlanningCatalog:
        """Load and validate every planning table."""
        try:
            recipes = [Recipe(**r) for r in self._read(self.RECIPES_FILE).get("recipes", [])]
            voices = [VoiceRules(**v) for v in self._read(self.VOICES_FILE).get("profiles", [])]
            locks = [StructuralLockRule(**l) for l in self._read(self.LOCKS_FILE).get("locks", [])]
        except ValidationError as e:
            raise PlanningCatalogError(f"Planning catalog failed validation: {e}") from e

        catalog = PlanningCatalog(recipes=recipes, voice_profiles=voices, locks=locks)
        self._check_consistency(catalog)

        logger.info(
            f"Planning catalog loaded from {self.catalog_dir}: "
            f"{len(recipes)} recipes, {len(voices)} voice profiles, {len(locks)} lock rules"
        )
        return catalog

    @staticmethod
    def _check_consistency(catalog: PlanningCatalog) -> None:
        """Every lock rule must point at a known recipe with the same beat count."""
        for rule in catalog.locks:
            recipe = catalog.get_recipe(rule.recipe_name)
            if recipe is None:
                raise PlanningCatalogError(
                    f"Lock rule for '{rule.deck_type}' references unknown recipe '{rule.recipe_name}'"
                )
            if len(recipe.section_ids) != rule.slide_count:
                raise PlanningCatalogError(
                    f"Recipe '{recipe.recipe_name}' has {len(recipe.section_ids)} sections "
                    f"but lock rule requires {rule.slide_count} slides"
                )


# Singleton instance for easy access
_catalog_instance: Optional[PlanningCatalog] = None


def get_planning_catalog(catalog_dir: Optional[str] = None) -> PlanningCatalog:
    """
    Get the shared PlanningCatalog, loading it on first use.

    Args:
        catalog_dir: Optional override; defaults to settings.PLANNING_CATALOG_DIR

    Returns:
        PlanningCatalog instance
    """
    global _catalog_instance
    if _catalog_instance is None:
        if catalog_dir is None:
            from config.settings import get_settings
            catalog_dir = get_settings().PLANNING_CATALOG_DIR
        _catalog_instance = PlanningCatalogLoader(catalog_dir).load()
    return _catalog_instance


class PlanningCatalogError(Exception):
    """Raised when the planning catalog cannot be loaded."""
    pass

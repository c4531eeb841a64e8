"""Business logic for game categories."""
import json
import logging
from typing import Dict, List, Optional


class CategoryService:
    """Looks up categories and decodes their metadata, delegating persistence
    to the ``database`` module's helper functions.

    All methods accept a *db* SQLAlchemy session as the first argument so
    that callers (Flask route handlers) control the session lifecycle.
    """

    def __init__(self, db_module) -> None:
        """
        Args:
            db_module: The imported ``database`` module (or any object that
                exposes ``get_category_by_slug`` and
                ``get_categories_by_taxonomy``).
        """
        self._db = db_module
        self._log = logging.getLogger('playhub.service.CategoryService')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def find_by_slug(self, db, slug: str, taxonomy: str = 'game'):
        """Return the category with *slug* in *taxonomy*, or ``None``."""
        return self._db.get_category_by_slug(db, slug, taxonomy)

    def find_by_taxonomy(self, db, taxonomy: str = 'game') -> List:
        """Return every category of *taxonomy* in sidebar order."""
        return self._db.get_categories_by_taxonomy(db, taxonomy)

    def decode_metadata(self, category) -> Dict:
        """Return the category's JSON metadata as a dict.

        Missing or malformed metadata yields ``{}`` so the card still renders
        (with an empty image).
        """
        raw = getattr(category, 'meta', None)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            self._log.warning("Bad metadata on category %s: %s",
                              getattr(category, 'slug', '?'), exc)
            return {}
        return data if isinstance(data, dict) else {}

    def image_of(self, category) -> Optional[str]:
        """Return the image reference stored in the category metadata."""
        return self.decode_metadata(category).get('image')

"""Business logic for game queries and pagination."""
import math
from typing import Dict, List


class GameService:
    """Queries the game catalogue and computes pagination metadata,
    delegating persistence to the ``database`` module's helper functions.

    All query methods accept a *db* SQLAlchemy session as the first argument
    so that callers (Flask route handlers) control the session lifecycle.

    Filter conventions
    ------------------
    * An empty string for ``keywords``, ``game_type``, ``display``,
      ``is_hot`` or ``is_new`` means "do not filter".
    * ``not_equal`` maps a game column to the values it must not take,
      e.g. ``{'type': ['VIDEO']}``.
    """

    def __init__(self, db_module) -> None:
        """
        Args:
            db_module: The imported ``database`` module (or any object that
                exposes ``get_games_page`` and ``count_games``).
        """
        self._db = db_module

    # ------------------------------------------------------------------
    # Query API
    # ------------------------------------------------------------------

    def get_page(self, db, page: int, limit: int, keywords: str = '',
                 game_type: str = '', display: str = '', is_hot: str = '',
                 is_new: str = '', field_order: str = 'views',
                 order_type: str = 'desc', category_id=None,
                 not_equal: Dict = None) -> List:
        """Return one page of games matching the filters.

        Raises:
            ValueError: On a non-positive page/limit or an unknown ordering.
        """
        return self._db.get_games_page(
            db, page, limit, keywords=keywords, game_type=game_type,
            display=display, is_hot=is_hot, is_new=is_new,
            field_order=field_order, order_type=order_type,
            category_id=category_id, not_equal=not_equal)

    def count(self, db, keywords: str = '', game_type: str = '',
              display: str = '', is_hot: str = '', is_new: str = '',
              category_id=None, not_equal: Dict = None) -> int:
        """Return the number of games matching the filters (no paging)."""
        return self._db.count_games(
            db, keywords=keywords, game_type=game_type, display=display,
            is_hot=is_hot, is_new=is_new, category_id=category_id,
            not_equal=not_equal)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    @staticmethod
    def paging_link(count: int, page: int, limit: int, window: int = 5) -> Dict:
        """Return pagination metadata for navigation links.

        Args:
            count:  Total number of matching items.
            page:   Current 1-based page.
            limit:  Page size (must be positive).
            window: Maximum number of page numbers listed in ``links``.

        Returns:
            Dict with ``total``, ``page``, ``limit``, ``pages``,
            ``has_prev``, ``has_next``, ``prev_page``, ``next_page`` and
            ``links`` (page numbers centred on the current page).
        """
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        count = max(int(count or 0), 0)
        pages = math.ceil(count / limit)
        window = max(window, 1)

        start = max(page - window // 2, 1)
        end = min(start + window - 1, pages)
        start = max(end - window + 1, 1)
        links = list(range(start, end + 1)) if pages else []

        return {
            'total': count,
            'page': page,
            'limit': limit,
            'pages': pages,
            'has_prev': page > 1,
            'has_next': page < pages,
            'prev_page': page - 1 if page > 1 else None,
            'next_page': page + 1 if page < pages else None,
            'links': links,
        }

"""Builds the data behind a category's game listing page."""
import html
import logging
import random
from typing import Dict, Optional

import playhub
from .category_service import CategoryService
from .game_service import GameService
from .image_service import ImageService
from .option_service import OptionService

GAME_THUMB_SIZE = (250, 150)
CATEGORY_THUMB_SIZE = (40, 40)
PLACEHOLDER_PATH = '/resources/images/placeholder.png'


class CategoryListingService:
    """Assembles a category page: one shuffled page of games plus the
    sidebar of sibling categories.

    Rules
    -----
    * Only displayable games are listed and ``VIDEO`` games never are.
    * Games are fetched by views, descending; the fetched page is then
      shuffled, so randomness affects card order but never which games show.
    * The sidebar keeps the taxonomy order returned by the database.
    * An unknown category yields an empty listing and issues no game queries.
    """

    def __init__(self, categories: CategoryService, games: GameService,
                 options: OptionService, images: ImageService,
                 config: Dict = None, rng: random.Random = None) -> None:
        self._categories = categories
        self._games = games
        self._options = options
        self._images = images
        self._config = config or playhub.DEFAULT_CONFIG
        self._rng = rng or random.Random()
        self._log = logging.getLogger('playhub.service.CategoryListingService')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve_limit(self, db, limit=None) -> int:
        """Return *limit* when it is a positive int, else the configured default.

        The default comes from the ``game_category_limit`` display option,
        then from ``default_category_limit`` in the app config.
        """
        provided = playhub.parse_limit(limit)
        if provided:
            return provided
        fallback = self._config.get('default_category_limit') or \
            playhub.DEFAULT_CONFIG['default_category_limit']
        return self._options.get_int(db, 'game_category_limit', 'display', fallback)

    @staticmethod
    def resolve_field_order(sort: Optional[str]) -> str:
        """Map a sort key to the game column to order by."""
        field_order = 'views'
        # "most played" is ranked by views as well
        if sort is not None and sort == playhub.SORT_MOST_PLAYED:
            field_order = 'views'
        return field_order

    def theme_url(self, db) -> str:
        return playhub.theme_url(self._config.get('root_theme', ''),
                                 self._options.get(db, 'index_theme'))

    def build(self, db, category_slug: str, page=None, sort: Optional[str] = None,
              limit=None) -> Dict:
        """Return everything the category template needs.

        Args:
            db:            SQLAlchemy session.
            category_slug: Slug of a ``game`` taxonomy category.
            page:          Requested page (any value; invalid means 1).
            sort:          Optional sort key.
            limit:         Optional page size overriding the configured one.

        Returns:
            Dict with ``category``, ``games`` (card dicts, shuffled),
            ``categories`` (sidebar card dicts), ``paging``, ``page``,
            ``limit``, ``field_order``, ``theme_url`` and ``placeholder_url``.
        """
        page = playhub.parse_page(page)
        limit = self.resolve_limit(db, limit)
        field_order = self.resolve_field_order(sort)
        theme = self.theme_url(db)

        listing = {
            'category': None,
            'games': [],
            'categories': [],
            'paging': self._games.paging_link(0, page, limit),
            'page': page,
            'limit': limit,
            'field_order': field_order,
            'theme_url': theme,
            'placeholder_url': theme + PLACEHOLDER_PATH,
        }

        category = self._categories.find_by_slug(db, category_slug, playhub.GAME_TAXONOMY)
        if category is None:
            self._log.info("No %s category with slug %r", playhub.GAME_TAXONOMY, category_slug)
            return listing
        listing['category'] = self._category_card(category)

        filters = {
            'display': 'yes',
            'category_id': category.id,
            'not_equal': {'type': list(playhub.EXCLUDED_GAME_TYPES)},
        }
        games = list(self._games.get_page(db, page, limit, field_order=field_order,
                                          order_type='desc', **filters))
        total = self._games.count(db, **filters)
        self._rng.shuffle(games)

        listing['games'] = [self._game_card(g) for g in games]
        listing['paging'] = self._games.paging_link(total, page, limit)
        listing['categories'] = [
            self._category_card(c)
            for c in self._categories.find_by_taxonomy(db, playhub.GAME_TAXONOMY)
        ]
        self._log.debug("Category %s page %d: %d of %d games",
                        category_slug, page, len(games), total)
        return listing

    # ------------------------------------------------------------------
    # Card builders
    # ------------------------------------------------------------------

    def _game_card(self, game) -> Dict:
        width, height = GAME_THUMB_SIZE
        return {
            'id': game.id,
            'name': game.name,
            'slug': game.slug,
            'excerpt': game.excerpt or '',
            'image_url': self._images.convert_webp(
                self._images.get_thumbnail(game.image, width, height, 'm')),
            'url': f"/{game.slug}",
        }

    def _category_card(self, category) -> Dict:
        width, height = CATEGORY_THUMB_SIZE
        return {
            'id': category.id,
            'name': category.name,
            'slug': category.slug,
            'description_html': html.unescape(category.description or ''),
            'image_url': self._images.get_thumbnail(
                self._categories.image_of(category), width, height, 'm'),
            'url': f"/{category.slug}.games",
        }

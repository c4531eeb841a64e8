#!/usr/bin/env python3
"""
Tests for CategoryListingService (the category page data flow).

Run with:
    python -m pytest tests/test_listing.py
"""
import json
import os
import random
import sys
import unittest
from unittest.mock import MagicMock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database
import playhub
from app.services import (
    CategoryService, OptionService, GameService, ImageService,
    CategoryListingService,
)
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


CONFIG = dict(playhub.DEFAULT_CONFIG, root_theme='themes', default_category_limit=24)


def _make_session():
    engine = create_engine('sqlite:///:memory:', connect_args={"check_same_thread": False})
    database.Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)()


def _make_service(rng=None, games=None, config=None):
    return CategoryListingService(
        CategoryService(database),
        games or GameService(database),
        OptionService(database),
        ImageService('/thumbs'),
        config=config or CONFIG,
        rng=rng or random.Random(7),
    )


def _add_category(db, slug, name=None, position=0, description='', image=None):
    category = database.Category(
        name=name or slug.title(), slug=slug, taxonomy='game', position=position,
        description=description,
        meta=json.dumps({'image': image}) if image else None,
    )
    db.add(category)
    db.commit()
    return category


def _add_games(db, category, count, start_views=1000, prefix='G', **fields):
    games = []
    for i in range(count):
        game = database.Game(
            name=f'{prefix}{i + 1}', slug=f'{prefix.lower()}{i + 1}-{category.slug}',
            image=f'games/{prefix.lower()}{i + 1}.png', views=start_views - i,
            category_id=category.id, type=fields.get('type', 'HTML5'),
            display=fields.get('display', 'yes'),
        )
        db.add(game)
        games.append(game)
    db.commit()
    return games


# ===========================================================================
# Listing contents
# ===========================================================================

class TestCategoryListing(unittest.TestCase):

    def setUp(self):
        self.db = _make_session()
        self.puzzle = _add_category(self.db, 'puzzle', position=0, image='categories/puzzle.png',
                                    description='Brain teasers &amp; more')
        self.action = _add_category(self.db, 'action', position=1)

    def tearDown(self):
        self.db.close()

    def test_page_two_of_three(self):
        games = _add_games(self.db, self.puzzle, 25)
        listing = _make_service().build(self.db, 'puzzle', page=2, limit=10)

        expected = {g.id for g in games[10:20]}
        self.assertEqual({card['id'] for card in listing['games']}, expected)
        self.assertEqual(len(listing['games']), 10)
        self.assertEqual(listing['paging']['total'], 25)
        self.assertEqual(listing['paging']['page'], 2)
        self.assertEqual(listing['paging']['pages'], 3)

    def test_video_games_never_listed(self):
        _add_games(self.db, self.puzzle, 3)
        _add_games(self.db, self.puzzle, 3, start_views=99999, prefix='V', type='VIDEO')
        listing = _make_service().build(self.db, 'puzzle', limit=10)
        self.assertEqual(sorted(card['name'] for card in listing['games']), ['G1', 'G2', 'G3'])
        self.assertEqual(listing['paging']['total'], 3)

    def test_hidden_games_never_listed(self):
        _add_games(self.db, self.puzzle, 2)
        _add_games(self.db, self.puzzle, 2, prefix='H', display='no')
        listing = _make_service().build(self.db, 'puzzle')
        self.assertEqual(sorted(card['name'] for card in listing['games']), ['G1', 'G2'])

    def test_other_categories_games_not_listed(self):
        _add_games(self.db, self.puzzle, 2)
        _add_games(self.db, self.action, 2, prefix='A')
        listing = _make_service().build(self.db, 'puzzle')
        self.assertTrue(all(card['name'].startswith('G') for card in listing['games']))

    def test_shuffle_keeps_selection(self):
        games = _add_games(self.db, self.puzzle, 12)
        ids = {g.id for g in games}
        for seed in range(5):
            listing = _make_service(rng=random.Random(seed)).build(self.db, 'puzzle', limit=12)
            self.assertEqual({card['id'] for card in listing['games']}, ids)

    def test_shuffle_changes_order(self):
        games = _add_games(self.db, self.puzzle, 12)
        by_views = [g.id for g in games]
        orders = {
            tuple(card['id'] for card in
                  _make_service(rng=random.Random(seed)).build(self.db, 'puzzle')['games'])
            for seed in range(10)
        }
        self.assertGreater(len(orders), 1)
        self.assertTrue(any(list(order) != by_views for order in orders))

    def test_seeded_rng_is_deterministic(self):
        _add_games(self.db, self.puzzle, 8)
        first = _make_service(rng=random.Random(3)).build(self.db, 'puzzle')
        second = _make_service(rng=random.Random(3)).build(self.db, 'puzzle')
        self.assertEqual([c['id'] for c in first['games']], [c['id'] for c in second['games']])

    def test_sidebar_keeps_taxonomy_order(self):
        _add_games(self.db, self.puzzle, 1)
        _add_category(self.db, 'racing', position=-1)
        listing = _make_service().build(self.db, 'puzzle')
        self.assertEqual([c['slug'] for c in listing['categories']], ['racing', 'puzzle', 'action'])

    def test_empty_category(self):
        listing = _make_service().build(self.db, 'action')
        self.assertIsNotNone(listing['category'])
        self.assertEqual(listing['games'], [])
        self.assertEqual(listing['paging']['total'], 0)

    def test_game_card(self):
        _add_games(self.db, self.puzzle, 1)
        card = _make_service().build(self.db, 'puzzle')['games'][0]
        self.assertEqual(card['name'], 'G1')
        self.assertEqual(card['url'], '/g1-puzzle')
        self.assertEqual(card['image_url'], '/thumbs/250x150/m/games/g1.webp')
        self.assertEqual(card['excerpt'], '')

    def test_category_card(self):
        _add_games(self.db, self.puzzle, 1)
        listing = _make_service().build(self.db, 'puzzle')
        card = listing['categories'][0]
        self.assertEqual(card['url'], '/puzzle.games')
        self.assertEqual(card['image_url'], '/thumbs/40x40/m/categories/puzzle.png')
        self.assertEqual(card['description_html'], 'Brain teasers & more')
        self.assertEqual(listing['category']['slug'], 'puzzle')

    def test_category_without_image(self):
        _add_games(self.db, self.puzzle, 1)
        listing = _make_service().build(self.db, 'puzzle')
        action_card = [c for c in listing['categories'] if c['slug'] == 'action'][0]
        self.assertEqual(action_card['image_url'], '')

    def test_theme_urls(self):
        database.set_option(self.db, 'index_theme', 'arcade')
        listing = _make_service().build(self.db, 'puzzle')
        self.assertEqual(listing['theme_url'], '/themes/arcade')
        self.assertEqual(listing['placeholder_url'], '/themes/arcade/resources/images/placeholder.png')


# ===========================================================================
# Request parameters
# ===========================================================================

class TestListingParameters(unittest.TestCase):

    def setUp(self):
        self.db = _make_session()
        self.puzzle = _add_category(self.db, 'puzzle')
        _add_games(self.db, self.puzzle, 30)

    def tearDown(self):
        self.db.close()

    def test_page_defaults_to_one(self):
        svc = _make_service()
        for raw in (None, '', '0', '-3', 'abc', 0, -1):
            listing = svc.build(self.db, 'puzzle', page=raw, limit=5)
            self.assertEqual(listing['page'], 1, raw)
            self.assertEqual({c['name'] for c in listing['games']}, {'G1', 'G2', 'G3', 'G4', 'G5'})

    def test_page_with_trailing_text(self):
        listing = _make_service().build(self.db, 'puzzle', page='2abc', limit=5)
        self.assertEqual(listing['page'], 2)
        self.assertEqual({c['name'] for c in listing['games']}, {'G6', 'G7', 'G8', 'G9', 'G10'})

    def test_page_string(self):
        listing = _make_service().build(self.db, 'puzzle', page='3', limit=5)
        self.assertEqual({c['name'] for c in listing['games']}, {'G11', 'G12', 'G13', 'G14', 'G15'})

    def test_provided_limit_wins(self):
        database.set_option(self.db, 'game_category_limit', '7', 'display')
        listing = _make_service().build(self.db, 'puzzle', limit=4)
        self.assertEqual(listing['limit'], 4)
        self.assertEqual(len(listing['games']), 4)

    def test_limit_from_option(self):
        database.set_option(self.db, 'game_category_limit', '7', 'display')
        listing = _make_service().build(self.db, 'puzzle')
        self.assertEqual(listing['limit'], 7)
        self.assertEqual(len(listing['games']), 7)

    def test_falsy_limit_uses_option(self):
        database.set_option(self.db, 'game_category_limit', '7', 'display')
        for raw in (0, '', None):
            self.assertEqual(_make_service().build(self.db, 'puzzle', limit=raw)['limit'], 7)

    def test_limit_from_config_when_option_missing(self):
        config = dict(CONFIG, default_category_limit=9)
        listing = _make_service(config=config).build(self.db, 'puzzle')
        self.assertEqual(listing['limit'], 9)
        self.assertEqual(len(listing['games']), 9)

    def test_sort_keys_order_by_views(self):
        self.assertEqual(CategoryListingService.resolve_field_order(None), 'views')
        self.assertEqual(CategoryListingService.resolve_field_order('most_played'), 'views')
        self.assertEqual(CategoryListingService.resolve_field_order('newest'), 'views')

    def test_most_played_lists_top_games(self):
        listing = _make_service().build(self.db, 'puzzle', sort='most_played', limit=3)
        self.assertEqual({c['name'] for c in listing['games']}, {'G1', 'G2', 'G3'})
        self.assertEqual(listing['field_order'], 'views')


# ===========================================================================
# Unknown category
# ===========================================================================

class TestUnknownCategory(unittest.TestCase):

    def setUp(self):
        self.db = _make_session()

    def tearDown(self):
        self.db.close()

    def test_unknown_slug_renders_nothing(self):
        listing = _make_service().build(self.db, 'missing')
        self.assertIsNone(listing['category'])
        self.assertEqual(listing['games'], [])
        self.assertEqual(listing['categories'], [])

    def test_unknown_slug_skips_game_queries(self):
        games = MagicMock()
        games.paging_link.side_effect = GameService.paging_link
        _make_service(games=games).build(self.db, 'missing')
        games.get_page.assert_not_called()
        games.count.assert_not_called()

    def test_category_of_other_taxonomy_is_unknown(self):
        self.db.add(database.Category(name='News', slug='news', taxonomy='blog'))
        self.db.commit()
        self.assertIsNone(_make_service().build(self.db, 'news')['category'])


if __name__ == '__main__':
    unittest.main()

#!/usr/bin/env python3
"""
Seed script for the PlayHub catalogue.
Creates the tables and loads a demo set of categories, games and options so
category pages have something to show.

    python3 seed_db.py            # create tables and add demo data
    python3 seed_db.py --reset    # drop the catalogue first
"""

import argparse
import json
import random
import sys

from colorama import Fore, init as colorama_init
from sqlalchemy.exc import SQLAlchemyError

import database
from app.services import OptionService

# ---------------------------------------------------------------------------
# Demo dataset
# ---------------------------------------------------------------------------
DEMO_CATEGORIES = [
    {"slug": "puzzle",   "name": "Puzzle",   "description": "Brain teasers &amp; match-3",    "image": "categories/puzzle.png"},
    {"slug": "action",   "name": "Action",   "description": "Fast reflexes required",         "image": "categories/action.png"},
    {"slug": "racing",   "name": "Racing",   "description": "Cars, bikes &amp; more",         "image": "categories/racing.png"},
    {"slug": "strategy", "name": "Strategy", "description": "Plan ahead, win later",          "image": "categories/strategy.png"},
]

DEMO_GAME_NAMES = {
    "puzzle":   ["Block Drop", "Gem Swap", "Tile Slide", "Word Grid", "Pipe Flow", "Color Sort"],
    "action":   ["Ninja Run", "Sky Blaster", "Zombie Rush", "Pixel Brawl"],
    "racing":   ["Drift King", "Moto Dash", "Kart Cup"],
    "strategy": ["Tower Siege", "Hex Empire", "Farm Tycoon"],
}

DEMO_OPTIONS = [
    ("index_theme", "general", "arcade"),
    ("game_category_limit", "display", "12"),
]


def _slugify(name: str) -> str:
    return '-'.join(name.lower().split())


def seed(db, rng: random.Random) -> dict:
    """Insert the demo catalogue into *db*.  Returns per-table insert counts."""
    counts = {'categories': 0, 'games': 0, 'options': 0}
    for position, entry in enumerate(DEMO_CATEGORIES):
        category = database.Category(
            name=entry["name"], slug=entry["slug"], description=entry["description"],
            taxonomy='game', meta=json.dumps({"image": entry["image"]}), position=position,
        )
        db.add(category)
        db.flush()
        counts['categories'] += 1
        for name in DEMO_GAME_NAMES[entry["slug"]]:
            slug = _slugify(name)
            db.add(database.Game(
                name=name, slug=slug, excerpt=f"Play {name} online for free.",
                image=f"games/{slug}.jpg", views=rng.randint(0, 50000),
                type='HTML5', display='yes', category_id=category.id,
            ))
            counts['games'] += 1
        # One trailer per category, never listed on category pages
        db.add(database.Game(
            name=f"{entry['name']} Trailer", slug=f"{entry['slug']}-trailer",
            image=f"videos/{entry['slug']}.jpg", views=rng.randint(0, 50000),
            type='VIDEO', display='yes', category_id=category.id,
        ))
        counts['games'] += 1
    db.commit()

    options = OptionService(database)
    for key, option_type, value in DEMO_OPTIONS:
        if options.set(db, key, value, option_type):
            counts['options'] += 1
    return counts


def reset(db) -> None:
    """Delete every catalogue row."""
    db.query(database.Game).delete()
    db.query(database.Category).delete()
    db.query(database.Option).delete()
    db.commit()


def main():
    parser = argparse.ArgumentParser(description='Seed the PlayHub catalogue with demo data')
    parser.add_argument('--reset', action='store_true', help='Delete existing catalogue rows first')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for view counts')
    args = parser.parse_args()
    colorama_init(autoreset=True)

    print("=" * 60)
    print("PlayHub: seed demo catalogue")
    print("=" * 60)

    if not database.init_db():
        print(f"{Fore.RED}✗ Error: Cannot connect to database. Check your DATABASE_URL environment variable.")
        return 1

    db = database.SessionLocal()
    try:
        if args.reset:
            reset(db)
            print(f"{Fore.YELLOW}• Existing catalogue removed")
        elif db.query(database.Category).count():
            print(f"{Fore.YELLOW}• Catalogue already has categories; use --reset to reseed")
            return 0
        counts = seed(db, random.Random(args.seed))
    except SQLAlchemyError as e:
        db.rollback()
        print(f"{Fore.RED}✗ Error seeding database: {e}")
        return 1
    finally:
        db.close()

    for table, count in counts.items():
        print(f"{Fore.GREEN}✓ {table}: {count} rows")
    return 0


if __name__ == '__main__':
    sys.exit(main())

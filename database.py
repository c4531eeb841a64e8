#!/usr/bin/env python3
"""
Database models and configuration for PlayHub.
Holds the game catalogue (categories, games) and key/value site options.
"""

import os
from sqlalchemy import create_engine, Column, Integer, String, DateTime, Text, ForeignKey, UniqueConstraint, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, relationship
from datetime import datetime
import logging

logger = logging.getLogger('playhub.database')

# Database URL - point at PostgreSQL in production
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///playhub.db')

Base = declarative_base()

try:
    engine = create_engine(DATABASE_URL, echo=False)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
except Exception as e:
    logger.warning(f"Database engine not available: {e}")
    engine = None
    SessionLocal = None

# Columns the game listing may be ordered by
ORDERABLE_GAME_FIELDS = ('views', 'created_at', 'name', 'id')
ORDER_TYPES = ('asc', 'desc')
# Largest OFFSET/LIMIT a signed 64-bit SQL integer can bind
MAX_SQL_INT = 2 ** 63 - 1


class Category(Base):
    """A named grouping of games within a taxonomy."""
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint('taxonomy', 'slug', name='uq_categories_taxonomy_slug'),)

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)  # may contain HTML entities
    taxonomy = Column(String(50), default='game', index=True)
    # ``metadata`` is reserved on declarative classes
    meta = Column('metadata', Text, nullable=True)  # JSON, e.g. {"image": "..."}
    position = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    games = relationship("Game", back_populates="category")


class Game(Base):
    """A playable catalogue entry."""
    __tablename__ = "games"

    id = Column(Integer, primary_key=True)
    name = Column(String(500), nullable=False)
    slug = Column(String(500), unique=True, index=True)
    excerpt = Column(Text, nullable=True)
    image = Column(String(1000), nullable=True)
    views = Column(Integer, default=0)
    type = Column(String(50), default='HTML5')  # 'HTML5', 'FLASH', 'VIDEO', ...
    display = Column(String(10), default='yes')  # 'yes' or 'no'
    is_hot = Column(String(10), default='no')
    is_new = Column(String(10), default='no')
    category_id = Column(Integer, ForeignKey("categories.id"), index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    category = relationship("Category", back_populates="games")


class Option(Base):
    """Site-wide key/value setting, grouped by type."""
    __tablename__ = "options"
    __table_args__ = (UniqueConstraint('key', 'type', name='uq_options_key_type'),)

    id = Column(Integer, primary_key=True)
    key = Column(String(255), nullable=False, index=True)
    type = Column(String(50), default='general')
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


def init_db():
    """Initialize database tables."""
    if engine:
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables initialized successfully")
            return True
        except SQLAlchemyError as e:
            logger.error(f"Failed to initialize database: {e}")
            return False
    return False


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def get_category_by_slug(db, slug: str, taxonomy: str = 'game'):
    """Get a category by slug within *taxonomy*."""
    if not db or not slug:
        return None
    try:
        return db.query(Category).filter(
            Category.slug == slug,
            Category.taxonomy == taxonomy
        ).first()
    except SQLAlchemyError as e:
        logger.error(f"Error getting category {slug!r}: {e}")
        return None


def get_categories_by_taxonomy(db, taxonomy: str = 'game'):
    """Get every category of *taxonomy*, in sidebar order."""
    if not db:
        return []
    try:
        return db.query(Category).filter(
            Category.taxonomy == taxonomy
        ).order_by(Category.position, Category.id).all()
    except SQLAlchemyError as e:
        logger.error(f"Error listing categories for taxonomy {taxonomy!r}: {e}")
        return []


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

def get_option(db, key: str, option_type: str = 'general'):
    """Get the raw value of option *key* of *option_type*, or None."""
    if not db:
        return None
    try:
        option = db.query(Option).filter(
            Option.key == key,
            Option.type == option_type
        ).first()
        return option.value if option else None
    except SQLAlchemyError as e:
        logger.error(f"Error getting option {option_type}/{key}: {e}")
        return None


def set_option(db, key: str, value, option_type: str = 'general'):
    """Create or update option *key* of *option_type*."""
    if not db:
        return False
    try:
        option = db.query(Option).filter(
            Option.key == key,
            Option.type == option_type
        ).first()
        if option:
            option.value = str(value)
            option.updated_at = datetime.utcnow()
        else:
            db.add(Option(key=key, type=option_type, value=str(value)))
        db.commit()
        return True
    except SQLAlchemyError as e:
        logger.error(f"Error setting option {option_type}/{key}: {e}")
        db.rollback()
        return False


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------

def _filtered_games(db, keywords: str = '', game_type: str = '', display: str = '',
                    is_hot: str = '', is_new: str = '', category_id=None,
                    not_equal: dict = None):
    """Build the base game query; empty filter values are ignored."""
    query = db.query(Game)
    if keywords:
        query = query.filter(Game.name.ilike(f"%{keywords}%"))
    if game_type:
        query = query.filter(Game.type == game_type)
    if display:
        query = query.filter(Game.display == display)
    if is_hot:
        query = query.filter(Game.is_hot == is_hot)
    if is_new:
        query = query.filter(Game.is_new == is_new)
    if category_id is not None:
        query = query.filter(Game.category_id == category_id)
    for column_name, values in (not_equal or {}).items():
        column = getattr(Game, column_name, None)
        if column is None:
            raise ValueError(f"Unknown game column in exclusion filter: {column_name}")
        if not isinstance(values, (list, tuple, set)):
            values = [values]
        if values:
            # NULLs are not "equal" to an excluded value, so keep them
            query = query.filter((column.notin_(list(values))) | (column.is_(None)))
    return query


def get_games_page(db, page: int, limit: int, keywords: str = '', game_type: str = '',
                   display: str = '', is_hot: str = '', is_new: str = '',
                   field_order: str = 'views', order_type: str = 'desc',
                   category_id=None, not_equal: dict = None):
    """Get one page of games matching the filters.

    Args:
        db: Database session
        page: 1-based page number
        limit: Page size
        keywords: Case-insensitive substring of the game name
        game_type: Exact game type ('' for any)
        display: Display flag ('yes'/'no', '' for any)
        is_hot: Hot flag ('' for any)
        is_new: New flag ('' for any)
        field_order: One of ORDERABLE_GAME_FIELDS
        order_type: 'asc' or 'desc'
        category_id: Restrict to one category (None for any)
        not_equal: {column: [excluded values]}

    Raises:
        ValueError: On an invalid page, limit, ordering or exclusion column.
    """
    if page < 1 or limit < 1:
        raise ValueError(f"page and limit must be positive (page={page}, limit={limit})")
    if field_order not in ORDERABLE_GAME_FIELDS:
        raise ValueError(f"Cannot order games by {field_order!r}")
    order_type = (order_type or '').lower()
    if order_type not in ORDER_TYPES:
        raise ValueError(f"Unknown order type {order_type!r}")
    if not db:
        return []

    offset = (page - 1) * limit
    if offset > MAX_SQL_INT:
        logger.debug(f"Games page {page} lies past any possible result")
        return []
    limit = min(limit, MAX_SQL_INT)

    query = _filtered_games(db, keywords, game_type, display, is_hot, is_new,
                            category_id, not_equal)
    column = getattr(Game, field_order)
    ordering = column.desc() if order_type == 'desc' else column.asc()
    try:
        # Tie-break on id so pages never overlap
        return query.order_by(ordering, Game.id.asc()) \
            .offset(offset).limit(limit).all()
    except SQLAlchemyError as e:
        logger.error(f"Error getting games page {page}: {e}")
        return []


def count_games(db, keywords: str = '', game_type: str = '', display: str = '',
                is_hot: str = '', is_new: str = '', category_id=None,
                not_equal: dict = None):
    """Count games matching the same filters as :func:`get_games_page`."""
    if not db:
        return 0
    query = _filtered_games(db, keywords, game_type, display, is_hot, is_new,
                            category_id, not_equal)
    try:
        return query.with_entities(func.count(Game.id)).scalar() or 0
    except SQLAlchemyError as e:
        logger.error(f"Error counting games: {e}")
        return 0


def catalogue_summary(db, taxonomy: str = 'game'):
    """Per-category game counts for *taxonomy*.

    Returns:
        List of dicts with ``slug``, ``name``, ``listed`` (games a category
        page can show), ``videos`` and ``hidden`` counts.
    """
    summary = []
    for category in get_categories_by_taxonomy(db, taxonomy):
        summary.append({
            'slug': category.slug,
            'name': category.name,
            'listed': count_games(db, display='yes', category_id=category.id,
                                  not_equal={'type': ['VIDEO']}),
            'videos': count_games(db, game_type='VIDEO', category_id=category.id),
            'hidden': count_games(db, display='no', category_id=category.id),
        })
    return summary

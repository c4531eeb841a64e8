#!/usr/bin/env python3
"""
PlayHub - browser games portal
Shared configuration, logging and request-parameter helpers used by the
web layer and the service layer.
"""

import json
import logging
import os
import re
from typing import Any, Dict, Optional

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root PlayHub logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so normal use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger('playhub')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


logger = logging.getLogger('playhub')

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

GAME_TAXONOMY = 'game'
EXCLUDED_GAME_TYPES = ['VIDEO']
SORT_MOST_PLAYED = 'most_played'

# Largest page number accepted from a request (signed 64-bit max)
MAX_PAGE = 2 ** 63 - 1
_LEADING_INT = re.compile(r'\s*[+-]?\d+')

DEFAULT_CONFIG: Dict[str, Any] = {
    'root_theme': 'themes',
    'thumbnail_base_url': '/thumbs',
    'default_category_limit': 24,
    'log_level': 'INFO',
}

# Environment variable -> config key
ENV_OVERRIDES = {
    'PLAYHUB_ROOT_THEME': 'root_theme',
    'PLAYHUB_THUMBNAIL_BASE_URL': 'thumbnail_base_url',
    'PLAYHUB_CATEGORY_LIMIT': 'default_category_limit',
    'PLAYHUB_LOG_LEVEL': 'log_level',
}


def load_config(config_path: str = 'config.json') -> Dict[str, Any]:
    """Load configuration from a JSON file with environment variable support.

    The file is optional; built-in defaults fill any missing key.  Environment
    variables take precedence over file values:

    - PLAYHUB_ROOT_THEME overrides root_theme
    - PLAYHUB_THUMBNAIL_BASE_URL overrides thumbnail_base_url
    - PLAYHUB_CATEGORY_LIMIT overrides default_category_limit
    - PLAYHUB_LOG_LEVEL overrides log_level
    """
    config = dict(DEFAULT_CONFIG)

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                config.update(loaded)
            else:
                logger.warning("Ignoring %s: top-level value is not an object", config_path)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Could not load config %s: %s", config_path, e)

    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            config[key] = value

    config['default_category_limit'] = parse_limit(
        config.get('default_category_limit'), DEFAULT_CONFIG['default_category_limit'])
    config['thumbnail_base_url'] = str(config['thumbnail_base_url']).rstrip('/')
    return config


# ---------------------------------------------------------------------------
# Request parameter helpers
# ---------------------------------------------------------------------------

def parse_page(raw: Any) -> int:
    """Return the requested page number, falling back to 1.

    Only the leading integer is read, so ``"2abc"`` and ``"3.7"`` mean pages
    2 and 3.  Missing, non-numeric and non-positive values all mean the first
    page; huge values saturate at MAX_PAGE.
    """
    if raw is None:
        return 1
    match = _LEADING_INT.match(str(raw))
    if not match:
        return 1
    page = int(match.group(0))
    if page < 1:
        return 1
    return min(page, MAX_PAGE)


def parse_limit(raw: Any, default: Optional[int] = None) -> Optional[int]:
    """Return *raw* as a positive int, or *default* when it is falsy or invalid."""
    if not raw:
        return default
    try:
        limit = int(str(raw).strip())
    except ValueError:
        return default
    return limit if limit > 0 else default


def theme_url(root_theme: str, index_theme: Optional[str]) -> str:
    """Build the public base URL of the active theme (``/<root>/<theme>``)."""
    parts = [str(p).strip('/') for p in (root_theme, index_theme) if p]
    parts = [p for p in parts if p]
    return '/' + '/'.join(parts) if parts else ''

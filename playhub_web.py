#!/usr/bin/env python3
"""
PlayHub Web - server-rendered pages for the PlayHub games portal.
Serves category listing pages (a shuffled carousel of games plus a sidebar
of sibling categories) and a small JSON API over the same data.
"""

import logging
import argparse
import os
from typing import Dict, Optional
from flask import Flask, render_template, jsonify, request, abort
from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

import playhub
import database
from app.services import (
    CategoryService, OptionService, GameService, ImageService,
    CategoryListingService,
)

load_dotenv()

CONFIG: Dict = playhub.load_config(os.getenv('PLAYHUB_CONFIG', 'config.json'))

# Initialize logging early so database module logs are captured
playhub_logger = playhub.setup_logging(CONFIG['log_level'])
web_logger = logging.getLogger('playhub.web')

listing_service: Optional[CategoryListingService] = None


def configure(config: Dict) -> CategoryListingService:
    """(Re)build the service graph from *config*."""
    global CONFIG, listing_service
    CONFIG = config
    listing_service = CategoryListingService(
        CategoryService(database),
        GameService(database),
        OptionService(database),
        ImageService(config['thumbnail_base_url']),
        config=config,
    )
    return listing_service


configure(CONFIG)

app = Flask(__name__)


def _build_listing(category_slug: str, sort: Optional[str] = None, limit=None) -> Dict:
    """Run the listing service inside a request-scoped session."""
    if database.SessionLocal is None:
        raise SQLAlchemyError('Database engine not available')
    db = database.SessionLocal()
    try:
        return listing_service.build(db, category_slug,
                                     page=request.args.get('page'),
                                     sort=sort, limit=limit)
    finally:
        db.close()


# ===========================================================================================
# Pages
# ===========================================================================================

@app.route('/<category_slug>.games')
@app.route('/<category_slug>.games/<sort>')
def category_page(category_slug: str, sort: Optional[str] = None):
    """Category listing page"""
    listing = _build_listing(category_slug, sort=sort, limit=request.args.get('limit'))
    if listing['category'] is None:
        abort(404)
    return render_template('category.html', listing=listing)


# ===========================================================================================
# API
# ===========================================================================================

@app.route('/api/categories/<category_slug>/games')
def api_category_games(category_slug: str):
    """Category listing as JSON"""
    listing = _build_listing(category_slug,
                             sort=request.args.get('sort'),
                             limit=request.args.get('limit'))
    if listing['category'] is None:
        return jsonify({'error': f"Category '{category_slug}' not found"}), 404
    return jsonify(listing), 200


@app.route('/api/status')
def api_status():
    """Get application status"""
    ok = False
    if database.SessionLocal is not None:
        db = database.SessionLocal()
        try:
            db.execute(text('SELECT 1'))
            ok = True
        except SQLAlchemyError as e:
            web_logger.warning("Database ping failed: %s", e)
        finally:
            db.close()
    return jsonify({'ok': True, 'database': ok}), 200


# ===========================================================================================
# Error handlers
# ===========================================================================================

@app.errorhandler(404)
def not_found(error):
    if request.path.startswith('/api/'):
        return jsonify({'error': 'Not found'}), 404
    return render_template('404.html'), 404


@app.errorhandler(Exception)
def internal_error(error):
    if isinstance(error, HTTPException):
        return error
    web_logger.exception("Unhandled error on %s: %s", request.path, error)
    if request.path.startswith('/api/'):
        return jsonify({'error': 'Internal server error'}), 500
    return 'Internal server error', 500


def _add_file_handler(log_level: str) -> None:
    try:
        os.makedirs('logs', exist_ok=True)
        fh = logging.FileHandler('logs/playhub_web.log')
        fh.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
        fh.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        playhub_logger.addHandler(fh)
    except OSError:
        web_logger.warning('Could not create log file handler')


def main():
    """Main entry point for the web server"""
    parser = argparse.ArgumentParser(description='PlayHub Web')
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--host', default='127.0.0.1', help='Interface to bind')
    parser.add_argument('--port', type=int, default=5000, help='Port to listen on')
    parser.add_argument('--debug', action='store_true', help='Enable Flask debug mode')
    args = parser.parse_args()

    config = playhub.load_config(args.config)
    configure(config)
    playhub.setup_logging('DEBUG' if args.debug else config['log_level'])
    _add_file_handler(config['log_level'])

    if database.init_db():
        web_logger.info('Database initialized successfully')
    else:
        web_logger.warning('Database initialization reported failure')

    web_logger.info("PlayHub Web listening on http://%s:%d", args.host, args.port)
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == '__main__':
    main()

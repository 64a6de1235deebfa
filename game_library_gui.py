#!/usr/bin/env python3
"""
Game library web server - REST API over the ordered game catalog.
Translates HTTP requests into GameService calls and encodes results as JSON.
"""

import logging
import argparse
import datetime
import math
import os
from contextlib import contextmanager
from functools import wraps
from typing import Dict, List

from flask import Flask, jsonify, request, Response
from sqlalchemy.exc import IntegrityError, OperationalError

import database
import game_library
from app.repositories import GameRepository
from app.services import MAX_POSITION, GameNotFoundError, GameService

config = game_library.load_config(os.getenv('GAMELIBRARY_CONFIG', 'config.json'))

# Initialize logging before the routes are registered
log_level = config['log_level']
gamelibrary_logger = game_library.setup_logging(log_level)
gui_logger = logging.getLogger('gamelibrary.gui')
gui_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
try:
    os.makedirs('logs', exist_ok=True)
    fh = logging.FileHandler('logs/game_library_gui.log')
    fh.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
    fh.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    gui_logger.addHandler(fh)
except OSError:
    gui_logger.warning('Could not create log file handler')

app = Flask(__name__)
app.config['CORS_ORIGINS'] = config['cors_origins']

# Wire (camelCase) key -> service field name
WIRE_FIELDS = {
    'title': 'title',
    'description': 'description',
    'releaseDate': 'release_date',
    'rating': 'rating',
    'genres': 'genres',
    'platforms': 'platforms',
    'coverImageUrl': 'cover_image_url',
    'bannerImageUrl': 'banner_image_url',
    'trailerUrl': 'trailer_url',
    'moreInfoUrl': 'more_info_url',
    'screenshots': 'screenshots',
    'sortOrder': 'sort_order',
}

_TEXT_KEYS = ('description', 'coverImageUrl', 'bannerImageUrl', 'trailerUrl', 'moreInfoUrl')
_LIST_KEYS = ('genres', 'platforms', 'screenshots')

DEMO_GAMES = [
    {
        'title': 'The Legend of Zelda: Breath of the Wild',
        'release_date': datetime.date(2017, 3, 3),
        'rating': 9.7,
        'genres': ['Action', 'Adventure'],
        'platforms': ['Nintendo Switch', 'Wii U'],
    },
    {
        'title': 'Hollow Knight',
        'release_date': datetime.date(2017, 2, 24),
        'rating': 9.0,
        'genres': ['Metroidvania', 'Action'],
        'platforms': ['PC', 'Nintendo Switch', 'PlayStation 4', 'Xbox One'],
    },
    {
        'title': 'Portal 2',
        'release_date': datetime.date(2011, 4, 19),
        'rating': 9.5,
        'genres': ['Puzzle'],
        'platforms': ['PC', 'PlayStation 3', 'Xbox 360'],
    },
    {
        'title': 'Celeste',
        'release_date': datetime.date(2018, 1, 25),
        'rating': 9.1,
        'genres': ['Platformer'],
        'platforms': ['PC', 'Nintendo Switch'],
    },
]


# ===========================================================================================
# Request decoding
# ===========================================================================================

def parse_game_payload(data) -> Dict:
    """Decode a wire game object into service fields.

    Every known key is read; a missing key maps to ``None`` so that updates
    replace the whole entry.  Unknown keys (including ``id``) are ignored.

    Raises:
        ValueError: when a value has the wrong type or format.
    """
    if not isinstance(data, dict):
        raise ValueError('Request body must be a JSON object')

    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        raise ValueError('title is required')
    fields: Dict = {'title': title}

    for key in _TEXT_KEYS:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f'{key} must be a string')
        fields[WIRE_FIELDS[key]] = value

    release_date = data.get('releaseDate')
    if release_date is not None:
        if not isinstance(release_date, str):
            raise ValueError('releaseDate must be an ISO date string')
        try:
            release_date = datetime.date.fromisoformat(release_date)
        except ValueError:
            raise ValueError(f'releaseDate is not a valid date: {release_date!r}')
    fields['release_date'] = release_date

    rating = data.get('rating')
    if rating is not None:
        if isinstance(rating, bool) or not isinstance(rating, (int, float)):
            raise ValueError('rating must be a number')
        try:
            rating = float(rating)
        except OverflowError:
            raise ValueError('rating is out of range')
        if not math.isfinite(rating):
            raise ValueError('rating must be a finite number')
    fields['rating'] = rating

    for key in _LIST_KEYS:
        value = data.get(key)
        if value is not None:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f'{key} must be a list of strings')
        fields[WIRE_FIELDS[key]] = value

    sort_order = data.get('sortOrder')
    if sort_order is not None:
        if (isinstance(sort_order, bool) or not isinstance(sort_order, int)
                or not 0 <= sort_order <= MAX_POSITION):
            raise ValueError(f'sortOrder must be an integer from 0 to {MAX_POSITION}')
    fields['sort_order'] = sort_order
    return fields


def parse_id_list(data) -> List[int]:
    """Decode a reorder body: a JSON array of integer game ids."""
    if not isinstance(data, list):
        raise ValueError('Request body must be a JSON array of game ids')
    for value in data:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f'Invalid game id: {value!r}')
    return data


# ===========================================================================================
# Session / service plumbing
# ===========================================================================================

def _open_session():
    """Open a new database session."""
    if database.SessionLocal is None:
        raise OperationalError('SessionLocal', None, Exception('Database not configured'))
    return database.SessionLocal()


@contextmanager
def game_service():
    """Yield a GameService bound to a fresh session, closing it afterwards."""
    db = _open_session()
    try:
        yield GameService(GameRepository(db))
    finally:
        db.close()


def seed_demo_games(service: GameService) -> int:
    """Add :data:`DEMO_GAMES` to an empty catalog.  Returns how many were added."""
    if service.list():
        return 0
    for fields in DEMO_GAMES:
        service.add(dict(fields))
    return len(DEMO_GAMES)


def catalog_endpoint(f):
    """Map service and store errors to JSON error responses."""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except GameNotFoundError as e:
            return jsonify({'error': str(e)}), 404
        except ValueError as e:
            return jsonify({'error': str(e)}), 400
        except IntegrityError as e:
            gui_logger.warning('Store conflict: %s', e.orig)
            return jsonify({'error': 'A game with this title already exists'}), 409
        except OperationalError as e:
            gui_logger.error('Database not available: %s', e)
            return jsonify({'error': 'Database not available'}), 503
        except Exception as e:
            gui_logger.exception('Unexpected error in %s: %s', f.__name__, e)
            return jsonify({'error': f'Unexpected error: {str(e)}'}), 500
    return decorated


@app.after_request
def add_cors_headers(response):
    """Allow the browser client, served from another origin, to call the API."""
    if not request.path.startswith('/api/'):
        return response
    origins = app.config.get('CORS_ORIGINS') or []
    origin = request.headers.get('Origin')
    if '*' in origins:
        response.headers['Access-Control-Allow-Origin'] = '*'
    elif origin and origin in origins:
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Vary'] = 'Origin'
    else:
        return response
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
    response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
    return response


# ===========================================================================================
# Game Endpoints
# ===========================================================================================

@app.route('/api/games/ping', methods=['GET'])
def api_ping():
    """Liveness check"""
    return Response('pong', mimetype='text/plain')


@app.route('/api/games', methods=['POST'])
@catalog_endpoint
def api_add_game():
    """Add a game; appended at the end unless sortOrder is given."""
    fields = parse_game_payload(request.get_json(silent=True))
    with game_service() as service:
        game = service.add(fields)
        return jsonify(game.to_dict()), 201


@app.route('/api/games/<int:game_id>', methods=['PUT'])
@catalog_endpoint
def api_update_game(game_id):
    """Replace every field of a game."""
    fields = parse_game_payload(request.get_json(silent=True))
    with game_service() as service:
        game = service.update(game_id, fields)
        return jsonify(game.to_dict())


@app.route('/api/games', methods=['GET'])
@catalog_endpoint
def api_list_games():
    """List all games in display order."""
    with game_service() as service:
        return jsonify([g.to_dict() for g in service.list()])


@app.route('/api/games/<int:game_id>', methods=['GET'])
@catalog_endpoint
def api_get_game(game_id):
    with game_service() as service:
        return jsonify(service.get(game_id).to_dict())


@app.route('/api/games/search', methods=['GET'])
@catalog_endpoint
def api_search_games():
    """Case-insensitive title search."""
    query = request.args.get('q', '')
    with game_service() as service:
        return jsonify([g.to_dict() for g in service.search(query)])


@app.route('/api/games/save-order', methods=['POST'])
@catalog_endpoint
def api_reorder_games():
    """Store a new display order from a list of game ids."""
    game_ids = parse_id_list(request.get_json(silent=True))
    with game_service() as service:
        updated = service.reorder(game_ids)
    return jsonify({'updated': updated})


@app.route('/api/games/<int:game_id>', methods=['DELETE'])
@catalog_endpoint
def api_delete_game(game_id):
    with game_service() as service:
        service.delete(game_id)
    return '', 204


# ---------------------------------------------------------------------------
# API Documentation - OpenAPI 3.0 + Swagger UI
# ---------------------------------------------------------------------------

@app.route('/api/openapi.json')
def api_openapi_spec():
    """Serve the OpenAPI 3.0 specification as JSON."""
    try:
        from openapi_spec import build_spec
        server_url = request.url_root.rstrip('/')
        spec = build_spec(server_url=server_url)
        return jsonify(spec)
    except Exception as e:
        gui_logger.error(f"Error building OpenAPI spec: {e}")
        return jsonify({'error': 'Could not generate spec'}), 500


@app.route('/api/docs')
def api_swagger_ui():
    """Serve an interactive Swagger UI for the game library REST API."""
    openapi_url = '/api/openapi.json'
    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Game Library API Documentation</title>
  <link rel="stylesheet"
        href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>
    SwaggerUIBundle({{
      url: "{openapi_url}",
      dom_id: "#swagger-ui",
      presets: [SwaggerUIBundle.presets.apis, SwaggerUIBundle.SwaggerUIStandalonePreset],
      layout: "BaseLayout",
      deepLinking: true,
      defaultModelsExpandDepth: 1,
      defaultModelExpandDepth: 1,
    }});
  </script>
</body>
</html>"""
    return html, 200, {'Content-Type': 'text/html; charset=utf-8'}


def main():
    """Main entry point for the web server"""
    parser = argparse.ArgumentParser(description='Game Library Web Server')
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--host', default=None, help='Bind address (overrides config)')
    parser.add_argument('--port', type=int, default=None, help='Port (overrides config)')
    parser.add_argument('--demo', action='store_true', help='Seed sample games into an empty catalog')
    args = parser.parse_args()

    run_config = game_library.load_config(args.config)
    game_library.setup_logging(run_config['log_level'])
    app.config['CORS_ORIGINS'] = run_config['cors_origins']

    database.configure(run_config['database_url'])
    if not database.init_db():
        gui_logger.error('Database initialization failed for %s', run_config['database_url'])
        return 1
    gui_logger.info('Database initialized successfully')

    if args.demo:
        with game_service() as service:
            added = seed_demo_games(service)
        gui_logger.info('Seeded %d demo game(s)', added)

    host = args.host or run_config['host']
    port = args.port or run_config['port']

    print("\n" + "="*60)
    print("Game Library server is starting...")
    print("="*60)
    print(f"\n  API:  http://{host}:{port}/api/games")
    print(f"  Docs: http://{host}:{port}/api/docs")
    print("\nPress Ctrl+C to stop the server")
    print("="*60 + "\n")

    try:
        app.run(host=host, port=port, debug=False)
    except KeyboardInterrupt:
        print("\nGame Library server stopped")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())

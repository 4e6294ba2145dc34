"""
Flask routes for the Image Finder local API.

Contains all JSON endpoints. The ImageFinder and the IndexState are taken
from the application (see app.create_app()), never from module globals.
"""

from __future__ import annotations

import os
import threading
import logging
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request, send_file

from ..errors import (
    BusyError,
    EnumerationError,
    HashUnavailable,
    ImageFinderError,
    StorageError,
)
from ..database import normalize_root
from ..finder import ImageFinder
from ..state import IndexState
from ..utils import validators
from .orchestrator import IndexJob

# Create blueprint for routes
api = Blueprint('api', __name__)

# Module logger
_logger = logging.getLogger(__name__)

EXTENSION_KEY = 'imagefinder'
STATE_KEY = 'imagefinder.state'


def _finder() -> ImageFinder:
    return current_app.extensions[EXTENSION_KEY]


def _state() -> IndexState:
    return current_app.extensions[STATE_KEY]


def _error(message: str, status: int):
    return jsonify({'error': message}), status


# =============================================================================
# Error Handlers
# =============================================================================

@api.errorhandler(HashUnavailable)
def handle_hash_unavailable(e):
    return _error(str(e), 422)


@api.errorhandler(BusyError)
def handle_busy(e):
    return _error(str(e), 409)


@api.errorhandler(EnumerationError)
def handle_enumeration(e):
    return _error(str(e), 400)


@api.errorhandler(StorageError)
def handle_storage(e):
    _logger.error(f"Storage error: {e}")
    return _error(str(e), 500)


@api.errorhandler(ImageFinderError)
def handle_imagefinder_error(e):
    _logger.error(f"Unhandled error: {e}")
    return _error(str(e), 500)


# =============================================================================
# Route Handlers
# =============================================================================

@api.route('/api/ping')
def api_ping():
    """Simple endpoint for connection monitoring."""
    return jsonify({'status': 'ok', 'time': datetime.now().isoformat()})


@api.route('/api/roots')
def api_roots():
    """List indexed roots with their record counts."""
    counts = _finder().folder_counts()
    return jsonify({
        'roots': [{'path': path, 'count': count} for path, count in counts.items()],
    })


@api.route('/api/roots', methods=['DELETE'])
def api_delete_root():
    """
    Remove a root and every record under it.

    A path that is not a registered root still has its records removed, which
    clears records orphaned by an interrupted run.
    """
    data = request.get_json(silent=True) or {}
    path = (data.get('path') or request.args.get('path', '')).strip()
    if not path:
        return _error('path is required', 400)

    finder = _finder()
    root = normalize_root(path)
    if _state().running:
        return _error('Cannot delete while indexing is in progress', 409)

    registered = root in finder.registry
    if not registered:
        _logger.warning(f"{root} is not a registered root; removing any records under it")

    deleted = finder.delete_root(root)
    _logger.info(f"Deleted root {root} ({deleted:,} records)")
    return jsonify({
        'status': 'deleted',
        'root': root,
        'registered': registered,
        'deleted': deleted,
    })


@api.route('/api/index', methods=['POST'])
def api_index():
    """Start indexing a folder in the background."""
    data = request.get_json(silent=True)
    if not data:
        return _error('Request body required', 400)

    directory = str(data.get('directory', '')).strip()
    workers = data.get('workers')

    is_valid, error = validators.validate_index_params(directory, workers=workers)
    if not is_valid:
        return _error(error, 400)

    finder = _finder()
    state = _state()
    if finder.busy:
        return _error('Another indexing or deletion run is in progress', 409)
    if not state.begin(directory):
        return _error('Indexing is already in progress', 409)

    job = IndexJob(finder, state, directory, workers=int(workers) if workers is not None else None)

    # Start indexing in background thread
    thread = threading.Thread(target=job.run, name='imagefinder-index')
    thread.daemon = True
    thread.start()

    return jsonify({'status': 'started', 'directory': directory}), 202


@api.route('/api/status')
def api_status():
    """Get the current indexing status."""
    return jsonify(_state().to_dict())


@api.route('/api/cancel', methods=['POST'])
def api_cancel():
    """Cancel the current indexing run."""
    if _state().request_cancel():
        return jsonify({'status': 'cancel_requested'})
    return jsonify({'status': 'no_index_running'})


@api.route('/api/search', methods=['POST'])
def api_search():
    """Rank indexed images against an uploaded query image."""
    upload = request.files.get('image')
    data = upload.read() if upload is not None else request.get_data()
    if not data:
        return _error('Query image required (multipart field "image" or request body)', 400)

    matches = _finder().search(data)
    return jsonify({
        'count': len(matches),
        'matches': [m.to_dict() for m in matches],
    })


@api.route('/api/image')
def api_image():
    """Serve an indexed image file."""
    path = request.args.get('path', '')
    if not path:
        return _error('No path provided', 400)

    # Only files present in the index are served
    if not _finder().store.contains(path):
        return _error('Image is not indexed', 404)

    if not os.path.isfile(path):
        return _error('File not found', 404)

    try:
        return send_file(path)
    except OSError as e:
        _logger.error(f"Error serving file {path}: {e}")
        return _error(f'Error serving file: {e}', 500)


@api.route('/api/stats')
def api_stats():
    """Get index statistics."""
    return jsonify(_finder().stats())


@api.route('/api/prune', methods=['POST'])
def api_prune():
    """Remove records of files that no longer exist."""
    if _state().running:
        return _error('Cannot prune while indexing is in progress', 409)
    removed = _finder().prune()
    return jsonify({'status': 'pruned', 'removed': removed})

#!/usr/bin/env python3
"""
Image Finder - Local API Server
===============================
A JSON API for indexing folders and searching them by example image.

Run with: python -m imagefinder serve
Or: python -m imagefinder.app

Options:
    -q, --quiet     Quiet mode - suppress all output except errors
    -v, --verbose   Verbose mode - show all Flask request logs
    -p, --port      Port to run on (default: 5000)
    --db PATH       Index database file
"""

import argparse
import logging
from typing import Optional

from flask import Flask

from .api import api, EXTENSION_KEY, STATE_KEY
from .finder import ImageFinder
from .state import IndexState


# Logging levels
LOG_QUIET = 0    # No output except errors
LOG_MINIMAL = 1  # Startup info only (default)
LOG_VERBOSE = 2  # All Flask request logs


def create_app(finder: Optional[ImageFinder] = None, log_level: int = LOG_MINIMAL) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        finder: ImageFinder to serve (one on the default database if None)
        log_level: Logging verbosity level

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    # Configure logging based on level
    if log_level < LOG_VERBOSE:
        # Suppress Flask's default request logging
        log = logging.getLogger('werkzeug')
        log.setLevel(logging.ERROR if log_level == LOG_QUIET else logging.WARNING)

    app.extensions[EXTENSION_KEY] = finder or ImageFinder()
    app.extensions[STATE_KEY] = IndexState()

    # Register routes
    app.register_blueprint(api)

    return app


def suppress_flask_banner():
    """Suppress Flask's development server banner and startup messages."""
    try:
        import flask.cli
        flask.cli.show_server_banner = lambda *args, **kwargs: None
    except (ImportError, AttributeError):
        pass

    # Suppress werkzeug's startup log messages
    logging.getLogger('werkzeug').setLevel(logging.ERROR)


def main(argv=None):
    """Main entry point for the API server."""
    # Parse command line arguments
    parser = argparse.ArgumentParser(
        prog='imagefinder serve',
        description='Image Finder - local API server',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Quiet mode - suppress all output except errors'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose mode - show all Flask request logs'
    )
    parser.add_argument(
        '-p', '--port',
        type=int,
        default=5000,
        help='Port to run the server on (default: 5000)'
    )
    parser.add_argument(
        '--db',
        type=str,
        default=None,
        help='Index database file'
    )

    args = parser.parse_args(argv)

    # Determine log level
    if args.quiet:
        log_level = LOG_QUIET
    elif args.verbose:
        log_level = LOG_VERBOSE
    else:
        log_level = LOG_MINIMAL

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    port = args.port
    url = f'http://127.0.0.1:{port}'

    finder = ImageFinder(db_path=args.db)

    # Print startup message (unless quiet)
    if log_level >= LOG_MINIMAL:
        print()
        print("  IMAGE FINDER - local API")
        print()
        print(f"  Index:  {finder.store.db_path}")
        print(f"  Server: {url}/api/ping")
        print()
        print("  Press Ctrl+C to stop")
        print()

    # Suppress Flask banner for non-verbose modes
    if log_level < LOG_VERBOSE:
        suppress_flask_banner()

    # Create the app
    app = create_app(finder, log_level)

    # Run Flask
    try:
        app.run(
            host='127.0.0.1',
            port=port,
            debug=False,
            threaded=True,
            use_reloader=False
        )
    except KeyboardInterrupt:
        if log_level >= LOG_MINIMAL:
            print("\n  Server stopped\n")
    finally:
        finder.close()


if __name__ == '__main__':
    main()

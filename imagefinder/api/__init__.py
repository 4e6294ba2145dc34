"""
API package for Image Finder.

Provides the Flask blueprint and background indexing job for the local
JSON API.
"""

from __future__ import annotations

from .routes import api, EXTENSION_KEY, STATE_KEY
from .orchestrator import IndexJob

__all__ = ['api', 'IndexJob', 'EXTENSION_KEY', 'STATE_KEY']

"""
clipsense - content detection and one-click text transformations.

Classifies an editor buffer (JWT, secrets, JSON/YAML, CSV, SQL, markup,
colors, timestamps, markdown, code, plain text...) and offers small pure
actions that fit the detected kind.
"""

from __future__ import annotations

__version__ = "0.3.0"

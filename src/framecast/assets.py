"""
Static Assets
=============

Resolves request paths against the static root and picks a Content-Type.

Design Rules:
    - '/' maps to the configured index file
    - Paths that escape the root resolve to nothing (served as 404)
    - Content-Type comes from the extension table only, default text/plain
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote


logger = logging.getLogger(__name__)


CONTENT_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}

DEFAULT_CONTENT_TYPE = "text/plain"

NOT_FOUND_BODY = "404 Not Found"


def content_type_for(path: str) -> str:
    """MIME type for a file path, by extension."""
    return CONTENT_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_asset(root: Path, url_path: str, index: str = "index.html") -> Optional[Path]:
    """
    Map a request path to a file under root.

    Args:
        root: Static asset directory
        url_path: Request path, e.g. "/style.css"
        index: File served for "/"

    Returns:
        Path of an existing regular file inside root, or None
    """
    relative = unquote(url_path).lstrip("/")
    if relative == "":
        relative = index

    root = root.resolve()
    candidate = (root / relative).resolve()

    try:
        candidate.relative_to(root)
    except ValueError:
        logger.warning(f"Rejected path outside static root: {url_path}")
        return None

    if not candidate.is_file():
        return None

    return candidate

# rotation.py
from __future__ import annotations

import posixpath
from datetime import datetime

STAMP_FORMAT = "%Y%m%d%H%M%S"


def time_pathsafe(now: datetime) -> str:
    """Sortable, filesystem-safe timestamp: YYYYMMDDHHMMSS."""
    return now.strftime(STAMP_FORMAT)


def to_past_filename(path: str, stamp: str) -> str:
    """
    Insert `stamp` right before the extension, keeping directory and extension.

        to_past_filename("db/data.yml", "20240101120000") -> "db/data20240101120000.yml"

    Only unique per second: two rotations of the same path within one
    second produce the same name.
    """
    directory = posixpath.dirname(path) or "."
    base, ext = posixpath.splitext(posixpath.basename(path))
    return f"{directory}/{base}{stamp}{ext}"

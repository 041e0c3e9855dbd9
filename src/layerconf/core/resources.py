"""Resource lookup.

Properties files can be referred to by bare name (``application.properties``).
Such names are looked up in an ordered list of resource directories, the
same way a test runner finds files on its resource path.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

__all__ = ["find_resource", "normalize_path", "looks_like_url"]

_URL_SCHEMES = ("file", "http", "https")


def normalize_path(path: str | Path) -> Path:
    """Absolute, symlink-resolved form of ``path``. The file need not exist."""
    return Path(path).expanduser().resolve()


def find_resource(name: str, search_dirs: Iterable[str | Path]) -> Path | None:
    """Find ``name`` in the first resource directory that contains it.

    Relative resource directories are taken relative to the current working
    directory.

    Returns:
        Normalized path of the resource, or None if no directory has it
    """
    if not name:
        return None

    candidate_name = Path(name)
    if candidate_name.is_absolute():
        return None

    for directory in search_dirs:
        candidate = Path(directory) / candidate_name
        if candidate.is_file():
            logger.debug(f"Resolved resource {name} to {candidate}")
            return normalize_path(candidate)
    return None


def looks_like_url(location: str) -> bool:
    """Whether ``location`` is a ``file:``/``http:``/``https:`` URL."""
    scheme, sep, _ = location.partition(":")
    return bool(sep) and scheme.lower() in _URL_SCHEMES

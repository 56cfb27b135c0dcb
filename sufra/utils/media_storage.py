"""Stored media helpers.

Images are uploaded and processed elsewhere; this module only resolves references
for display and removes files when their owning record is deleted.
"""

from pathlib import Path

from sufra.core.config.config import settings
from sufra.core.logging import get_logger

_log = get_logger(__name__)


def is_absolute_url(reference: str) -> bool:
    return reference.startswith(("http://", "https://", "//"))


def media_url(reference: str | None) -> str | None:
    """Turn a stored image reference into a URL clients can load."""
    if not reference:
        return None
    if is_absolute_url(reference):
        return reference
    return f"{settings.media_base_url}/{reference.lstrip('/')}"


def _stored_file(reference: str, media_root: Path | None) -> Path | None:
    """Resolve a relative reference, or None when it escapes the media root."""
    root = (media_root or settings.media_root).resolve()
    target = (root / reference.lstrip("/")).resolve()
    if not target.is_relative_to(root):
        _log.warning("Ignoring media reference outside the media root: {}", reference)
        return None
    return target


def media_available(reference: str | None, media_root: Path | None = None) -> bool:
    """Whether ``reference`` can still be displayed.

    Remote references are assumed to be available; stored files must exist.
    """
    if not reference:
        return False
    if is_absolute_url(reference):
        return True
    target = _stored_file(reference, media_root)
    return target is not None and target.is_file()


def delete_media(reference: str | None, media_root: Path | None = None) -> bool:
    """Delete a stored image.

    Remote references and files outside the media root are left alone.

    Args:
        reference: Path relative to the media root, or an absolute URL.
        media_root: Override of the configured media root.

    Returns:
        bool: True when a file was removed.
    """
    if not reference or is_absolute_url(reference):
        return False
    target = _stored_file(reference, media_root)
    if target is None:
        return False
    if not target.is_file():
        _log.debug("Media file already absent: {}", target)
        return False
    target.unlink()
    _log.info("Deleted media file {}", target)
    return True

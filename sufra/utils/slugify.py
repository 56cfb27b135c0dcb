"""Slugify utility functions.

This module provides functions to convert strings into URL-friendly slugs. Arabic and
other non-Latin letters are kept as they are; only punctuation and spacing change.
"""

import re
import secrets
import string
import unicodedata

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_FALLBACK_SLUG = "item"


def slugify(value: str) -> str:
    """Convert ``value`` to a lowercase, hyphen separated slug.

    Args:
        value: Arbitrary display text.

    Returns:
        str: The slug, or ``"item"`` when nothing usable remains.
    """
    text = unicodedata.normalize("NFKC", value).lower()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text).strip("-")
    return text or _FALLBACK_SLUG


def random_suffix(length: int = 6) -> str:
    """Return ``length`` random lowercase alphanumerics."""
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(length))


def unique_slug(value: str, length: int = 6) -> str:
    """Slugify ``value`` and append a random suffix, e.g. ``kibbeh-x3k9qa``."""
    return f"{slugify(value)}-{random_suffix(length)}"

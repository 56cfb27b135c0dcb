"""Ingredient name normalization.

Produces the dedupe key stored in ``Ingredient.normalized_name``. Two spellings that
should mean the same ingredient must produce the same key, and applying ``normalize``
to its own output must change nothing.

The folding rules, in order:

* Unicode compatibility decomposition, combining marks (Latin accents and Arabic
  harakat) removed, tatweel removed, case folded.
* Arabic letter variants folded: alef forms to bare alef, alef maqsura to yeh,
  teh marbuta to heh.
* Parenthesised asides removed, e.g. ``"rice (basmati)"``.
* A leading quantity removed, e.g. ``"2 cups"`` keeps ``"cups"``. Arabic-Indic digits
  count as digits.
* Whitespace collapsed and trimmed.
"""

import re
import unicodedata

_ARABIC_FOLDS = str.maketrans(
    {
        "أ": "ا",  # alef with hamza above
        "إ": "ا",  # alef with hamza below
        "آ": "ا",  # alef with madda
        "ٱ": "ا",  # alef wasla
        "ى": "ي",  # alef maqsura -> yeh
        "ة": "ه",  # teh marbuta -> heh
        "ـ": None,  # tatweel
    }
)
_PARENTHESISED = re.compile(r"\([^()]*\)")
_LEADING_QUANTITY = re.compile(r"^[\d\s.,/⁄٫٬]+")
_WHITESPACE = re.compile(r"\s+")


def _strip_marks(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def _fold(text: str) -> str:
    # Case folding can reintroduce compatibility characters, so decompose twice
    folded = _strip_marks(_strip_marks(text).casefold())
    return folded.translate(_ARABIC_FOLDS)


def normalize(name: str | None) -> str:
    """Return the dedupe key for an ingredient name.

    Args:
        name: Free text ingredient name as typed by a user or returned by the AI.

    Returns:
        str: The normalized key. Empty when nothing resolvable is left, in which case
        callers skip the item.
    """
    if not name:
        return ""
    text = _fold(name)
    previous = None
    while previous != text:
        previous = text
        text = _PARENTHESISED.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()
    text = _LEADING_QUANTITY.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()

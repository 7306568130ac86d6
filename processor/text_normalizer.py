"""Text normalization for case- and accent-insensitive search."""
import unicodedata
from typing import Optional


def normalize(text: Optional[str]) -> str:
    """
    Normalize text for comparison.

    Decomposes the text (NFD), drops combining marks and casefolds it, so
    "MÚSICA", "Música" and "musica" all normalize to "musica". Applying it
    twice gives the same result as applying it once.

    Args:
        text: Text to normalize (None is treated as empty)

    Returns:
        Normalized text, only meant for comparisons
    """
    if not text:
        return ''

    # casefold first, it can produce decomposable characters
    folded = unicodedata.normalize('NFD', text.casefold())
    return ''.join(char for char in folded if not unicodedata.combining(char))


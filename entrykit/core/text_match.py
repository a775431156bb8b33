"""
text_match.py - Text Matching Tools

Provides normalization for comparison and filename validation
"""

from typing import Optional, Tuple
import re
import unicodedata

_COMBINING_MARKS = re.compile("[\u0300-\u036f]")


def normalize(text: Optional[str]) -> Optional[str]:
    """
    Canonicalize text for fuzzy comparison

    Applies NFKD decomposition and strips combining diacritical marks
    (U+0300-U+036F), so "Pokémon" compares equal to "Pokemon".
    Never used for display or for identifier comparison.

    Args:
        text: Text to normalize (None and "" are returned unchanged)

    Returns:
        Normalized text
    """
    if not text:
        return text
    return _COMBINING_MARKS.sub("", unicodedata.normalize("NFKD", text))


def split_extension(name: str) -> Tuple[str, Optional[str]]:
    """
    Split a filename at its last dot

    Returns:
        (base, extension) - extension is None when there is no dot
    """
    idx = name.rfind(".")
    if idx == -1:
        return name, None
    return name[:idx], name[idx + 1:]


def is_valid_filename(name: str) -> Tuple[bool, Optional[str]]:
    """
    Check if filename is valid on disk

    Args:
        name: Filename

    Returns:
        (is_valid, error_reason)
    """
    if not name:
        return False, "Filename cannot be empty"

    if name in (".", ".."):
        return False, f"Filename is reserved: {name}"

    invalid_chars = '<>:"/\\|?*\0'
    for char in invalid_chars:
        if char in name:
            return False, f"Filename contains invalid character: {char!r}"

    if name.endswith(' ') or name.endswith('.'):
        return False, "Filename cannot end with space or dot"

    if len(name.encode("utf-8")) > 255:
        return False, "Filename exceeds 255 bytes"

    return True, None

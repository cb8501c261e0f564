"""
Miscellaneous utility helper functions.
Provides common functionality used across the application.
"""

import random
import string
import uuid


def generate_id() -> str:
    """Generate an opaque record id (9 hex chars)."""
    return uuid.uuid4().hex[:9]


def generate_unique_code(prefix: str = '', length: int = 8) -> str:
    """
    Generate unique code for transactions, etc.

    Args:
        prefix: Optional prefix (e.g., 'tx')
        length: Length of random part

    Returns:
        Unique code string
    """
    random_part = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))

    if prefix:
        return f'{prefix}-{random_part}'

    return random_part


def truncate_text(text: str, max_length: int = 100, suffix: str = '...') -> str:
    """
    Truncate text to maximum length with suffix.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if not text or len(text) <= max_length:
        return text or ''

    return text[:max_length - len(suffix)] + suffix


def contains_text(haystack, needle: str) -> bool:
    """Case-insensitive substring match that tolerates None."""
    if not haystack:
        return False
    return needle.lower() in str(haystack).lower()

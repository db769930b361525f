"""
Text sanitization and validation for user-submitted comments
"""
import re
from typing import List

MAX_COMMENT_LENGTH = 500
MAX_USERNAME_LENGTH = 50

_SCRIPT_RE = re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE)
_TAG_RE = re.compile(r'<[^>]*>')

URL_PATTERNS = [
    re.compile(r'https?://', re.IGNORECASE),
    re.compile(r'www\.', re.IGNORECASE),
    re.compile(r'\.[a-z]{2,}/', re.IGNORECASE),
    re.compile(r'\b[a-z0-9-]+\.(com|net|org|edu|gov|io|co|uk|us)\b', re.IGNORECASE),
]


def sanitize_text(text) -> str:
    """
    Remove markup from free text.

    Script elements are dropped together with their content, every other
    tag is stripped, and surrounding whitespace is trimmed.
    """
    if not text:
        return ''

    sanitized = _SCRIPT_RE.sub('', str(text))
    sanitized = _TAG_RE.sub('', sanitized)
    return sanitized.strip()


def contains_url(text) -> bool:
    """Check whether text carries anything that looks like a link"""
    if not text:
        return False
    return any(pattern.search(text) for pattern in URL_PATTERNS)


def validate_username(username) -> List[str]:
    errors = []

    if not username or not username.strip():
        errors.append('Username is required')

    if username and len(username) > MAX_USERNAME_LENGTH:
        errors.append(f'Username must be {MAX_USERNAME_LENGTH} characters or less')

    if contains_url(username):
        errors.append('Username cannot contain URLs or links')

    return errors


def validate_comment(text, username) -> List[str]:
    """
    Validate a comment before it is stored

    Args:
        text: Sanitized comment text
        username: Sanitized author name

    Returns:
        Every violation found, empty list when the comment is acceptable
    """
    errors = []

    if not text or not text.strip():
        errors.append('Comment cannot be empty')

    if text and len(text) > MAX_COMMENT_LENGTH:
        errors.append(f'Comment must be {MAX_COMMENT_LENGTH} characters or less')

    if contains_url(text):
        errors.append('Comments cannot contain URLs or links')

    if not username or not username.strip():
        errors.append('Username is required')

    if username and len(username) > MAX_USERNAME_LENGTH:
        errors.append(f'Username must be {MAX_USERNAME_LENGTH} characters or less')

    return errors

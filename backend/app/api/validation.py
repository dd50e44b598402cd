"""
Shared validation utilities for API endpoints.

Path and query identifiers arrive as raw strings so that malformed values can
be reported with the API's own error messages instead of framework defaults.
"""

from typing import Optional

from app.core.exceptions import ValidationError

MAX_ID = 2147483647  # Max PostgreSQL integer


def parse_positive_id(value: Optional[str], error_message: str) -> int:
    """
    Parse a positive integer identifier.

    Raises:
        ValidationError: If the value is not a positive integer in range
    """
    if value is None:
        raise ValidationError(error_message)
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        raise ValidationError(error_message)
    parsed = int(value)
    if parsed < 1 or parsed > MAX_ID:
        raise ValidationError(error_message)
    return parsed


def parse_content_id(value: str) -> int:
    return parse_positive_id(value, "Invalid content ID")


def parse_tag_id(value: str) -> int:
    return parse_positive_id(value, "Invalid tag ID")


def parse_optional_tag_id(value: Optional[str]) -> Optional[int]:
    """Tag filter from a query string; empty means no filter."""
    if value is None or value == "":
        return None
    return parse_tag_id(value)

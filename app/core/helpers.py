"""
Helper functions for common infrastructure operations.

This module provides domain-agnostic utility functions for identifier
validation. They have no knowledge of domain concepts.

Usage:
    from core.helpers import parse_uuid

    if parse_uuid(raw_id) is None:
        return Response({"error": "Invalid id"}, status=400)
"""

from __future__ import annotations

import uuid
from typing import Any


def parse_uuid(value: Any) -> uuid.UUID | None:
    """
    Parse a value into a UUID.

    Accepts UUID instances and their string forms.

    Args:
        value: Candidate identifier

    Returns:
        UUID if the value is well formed, None otherwise

    Example:
        parse_uuid("550e8400-e29b-41d4-a716-446655440000")  # UUID(...)
        parse_uuid("not-a-uuid")  # None
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


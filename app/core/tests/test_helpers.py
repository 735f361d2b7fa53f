"""
Tests for identifier helpers.
"""

import uuid

import pytest

from core.helpers import parse_uuid


class TestParseUuid:
    def test_parses_string(self):
        value = "550e8400-e29b-41d4-a716-446655440000"

        assert parse_uuid(value) == uuid.UUID(value)

    def test_passes_uuid_through(self):
        value = uuid.uuid4()

        assert parse_uuid(value) is value

    @pytest.mark.parametrize("value", ["", "not-a-uuid", None, 42, ["x"]])
    def test_rejects_malformed(self, value):
        assert parse_uuid(value) is None


"""Unit tests for validation helpers.

Tests cover:
- validate_not_empty / validate_max_length
- validate_client_id rules (type, blank, length, separator)
- validate_message
"""

import pytest

from sse_cluster.core.enums import ErrorCode
from sse_cluster.core.result import Failure, Success
from sse_cluster.core.validation import (
    validate_client_id,
    validate_max_length,
    validate_message,
    validate_not_empty,
)


@pytest.mark.unit
class TestGenericValidators:
    """Test generic helpers."""

    def test_not_empty_accepts_value(self):
        assert validate_not_empty("x", "name") == Success(value="x")

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_not_empty_rejects_blank(self, value):
        result = validate_not_empty(value, "name")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.VALIDATION_FAILED
        assert result.error.field == "name"

    def test_max_length(self):
        assert isinstance(validate_max_length("abc", 3, "name"), Success)
        assert isinstance(validate_max_length("abcd", 3, "name"), Failure)


@pytest.mark.unit
class TestValidateClientId:
    """Test client id validation."""

    @pytest.mark.parametrize("client_id", ["c1", "user-42", "a" * 256, "a:b"])
    def test_valid_ids(self, client_id):
        assert validate_client_id(client_id) == Success(value=client_id)

    @pytest.mark.parametrize(
        "client_id",
        [None, 42, "", "   ", "a" * 257, "a::b", "::"],
    )
    def test_invalid_ids(self, client_id):
        result = validate_client_id(client_id)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_CLIENT_ID
        assert result.error.field == "client_id"

    def test_separator_message(self):
        result = validate_client_id("tenant::user")

        assert isinstance(result, Failure)
        assert "::" in result.error.message


@pytest.mark.unit
class TestValidateMessage:
    """Test message payload validation."""

    @pytest.mark.parametrize("message", ["", "hello", "a::b"])
    def test_strings_are_valid(self, message):
        assert validate_message(message) == Success(value=message)

    def test_non_string_is_invalid(self):
        result = validate_message(b"bytes")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_MESSAGE

"""
tests/core/test_core_exceptions.py - core/exceptions.py tests
"""

import pytest

from core.exceptions import (
    FETCH_REASONS,
    ConfigError,
    FetchCancelledError,
    FetchError,
    InvalidFilterError,
    QuakeInventoryError,
    UninitializedCacheError,
    UnknownResourceKindError,
    format_error_for_user,
    is_authorization_error,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            FetchError("boom"),
            FetchCancelledError(),
            InvalidFilterError("region", "not an attribute"),
            UnknownResourceKindError("volumes"),
            UninitializedCacheError(),
            ConfigError("timeout", "must be positive"),
        ],
    )
    def test_all_derive_from_base(self, error):
        assert isinstance(error, QuakeInventoryError)

    def test_cancelled_is_fetch_error(self):
        error = FetchCancelledError()

        assert isinstance(error, FetchError)
        assert error.reason == FetchError.CANCELLED


class TestFetchError:
    def test_message_includes_reason(self):
        error = FetchError("connection refused", reason=FetchError.NETWORK)

        assert str(error) == "inventory fetch failed (network): connection refused"

    def test_status_code_in_details(self):
        error = FetchError("forbidden", reason=FetchError.AUTHORIZATION, status_code=403)

        assert error.details == {"reason": "authorization", "status_code": 403}

    def test_cause_in_str(self):
        cause = OSError("disk gone")
        error = FetchError("cannot read", reason=FetchError.IO, cause=cause)

        assert str(error).endswith(": disk gone")
        assert error.cause is cause

    def test_reasons(self):
        assert len(FETCH_REASONS) == len(set(FETCH_REASONS)) == 6


class TestInvalidFilterError:
    def test_names_attribute(self):
        error = InvalidFilterError("region", "not an attribute", kind="images")

        assert error.attribute == "region"
        assert str(error) == "invalid filter [region] for images: not an attribute"
        assert error.details == {"attribute": "region", "kind": "images"}

    def test_without_kind(self):
        error = InvalidFilterError("flavor", "at least one value is required")

        assert str(error).startswith("invalid filter [flavor]:")


class TestUtilities:
    def test_to_dict(self):
        data = ConfigError("timeout", "must be positive").to_dict()

        assert data["error_type"] == "ConfigError"
        assert data["details"] == {"config_key": "timeout"}
        assert data["cause"] is None

    def test_unknown_kind_lists_known(self):
        error = UnknownResourceKindError("volumes", known=["images", "usage"])

        assert "images, usage" in str(error)

    def test_is_authorization_error(self):
        assert is_authorization_error(FetchError("denied", reason=FetchError.AUTHORIZATION)) is True
        assert is_authorization_error(FetchError("down")) is False
        assert is_authorization_error(ValueError("x")) is False

    def test_format_error_for_user(self):
        assert "check the API token" in format_error_for_user(
            FetchError("denied", reason=FetchError.AUTHORIZATION)
        )
        assert format_error_for_user(UninitializedCacheError()) == "inventory cache has not been refreshed yet"
        assert format_error_for_user(ValueError("bad")) == "ValueError: bad"

"""
Tests for codecs and helper utilities.
"""

import pytest

from restpipe.codecs import (
    USE_DEFAULT,
    apply_deserializer,
    apply_serializer,
    form_encode,
    is_form,
    json_decode,
    json_encode,
    resolve,
)
from restpipe.exceptions import SerializationError
from restpipe.utils import (
    backoff_delay,
    build_url,
    canonical_header,
    merge_headers,
    sanitize_headers,
)


class TestCodecs:
    @pytest.mark.parametrize(
        "value",
        [
            {"id": 1, "color": "blue"},
            [1, "two", None, True, 3.5],
            {"nested": {"list": [{"a": []}]}, "unicode": "café ✓"},
            "plain",
            0,
        ],
    )
    def test_json_round_trip(self, value):
        """Test JSON encode and decode agree."""
        assert json_decode(json_encode(value)) == value

    def test_json_encode_is_compact_utf8(self):
        """Test JSON output is compact UTF-8."""
        assert json_encode({"a": "é"}) == '{"a":"é"}'.encode("utf-8")

    def test_json_decode_accepts_str(self):
        """Test decoding a str body."""
        assert json_decode('{"a": 1}') == {"a": 1}

    def test_form_encode(self):
        """Test form encoding with repeated keys."""
        assert form_encode({"a": "1", "b": ["x", "y"]}) == b"a=1&b=x&b=y"
        assert form_encode("a=1") == b"a=1"

    def test_is_form(self):
        """Test form content type detection."""
        assert is_form("application/x-www-form-urlencoded; charset=utf-8")
        assert not is_form("application/json")
        assert not is_form(None)

    def test_use_default_is_falsy_singleton(self):
        """Test the USE_DEFAULT sentinel."""
        assert not USE_DEFAULT
        assert type(USE_DEFAULT)() is USE_DEFAULT
        assert repr(USE_DEFAULT) == "USE_DEFAULT"


class TestResolve:
    def test_use_default_falls_back(self):
        """Test USE_DEFAULT resolves to the instance codec."""
        assert resolve(USE_DEFAULT, json_encode) is json_encode

    def test_none_means_no_processing(self):
        """Test None resolves to no codec."""
        assert resolve(None, json_encode) is None

    def test_given_function_wins(self):
        """Test an explicit codec wins."""
        custom = lambda body: b"x"  # noqa: E731
        assert resolve(custom, json_encode) is custom

    def test_non_callable_rejected(self):
        """Test a non-callable codec is rejected."""
        with pytest.raises(TypeError):
            resolve("json", json_encode)

    def test_apply_serializer_skips_missing_body(self):
        """Test a None body is not serialized."""
        assert apply_serializer(json_encode, None) is None

    def test_apply_deserializer_skips_empty_content(self):
        """Test empty content is not deserialized."""
        def boom(content):
            raise AssertionError("should not be called")

        assert apply_deserializer(boom, b"") is None

    def test_codec_errors_are_wrapped(self):
        """Test codec failures become SerializationError."""
        with pytest.raises(SerializationError) as exc_info:
            apply_deserializer(json_decode, b"{broken")

        assert isinstance(exc_info.value.__cause__, ValueError)


class TestUtils:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("content_type", "Content-Type"),
            ("content-type", "Content-Type"),
            ("Content-Type", "Content-Type"),
            ("ACCEPT", "Accept"),
            ("x_request_id", "X-Request-Id"),
        ],
    )
    def test_canonical_header(self, name, expected):
        """Test header name canonicalisation."""
        assert canonical_header(name) == expected

    def test_merge_headers_later_wins_and_none_removes(self):
        """Test header merge order and removal."""
        merged = merge_headers(
            {"Accept": "application/json", "User-Agent": "a"},
            {"accept": "text/csv"},
            {"user_agent": None},
        )

        assert dict(merged) == {"Accept": "text/csv"}

    def test_build_url(self):
        """Test URL building with query parameters."""
        url = build_url("https://api.example.com/v1", "/items", {"q": "a b"}, {"tag": ["x", "y"]})

        assert url == "https://api.example.com/v1/items?q=a+b&tag=x&tag=y"

    def test_build_url_skips_none_values(self):
        """Test None query values are skipped."""
        assert build_url("http://h", "p", {"a": None}) == "http://h/p"

    def test_backoff_delay(self):
        """Test backoff growth and cap."""
        assert backoff_delay(3, 0) == 0.0
        assert 0.5 <= backoff_delay(0, 0.5) <= 1.0
        assert backoff_delay(20, 1.0) == 30.0

    def test_sanitize_headers(self):
        """Test sensitive headers are redacted."""
        sanitized = sanitize_headers({"Authorization": "Bearer sk", "Accept": "*/*"})

        assert sanitized == {"Authorization": "***REDACTED***", "Accept": "*/*"}

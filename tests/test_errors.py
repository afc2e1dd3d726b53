"""Tests for weather error kinds."""

import pytest

from unified_weather.core.errors import (
    APIError,
    DecodingError,
    InvalidURLError,
    LocationNotFoundError,
    NetworkError,
    NoDataAvailableError,
    NoProviderAvailableError,
    RateLimitedError,
    UnknownWeatherError,
    UnsupportedLocationError,
    WeatherError,
)


class TestErrorEquality:
    """Errors compare by kind and payload."""

    def test_same_kind_same_payload(self):
        assert LocationNotFoundError("Atlantis") == LocationNotFoundError("Atlantis")
        assert APIError(500, "down") == APIError(500, "down")
        assert RateLimitedError() == RateLimitedError()
        assert NoProviderAvailableError() == NoProviderAvailableError()

    def test_different_payload(self):
        assert LocationNotFoundError("Atlantis") != LocationNotFoundError("Lemuria")
        assert APIError(500) != APIError(503)
        assert APIError(500, "down") != APIError(500)

    def test_different_kind(self):
        assert RateLimitedError() != NoDataAvailableError()
        assert UnsupportedLocationError("x") != LocationNotFoundError("x")

    def test_cause_is_ignored_for_transport_and_decoding(self):
        """Network and decoding errors compare by kind only."""
        assert NetworkError(TimeoutError("a")) == NetworkError(ConnectionError("b"))
        assert DecodingError(ValueError("a")) == DecodingError(KeyError("b"))
        assert NetworkError(ValueError("a")) != DecodingError(ValueError("a"))

    def test_hashable(self):
        errors = {RateLimitedError(), RateLimitedError(), APIError(502, "x")}
        assert len(errors) == 2


class TestErrorMessages:
    """Every error carries a readable message."""

    @pytest.mark.parametrize(
        ("error", "message"),
        [
            (LocationNotFoundError("Atlantis"), "Location not found: Atlantis"),
            (UnsupportedLocationError("outside NWS"), "Location not supported: outside NWS"),
            (APIError(503, "NWS service unavailable"), "API error 503: NWS service unavailable"),
            (APIError(418), "API error 418: Unknown"),
            (RateLimitedError(), "Rate limited - please try again later"),
            (InvalidURLError("ht!tp://"), "Invalid URL: ht!tp://"),
            (UnknownWeatherError("boom"), "Unknown error: boom"),
        ],
    )
    def test_message(self, error, message):
        assert str(error) == message

    def test_network_error_mentions_cause(self):
        assert "refused" in str(NetworkError(ConnectionError("connection refused")))

    def test_all_kinds_are_weather_errors(self):
        for error in (
            LocationNotFoundError("x"),
            UnsupportedLocationError("x"),
            NetworkError(OSError()),
            DecodingError(ValueError()),
            APIError(500),
            NoDataAvailableError(),
            RateLimitedError(),
            NoProviderAvailableError(),
            InvalidURLError("x"),
            UnknownWeatherError("x"),
        ):
            assert isinstance(error, WeatherError)

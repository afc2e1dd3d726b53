"""Error kinds raised by weather providers and the client."""


class WeatherError(Exception):
    """Base exception for every failure surfaced by the weather client.

    Errors compare equal when they are the same kind and carry the same payload,
    so callers (and retry classification) can match on values instead of instances.

    Example:
        >>> LocationNotFoundError("Seattle") == LocationNotFoundError("Seattle")
        True
        >>> RateLimitedError() == RateLimitedError()
        True
    """

    def _payload(self) -> tuple:
        return ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeatherError):
            return NotImplemented
        return type(self) is type(other) and self._payload() == other._payload()

    def __hash__(self) -> int:
        return hash((type(self), self._payload()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self._payload()!r}"


class LocationNotFoundError(WeatherError):
    """Raised when a city name cannot be geocoded."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Location not found: {query}")

    def _payload(self) -> tuple:
        return (self.query,)


class UnsupportedLocationError(WeatherError):
    """Raised when a provider does not cover the requested location."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Location not supported: {reason}")

    def _payload(self) -> tuple:
        return (self.reason,)


class NetworkError(WeatherError):
    """Raised when the transport fails (connection refused, DNS, timeout)."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Network error: {cause}")


class DecodingError(WeatherError):
    """Raised when an upstream body is not valid JSON or has an unexpected shape."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Failed to decode response: {cause}")


class APIError(WeatherError):
    """Raised when an upstream API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        self.message = message
        super().__init__(f"API error {status_code}: {message or 'Unknown'}")

    def _payload(self) -> tuple:
        return (self.status_code, self.message)


class NoDataAvailableError(WeatherError):
    """Raised when the upstream answered but had nothing usable."""

    def __init__(self):
        super().__init__("No weather data available for this location")


class RateLimitedError(WeatherError):
    """Raised on HTTP 429."""

    def __init__(self):
        super().__init__("Rate limited - please try again later")


class NoProviderAvailableError(WeatherError):
    """Raised when no configured provider supports the location."""

    def __init__(self):
        super().__init__("No weather provider available for this location")


class InvalidURLError(WeatherError):
    """Raised when an upstream URL cannot be built or parsed."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid URL: {url}")

    def _payload(self) -> tuple:
        return (self.url,)


class UnknownWeatherError(WeatherError):
    """Raised for failures that fit no other error kind."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Unknown error: {message}")

    def _payload(self) -> tuple:
        return (self.message,)

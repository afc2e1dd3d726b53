"""Shared upstream request helpers: status classification, decoding and retries."""

from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..core import retry
from ..core.errors import (
    APIError,
    DecodingError,
    InvalidURLError,
    NetworkError,
    RateLimitedError,
    UnsupportedLocationError,
)
from ..core.retry import RetryPolicy

ModelT = TypeVar("ModelT", bound=BaseModel)


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    source: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    not_found_unsupported: bool = True,
) -> Any:
    """Issue one GET and translate every failure into a WeatherError.

    Status mapping:
    - 404 -> UnsupportedLocationError (the provider does not cover the location),
      or APIError(404) when ``not_found_unsupported`` is false
    - 429 -> RateLimitedError
    - 5xx -> APIError with a message naming the source
    - any other non-2xx -> APIError without a message
    - unparseable body -> DecodingError
    - transport failure (timeout, refused, DNS) -> NetworkError

    Args:
        client: Shared async HTTP client
        url: Absolute URL to fetch
        source: Upstream name used in messages and logs
        params: Query parameters
        headers: Extra request headers
        not_found_unsupported: Treat 404 as "location not covered"

    Returns:
        Decoded JSON body
    """
    try:
        logger.debug("Fetching from upstream", source=source, url=url)
        response = await client.get(url, params=params, headers=headers)
    except httpx.InvalidURL as e:
        raise InvalidURLError(url) from e
    except httpx.HTTPError as e:
        logger.warning("Upstream request failed", source=source, error=str(e))
        raise NetworkError(e) from e

    status_code = response.status_code
    if status_code == 404 and not_found_unsupported:
        raise UnsupportedLocationError(f"Location not supported by {source}")
    if status_code == 429:
        logger.warning("Upstream rate limited", source=source)
        raise RateLimitedError()
    if status_code >= 500:
        logger.warning("Upstream returned 5xx error", source=source, status_code=status_code)
        raise APIError(status_code, f"{source} service unavailable")
    if not 200 <= status_code < 300:
        logger.warning("Upstream returned error", source=source, status_code=status_code)
        raise APIError(status_code)

    try:
        return response.json()
    except ValueError as e:
        raise DecodingError(e) from e


def decode(model: type[ModelT], data: Any) -> ModelT:
    """Validate a decoded JSON body against its schema.

    Example:
        >>> from ..models.nws import StationsResponse
        >>> decode(StationsResponse, {"features": []}).features
        []
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodingError(e) from e


async def fetch_model(
    client: httpx.AsyncClient,
    url: str,
    model: type[ModelT],
    *,
    source: str,
    policy: RetryPolicy,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> ModelT:
    """GET ``url`` through the retry executor and decode it into ``model``."""

    async def attempt() -> ModelT:
        data = await get_json(client, url, source=source, params=params, headers=headers)
        return decode(model, data)

    return await retry.execute(attempt, policy=policy)

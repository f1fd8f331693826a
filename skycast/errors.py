"""Errors raised by the resolver, the fetcher and the network layer.

Every failure that reaches a caller is a :class:`SkycastError` subclass with a
``user_message`` suitable for display. Persistence failures are never raised;
:class:`skycast.storage.CacheStore` logs and absorbs them.
"""

from typing import Optional


class SkycastError(Exception):
    user_message = "Something went wrong. Please try again."


class InvalidInput(SkycastError):
    user_message = "Type a city to search."


class RequestTimeout(SkycastError):
    user_message = "The weather service took too long to respond. Please try again."


class NetworkError(SkycastError):
    user_message = "Unable to reach the weather service. Check your connection."


class UpstreamError(SkycastError):
    user_message = "Unable to fetch weather right now."

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFound(SkycastError):
    user_message = "City not found"

    def __init__(self, query: str):
        super().__init__(f"No results found for '{query}'")
        self.query = query


class RateLimited(SkycastError):
    def __init__(self, key: str, retry_after: int):
        super().__init__(f"Too many requests for {key}; retry in {retry_after}s")
        self.key = key
        self.retry_after = retry_after

    @property
    def user_message(self) -> str:
        return f"Please wait {self.retry_after}s before refreshing this location again."

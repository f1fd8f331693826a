import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from .errors import NetworkError, RequestTimeout, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 8.0


async def get_json(url: str, params: Dict[str, Any], *, timeout: float = DEFAULT_TIMEOUT,
                   client: Optional[httpx.AsyncClient] = None) -> Any:
    """GET ``url`` and decode the JSON body, bounded by ``timeout`` seconds.

    The deadline covers the whole exchange, not just each socket phase: when
    it fires the request is cancelled and :class:`RequestTimeout` is raised.
    Transport failures become :class:`NetworkError`; a non-2xx status or an
    undecodable body becomes :class:`UpstreamError`. Nothing is retried.
    """

    async def _fetch(c: httpx.AsyncClient) -> httpx.Response:
        return await asyncio.wait_for(c.get(url, params=params, timeout=timeout), timeout)

    try:
        if client is None:
            async with httpx.AsyncClient() as local_client:
                resp = await _fetch(local_client)
        else:
            resp = await _fetch(client)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        logger.warning("Request to %s timed out after %.1fs", url, timeout)
        raise RequestTimeout(f"Request to {url} timed out after {timeout}s") from e
    except httpx.RequestError as e:
        logger.warning("Network error for %s: %r", url, e)
        raise NetworkError(f"Network error while requesting {url}: {e}") from e

    if not resp.is_success:
        text = resp.text
        logger.warning("%s returned %s; response: %s", url, resp.status_code,
                       text[:200] + "..." if len(text) > 200 else text)
        raise UpstreamError(f"{url} returned {resp.status_code}", status_code=resp.status_code)

    try:
        return resp.json()
    except ValueError as e:
        raise UpstreamError(f"{url} returned a body that is not JSON", status_code=resp.status_code) from e

import logging
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from .errors import TransportError, UpstreamError
from .settings import settings

logger = logging.getLogger(__name__)

QueryValue = Union[str, bool, None]
Query = Mapping[str, QueryValue]


def build_params(query: Query) -> Dict[str, str]:
    """Drop absent keys and render booleans as the tokens the CAD API expects."""
    params: Dict[str, str] = {}
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        else:
            params[key] = str(value)
    return params


async def fetch_close_approaches(
    query: Query,
    *,
    timeout: Optional[float] = None,
    http: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    params = build_params(query)
    url = settings.cad_api_url
    if timeout is None:
        timeout = settings.upstream_timeout_seconds

    owns_client = http is None
    http = http or httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )
    try:
        request = http.build_request("GET", url, params=params, timeout=timeout)
        logger.info("Fetching from URL: %s", request.url)
        try:
            resp = await http.send(request)
        except httpx.RequestError as e:
            logger.error("Error fetching close-approach data: %s", e)
            raise TransportError(e) from e

        if not resp.is_success:
            logger.error("API Error: %s %s", resp.status_code, resp.text)
            raise UpstreamError(resp.status_code, resp.text)

        try:
            return resp.json()
        except ValueError:
            logger.error("Non-JSON body from upstream: %s", resp.text[:200])
            raise UpstreamError(resp.status_code, resp.text)
    finally:
        if owns_client:
            await http.aclose()


async def earth_approaches(
    date_min: str = "now",
    date_max: str = "+60",
    dist_max: str = "0.05",
    **kwargs: Any,
) -> Dict[str, Any]:
    return await fetch_close_approaches(
        {
            "date-min": date_min,
            "date-max": date_max,
            "dist-max": dist_max,
            "body": "Earth",
            "sort": "date",
        },
        **kwargs,
    )


async def object_approaches(
    designation: str,
    date_min: Optional[str] = None,
    date_max: Optional[str] = None,
    dist_max: str = "1",
    **kwargs: Any,
) -> Dict[str, Any]:
    # No date defaults here; the routes supply them.
    return await fetch_close_approaches(
        {
            "des": designation,
            "date-min": date_min,
            "date-max": date_max,
            "dist-max": dist_max,
            "fullname": True,
            "diameter": True,
        },
        **kwargs,
    )

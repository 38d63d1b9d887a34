from __future__ import annotations

"""Small HTTP helper with retry, used for SPSP landmark lookups.

Uses stdlib urllib so the library adds no HTTP client dependency. Focus: GET
JSON with limited retries and exponential backoff.
"""
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger("ilp_price.http")


class HttpError(Exception):
    pass


def get_json(
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = 5.0,
    retries: int = 2,
    backoff: float = 0.5,
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    request = urllib.request.Request(url, headers=dict(headers or {}))
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
                if resp.status >= 400:
                    raise HttpError(f"HTTP {resp.status} for {url}")
                data = json.loads(resp.read().decode("utf-8"))
                if not isinstance(data, dict):
                    raise HttpError(f"expected a JSON object from {url}")
                return data
        except (
            urllib.error.URLError,
            TimeoutError,
            HttpError,
            ValueError,
        ) as e:  # ValueError for JSON decode
            last_err = e
            if attempt == retries:
                break
            logger.debug("retrying %s after attempt %d: %s", url, attempt + 1, e)
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")

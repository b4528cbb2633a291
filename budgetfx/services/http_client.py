from __future__ import annotations

"""Lightweight HTTP client util with retry.

Uses stdlib urllib; the only upstream call is a single small JSON GET per cache
refresh. Focus: GET JSON with an explicit timeout and limited retries.
"""
import http.client
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Dict, Optional

logger = logging.getLogger("budgetfx.http")

USER_AGENT = "budgetfx/0.1 (+rates)"


class HttpError(Exception):
    pass


def get_json(
    url: str, *, timeout: float = 5.0, retries: int = 1, backoff: float = 0.5
) -> Dict[str, Any]:
    """GET `url` and decode a JSON object body.

    Raises HttpError once all attempts failed: transport error, timeout,
    non-2xx status, undecodable body, or a body that is not a JSON object.
    """
    last_err: Optional[Exception] = None
    request = urllib.request.Request(
        url, headers={"Accept": "application/json", "User-Agent": USER_AGENT}
    )
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
                if not 200 <= resp.status < 300:
                    raise HttpError(f"HTTP {resp.status} for {url}")
                payload = json.loads(resp.read().decode("utf-8"))
            if not isinstance(payload, dict):
                raise HttpError(f"expected a JSON object from {url}")
            return payload
        except (
            urllib.error.URLError,
            http.client.HTTPException,
            OSError,
            HttpError,
            ValueError,
        ) as e:  # ValueError for JSON decode; OSError covers resets and timeouts
            last_err = e
            logger.debug("GET %s failed on attempt %d: %s", url, attempt + 1, e)
            if attempt == retries:
                break
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")

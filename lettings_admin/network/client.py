"""
Client module for calling the admin backend API with retries for idempotent reads.
"""

import time
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin

import requests
import structlog

from lettings_admin.config import BACKEND_URL, HTTP_TIMEOUT_SECONDS
from lettings_admin.metrics import api_latency, api_requests

logger = structlog.get_logger(__name__)

MAX_RETRIES = 2
RETRY_DELAY = 0.5
IDEMPOTENT_METHODS = {"GET", "HEAD", "PUT", "DELETE"}


def should_retry(res: Optional[requests.Response], err: Optional[Exception]) -> bool:
    """
    Determine whether the request should be retried based on response or error.

    Args:
        res (Optional[requests.Response]): Response object if available.
        err (Optional[Exception]): Exception raised by the request, if any.

    Returns:
        bool: True if the request should be retried, False otherwise.
    """
    if res is not None and res.status_code == 429:
        return True
    if isinstance(err, (requests.Timeout, requests.ConnectionError)):
        return True
    if res is not None and 500 <= res.status_code < 600:
        return True
    return False


def auth_headers(access_token: Optional[str]) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    return headers


def _parse_body(res: requests.Response) -> Dict[str, Any]:
    try:
        body = res.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {"data": body}


def request_json(
    method: str,
    path: str,
    access_token: Optional[str] = None,
    json_body: Optional[Dict[str, Any]] = None,
    base_url: str = BACKEND_URL,
) -> Tuple[Dict[str, Any], int]:
    """
    Call an admin backend endpoint and return its JSON body and status code.

    Non-2xx responses are returned, not raised, so callers can read the error
    payload. Idempotent methods are retried on 429, 5xx, timeouts and connection
    errors; POST is sent exactly once.

    Args:
        method (str): HTTP method.
        path (str): Endpoint path relative to base_url (e.g. 'api/properties').
        access_token (Optional[str]): Caller's bearer token, passed through as-is.
        json_body (Optional[Dict[str, Any]]): JSON payload for writes.
        base_url (str): Service root. Defaults to BACKEND_URL.

    Returns:
        Tuple[Dict[str, Any], int]: Parsed JSON body ({} if not JSON) and HTTP status code.

    Raises:
        requests.RequestException: If no response could be obtained.
    """
    method = method.upper()
    url = urljoin(base_url.rstrip("/") + "/", path.lstrip("/"))
    retryable = method in IDEMPOTENT_METHODS
    retries = 0

    while True:
        res: Optional[requests.Response] = None
        try:
            logger.debug("Requesting %s %s", method, path)

            start_time = time.time()
            res = requests.request(
                method,
                url,
                headers=auth_headers(access_token),
                json=json_body,
                timeout=HTTP_TIMEOUT_SECONDS,
            )
            latency = time.time() - start_time

            api_requests.labels(endpoint=path, status_code=str(res.status_code)).inc()
            api_latency.labels(endpoint=path).observe(latency)

            if retryable and should_retry(res, None) and retries < MAX_RETRIES:
                retries += 1
                logger.warning(
                    "Retryable status %s on %s %s; retry %d", res.status_code, method, path, retries
                )
                time.sleep(RETRY_DELAY * retries)
                continue

            return _parse_body(res), res.status_code

        except requests.RequestException as err:
            api_requests.labels(endpoint=path, status_code="error").inc()
            logger.warning("Error calling %s %s: %s", method, path, str(err))
            retries += 1
            if not retryable or retries > MAX_RETRIES or not should_retry(res, err):
                raise
            time.sleep(RETRY_DELAY * retries)

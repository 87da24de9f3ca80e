"""
Readiness polling of a freshly deployed web app.

A new deployment may answer with connection errors, 5xx warm-up pages or the
platform's default page for a while. The poller tolerates all of those and
only gives up when the timeout elapses.
"""

import logging
import time

import requests

from appservice_deployer import constants as CONSTANTS
from appservice_deployer.core.exceptions import ReadinessTimeoutError

logger = logging.getLogger(__name__)


def wait_for_app_ready(
    url: str,
    expected_content: str,
    timeout_seconds: float = CONSTANTS.APP_READY_TIMEOUT_SECONDS,
    interval_seconds: float = CONSTANTS.APP_READY_POLL_INTERVAL_SECONDS
) -> None:
    """
    Poll url with GET until the response body contains expected_content.

    Args:
        url: Public URL of the app, e.g. "https://my-app.azurewebsites.net"
        expected_content: Marker string the body must contain
        timeout_seconds: Overall deadline in seconds
        interval_seconds: Pause between attempts in seconds

    Raises:
        ValueError: If timeout_seconds is negative or interval_seconds is not positive
        ReadinessTimeoutError: If the marker does not appear before the deadline
    """
    if timeout_seconds < 0:
        raise ValueError("timeout_seconds must not be negative")
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be positive")

    logger.info(f"Waiting up to {timeout_seconds}s for {url} to return '{expected_content}'...")

    start = time.monotonic()
    attempt = 0
    while True:
        attempt += 1
        remaining = timeout_seconds - (time.monotonic() - start)
        request_timeout = max(1.0, min(CONSTANTS.APP_READY_REQUEST_TIMEOUT_SECONDS, remaining))
        try:
            response = requests.get(url, timeout=request_timeout)
            # Redirects and error pages may echo the marker; only 2xx counts
            if 200 <= response.status_code < 300 and expected_content in response.text:
                elapsed = time.monotonic() - start
                logger.info(f"✓ {url} is ready after {elapsed:.0f}s ({attempt} attempt(s))")
                return
            logger.debug(f"  Attempt {attempt}: HTTP {response.status_code}, marker not found yet")
        except requests.exceptions.RequestException as e:
            logger.debug(f"  Attempt {attempt}: {type(e).__name__}: {e}")

        elapsed = time.monotonic() - start
        remaining = timeout_seconds - elapsed
        if remaining <= 0:
            logger.error(f"App at {url} not ready after {elapsed:.0f}s")
            raise ReadinessTimeoutError(url, elapsed, expected_content)
        # The last sleep is cut short so one final attempt lands on the deadline
        time.sleep(min(interval_seconds, remaining))

"""
HTTP Connectivity Checker

Probes reachability with one HTTP GET against a known endpoint.

An HTTP probe is stricter than a TCP connect: captive portals and
transparent proxies that accept connections but never reach the internet
usually answer with a redirect or a login page, not the expected 2xx.
"""

import logging
import socket
import time
import urllib.error
import urllib.request
from typing import Optional

from connectivity.constants import (
    CONNECTIVITY_CHECK_TIMEOUT,
    CONNECTIVITY_CHECK_URL,
    HTTP_USER_AGENT,
)
from connectivity.interfaces.connectivity_checker_interface import (
    ConnectivityCheckerInterface,
    ConnectivityResult,
)


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Report redirects as-is instead of following them (captive portals)."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


class HttpConnectivityChecker(ConnectivityCheckerInterface):
    """
    One GET per check; any 2xx status means online.

    Usage:
        checker = HttpConnectivityChecker()
        result = checker.check_connectivity()
        print(result.success, result.status_code)
    """

    def __init__(
        self,
        url: str = CONNECTIVITY_CHECK_URL,
        timeout: float = CONNECTIVITY_CHECK_TIMEOUT,
    ):
        """
        Initialize HTTP checker.

        Args:
            url: Endpoint to GET
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If url is not http(s) or timeout is not positive
        """
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"Connectivity check URL must be http(s): {url}")
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self.logger = logging.getLogger(__name__)
        self.url = url
        self.timeout = timeout
        self._opener = urllib.request.build_opener(_NoRedirectHandler)

    def check_connectivity(self) -> ConnectivityResult:
        start_time = time.time()
        status_code: Optional[int] = None

        request = urllib.request.Request(
            self.url,
            method="GET",
            headers={"User-Agent": HTTP_USER_AGENT, "Cache-Control": "no-cache"},
        )

        try:
            with self._opener.open(request, timeout=self.timeout) as response:
                status_code = response.status
                response.read()

        except urllib.error.HTTPError as e:
            # Non-2xx status (including unfollowed redirects)
            status_code = e.code
            e.close()
            return self._failure(f"HTTP {e.code} from {self.url}", start_time, status_code)

        except (urllib.error.URLError, socket.timeout, OSError) as e:
            reason = getattr(e, "reason", e)
            return self._failure(f"Request to {self.url} failed: {reason}", start_time)

        duration = time.time() - start_time

        if not 200 <= status_code < 300:
            return self._failure(f"HTTP {status_code} from {self.url}", start_time, status_code)

        self.logger.debug(f"Connectivity check OK: HTTP {status_code} ({duration:.2f}s)")
        return ConnectivityResult(
            success=True,
            status_code=status_code,
            duration=duration,
        )

    def _failure(
        self,
        message: str,
        start_time: float,
        status_code: Optional[int] = None,
    ) -> ConnectivityResult:
        self.logger.debug(f"Connectivity check failed: {message}")
        return ConnectivityResult(
            success=False,
            error_message=message,
            status_code=status_code,
            duration=time.time() - start_time,
        )

    def describe(self) -> str:
        return f"HTTP GET {self.url} (timeout {self.timeout}s)"

"""Shared outbound HTTP client."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from .errors import NetworkError
from .types import URL

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONNECTIONS = 10
DEFAULT_TIMEOUT_SECONDS = 10.0
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/59.0.3071.115 Safari/537.36"
)


class HttpClient:
    """
    Pooled HTTP client shared by every resolution in a schedule.

    Blocking ``requests`` calls run on a private thread pool so that many
    feeds can wait on the network at once from a single event loop. The
    mounted adapter blocks instead of opening more than ``max_connections``
    connections to one host.

    Attributes:
        session: The underlying requests session.
        timeout: Per-request timeout in seconds.
        executor: ThreadPoolExecutor running the blocking requests.
    """

    def __init__(
        self,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            max_connections: Connections kept per host (default: 10).
            timeout: Request timeout in seconds (default: 10.0).
            session: Preconfigured session to use instead of a new one.
        """
        self.timeout = timeout
        self.session = session or self._build_session(max_connections)
        self.executor = ThreadPoolExecutor(
            max_workers=max_connections,
            thread_name_prefix="feedlink-http",
        )
        self._closed = False

    @staticmethod
    def _build_session(max_connections: int) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(
            pool_connections=max_connections,
            pool_maxsize=max_connections,
            pool_block=True,
            max_retries=0,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers["User-Agent"] = USER_AGENT
        return session

    def _get(self, url: URL) -> requests.Response:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            msg = f"GET {url} failed: {e}"
            raise NetworkError(msg) from e
        logger.debug("GET %s -> %d", url, response.status_code)
        return response

    def get_text_sync(self, url: URL) -> str:
        """
        Fetch a URL and return its body regardless of status code.

        The provider answers not-yet-live feeds with an error body, so the
        body is what callers inspect, not the status.

        Raises:
            NetworkError: On connection failure or timeout.
        """
        return self._get(url).text

    def get_json_sync(self, url: URL) -> Any:
        """
        Fetch a URL and decode its JSON body.

        Raises:
            NetworkError: On transport failure, HTTP error status, or invalid JSON.
        """
        response = self._get(url)
        try:
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            msg = f"GET {url} returned {response.status_code}"
            raise NetworkError(msg) from e
        except ValueError as e:
            msg = f"GET {url} returned invalid JSON"
            raise NetworkError(msg) from e

    async def get_text(self, url: URL) -> str:
        """Asynchronously fetch a URL body as text."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, self.get_text_sync, url)

    async def get_json(self, url: URL) -> Any:
        """Asynchronously fetch and decode a JSON document."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, self.get_json_sync, url)

    def close(self) -> None:
        """Shut down the worker threads and release pooled connections."""
        if self._closed:
            return
        self._closed = True
        self.executor.shutdown(wait=False, cancel_futures=True)
        self.session.close()
        logger.debug("HTTP client closed")

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

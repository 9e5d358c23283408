"""Wait for a scheduled feed to go live."""

import asyncio
import logging

from .config import DEFAULT_POLL_INTERVAL_SECONDS, Settings
from .errors import RECOVERABLE_ERRORS, NetworkError
from .stream import Stream
from .types import URL, Quality

logger = logging.getLogger(__name__)


class AvailabilityPoller:
    """
    Re-checks a feed until the provider publishes it.

    A Stream remembers a failed attempt forever, so every cycle after the
    first works on ``stream.renew()`` rather than asking the failed object
    again.

    Attributes:
        interval: Seconds to wait between attempts.
        fail_fast: Raise on the first not-live answer instead of waiting.
        attempts: Attempts made by the last wait.
    """

    def __init__(
        self,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        fail_fast: bool = False,
    ) -> None:
        """
        Initialize the poller.

        Args:
            interval: Seconds between attempts (default: 30 minutes).
            fail_fast: Surface the first failure as an error (default: False).
        """
        self.interval = interval
        self.fail_fast = fail_fast
        self.attempts = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "AvailabilityPoller":
        return cls(interval=settings.poll_interval_seconds, fail_fast=settings.fail_fast)

    async def wait_for_master(self, stream: Stream) -> tuple[Stream, URL]:
        """
        Resolve a feed's master URL, waiting for it to go live if needed.

        Runs until the feed resolves or the task is cancelled.

        Args:
            stream: Feed to resolve.

        Returns:
            The stream that resolved (a renewed copy after the first cycle)
            and its master URL.

        Raises:
            StreamNotLive: On the first attempt when ``fail_fast`` is set.
            NetworkError: On the first attempt when ``fail_fast`` is set.
        """
        self.attempts = 0
        attempt = stream
        while True:
            self.attempts += 1
            try:
                link = await attempt.resolve_master()
            except RECOVERABLE_ERRORS as e:
                if self.fail_fast:
                    raise
                logger.info(
                    "Stream not available yet (%s), will check again in %.0f seconds",
                    e,
                    self.interval,
                )
                await asyncio.sleep(self.interval)
                attempt = attempt.renew()
                continue

            if self.attempts > 1:
                logger.info("Stream is live after %d attempts", self.attempts)
            return attempt, link

    async def wait_for_link(
        self,
        stream: Stream,
        quality: Quality | None = None,
    ) -> tuple[Stream, URL]:
        """
        Wait for a feed to go live, then resolve its link at ``quality``.

        Transport failures while fetching the manifest are waited out like
        the master step; the live stream keeps its resolved master URL.

        Raises:
            ManifestMalformed: If the live feed's manifest is unusable.
            QualityUnavailable: If nothing at or below ``quality`` is offered.
            NetworkError: On a transport failure when ``fail_fast`` is set.
        """
        live, master_url = await self.wait_for_master(stream)
        if quality is None:
            return live, master_url

        while True:
            try:
                return live, await live.resolve_quality(quality)
            except NetworkError as e:
                if self.fail_fast:
                    raise
                logger.info(
                    "Could not fetch manifest (%s), will try again in %.0f seconds",
                    e,
                    self.interval,
                )
                await asyncio.sleep(self.interval)

"""Per-feed resolution: provider redirect -> master manifest -> quality variant."""

import logging
from datetime import date, datetime

from .errors import FeedlinkError, ManifestMalformed, NetworkError, QualityUnavailable, StreamNotLive
from .negotiator import negotiate, variant_url
from .transport import HttpClient
from .types import URL, Cdn, FeedId, FeedType, Quality, Slot, Sport

logger = logging.getLogger(__name__)

DEFAULT_HOST = "http://freegamez.ga"
MASTER_URL_PREFIX = "https"
MANIFEST_HEADER = "#EXTM3U"


def build_host_link(host: URL, sport: Sport, business_date: date, feed_id: FeedId, cdn: Cdn) -> URL:
    """Build the provider redirect URL for a feed."""
    return (
        f"{host.rstrip('/')}/getM3U8.php?league={sport.value}"
        f"&date={business_date:%Y-%m-%d}&id={feed_id}&cdn={cdn.value}"
    )


class Stream:
    """
    Resolution unit for one broadcast feed of a game.

    Each stage is memoized in its own write-once slot: a request that got a
    definitive answer (good or bad) is never repeated by this object. Waiting
    for a feed to go live is done on a fresh object from ``renew()``.

    Not safe to resolve concurrently from several tasks; later stages await
    the earlier ones through the same memo.

    Attributes:
        feed_id: Opaque provider feed id.
        feed_type: Broadcast angle of the feed.
        game_id: Id of the owning game.
        game_date: Scheduled start of the game (UTC).
        business_date: Schedule date the provider files the feed under.
        redirect_resolution: Memo of the master manifest URL.
        manifest: Memo of the master manifest text.
        quality_resolution: Memo of the quality-specific variant URL.
    """

    def __init__(
        self,
        feed_id: FeedId,
        feed_type: FeedType,
        game_id: int,
        game_date: datetime,
        business_date: date,
        sport: Sport,
        http: HttpClient,
        cdn: Cdn = Cdn.AKAMAI,
        host: URL = DEFAULT_HOST,
    ) -> None:
        self.feed_id = feed_id
        self.feed_type = feed_type
        self.game_id = game_id
        self.game_date = game_date
        self.business_date = business_date
        self.sport = sport
        self.http = http
        self.cdn = cdn
        self.host = host

        self.redirect_resolution: Slot[URL] = Slot("redirect_resolution")
        self.manifest: Slot[str] = Slot("manifest")
        self.quality_resolution: Slot[URL] = Slot("quality_resolution")
        self._resolved_quality: Quality | None = None

    def __repr__(self) -> str:
        return (
            f"Stream(feed_id={self.feed_id!r}, feed_type={self.feed_type}, "
            f"game_id={self.game_id})"
        )

    def _context(self) -> dict[str, object]:
        return {"game_id": self.game_id, "feed_id": self.feed_id, "feed_type": self.feed_type}

    def host_link(self) -> URL:
        """The unresolved provider redirect URL."""
        return build_host_link(self.host, self.sport, self.business_date, self.feed_id, self.cdn)

    def renew(self) -> "Stream":
        """Return a copy of this stream with every slot unattempted."""
        return Stream(
            feed_id=self.feed_id,
            feed_type=self.feed_type,
            game_id=self.game_id,
            game_date=self.game_date,
            business_date=self.business_date,
            sport=self.sport,
            http=self.http,
            cdn=self.cdn,
            host=self.host,
        )

    async def resolve_master(self) -> URL:
        """
        Resolve the provider redirect into the master manifest URL.

        Returns:
            The master manifest URL.

        Raises:
            StreamNotLive: If the provider answered with anything but a URL.
            NetworkError: On transport failure; the slot stays unattempted.
        """
        slot = self.redirect_resolution
        if slot.attempted:
            return slot.unwrap()

        url = self.host_link()
        body = (await self.http.get_text(url)).strip()

        if not body.startswith(MASTER_URL_PREFIX):
            logger.info("%s feed for game %d is not live yet", self.feed_type, self.game_id)
            logger.debug("Provider answered %s with %r", url, body[:200])
            raise slot.fail(StreamNotLive("Stream not available yet", **self._context()))

        logger.debug("Resolved master URL for %r: %s", self, body)
        return slot.resolve(body)

    async def resolve_manifest(self) -> str:
        """
        Fetch the master manifest, resolving the master URL first if needed.

        Raises:
            StreamNotLive: If the master URL could not be resolved.
            ManifestMalformed: If the body is not an HLS manifest.
            NetworkError: On transport failure; the slot stays unattempted.
        """
        slot = self.manifest
        if slot.attempted:
            return slot.unwrap()

        master_url = await self.resolve_master()
        body = await self.http.get_text(master_url)

        if not body.startswith(MANIFEST_HEADER):
            raise slot.fail(
                ManifestMalformed("Master URL did not return an HLS manifest", **self._context())
            )

        return slot.resolve(body)

    async def resolve_quality(self, requested: Quality) -> URL:
        """
        Resolve the absolute URL of the best variant not above ``requested``.

        The first outcome is memoized. A later request for a different
        quality is negotiated again against the cached manifest without
        touching the network or the memo.

        Raises:
            StreamNotLive: If the master URL could not be resolved.
            ManifestMalformed: If the manifest is not usable.
            QualityUnavailable: If nothing at or below ``requested`` is offered.
            NetworkError: On transport failure.
        """
        slot = self.quality_resolution
        if slot.attempted:
            if requested is self._resolved_quality:
                return slot.unwrap()
            logger.debug("Re-negotiating %r for %s", self, requested)
            return await self._negotiate(requested)

        self._resolved_quality = requested
        try:
            link = await self._negotiate(requested)
        except (ManifestMalformed, QualityUnavailable) as e:
            raise slot.fail(e) from None
        return slot.resolve(link)

    async def _negotiate(self, requested: Quality) -> URL:
        master_url = await self.resolve_master()
        manifest = await self.resolve_manifest()
        try:
            return variant_url(master_url, negotiate(manifest, requested))
        except FeedlinkError as e:
            raise self._annotate(e)

    def _annotate(self, error: FeedlinkError) -> FeedlinkError:
        if error.game_id is None:
            error.game_id = self.game_id
            error.feed_id = self.feed_id
            error.feed_type = self.feed_type
        return error

    async def playable_link(self, quality: Quality | None = None) -> URL:
        """
        Resolve the best link to hand to a player.

        With a quality, the variant URL is preferred and the master URL is
        used when the variant cannot be resolved; without one, the master URL.

        Raises:
            StreamNotLive: If the master URL could not be resolved.
            NetworkError: On transport failure while resolving the master URL.
        """
        master_url = await self.resolve_master()
        if quality is None:
            return master_url

        try:
            return await self.resolve_quality(quality)
        except (ManifestMalformed, QualityUnavailable, NetworkError) as e:
            logger.warning("Falling back to master link: %s", e)
            return master_url

"""A scheduled game and the broadcast feeds it offers."""

import logging
from datetime import date, datetime
from typing import Any

from .selection import select_feed
from .stats import GameContent, StatsClient
from .stream import DEFAULT_HOST, Stream
from .types import URL, Cdn, FeedType, ImageCut, Team

logger = logging.getLogger(__name__)

NO_PREVIEW_DESCRIPTION = "None available"


class Game:
    """
    One scheduled game.

    Identity fields never change. Game content and the feed catalog are
    fetched on first use and then reused for the lifetime of the object.

    Attributes:
        game_id: Stats API game id.
        game_date: Scheduled start (UTC).
        business_date: Schedule date the game is filed under.
        home_team: Home team.
        away_team: Away team.
    """

    def __init__(
        self,
        game_id: int,
        game_date: datetime,
        business_date: date,
        home_team: Team,
        away_team: Team,
        source: StatsClient,
        cdn: Cdn = Cdn.AKAMAI,
        host: URL = DEFAULT_HOST,
    ) -> None:
        self.game_id = game_id
        self.game_date = game_date
        self.business_date = business_date
        self.home_team = home_team
        self.away_team = away_team
        self.source = source
        self.cdn = cdn
        self.host = host

        self._content: GameContent | None = None
        self._feeds: dict[FeedType, Stream] | None = None

    @property
    def title(self) -> str:
        return f"{self.away_team.name} @ {self.home_team.name}"

    def __repr__(self) -> str:
        return f"Game({self.game_id}, {self.title!r}, {self.game_date.isoformat()})"

    def has_team(self, abbrev: str) -> bool:
        return abbrev in (self.home_team.abbreviation, self.away_team.abbreviation)

    async def content(self) -> GameContent:
        """Fetch game content once and cache it."""
        if self._content is None:
            self._content = await self.source.get_game_content(self.game_id)
        return self._content

    async def feeds(self) -> dict[FeedType, Stream]:
        """
        Return the game's TV feeds keyed by feed type.

        Built from the media EPG entry titled with the sport's TV marker.
        Items with an unrecognized feed type are skipped.

        Raises:
            GameContentUnavailable: If game content could not be fetched.
        """
        if self._feeds is not None:
            return self._feeds

        content = await self.content()
        marker = self.source.sport.tv_marker
        feeds: dict[FeedType, Stream] = {}

        for entry in content.epg:
            if entry.title != marker:
                continue
            for item in entry.items:
                if item.feed_type is None or item.playback_id is None:
                    continue
                feed_type = FeedType.parse(item.feed_type)
                if feed_type is None:
                    logger.debug("Skipping unknown feed type %r for game %d", item.feed_type, self.game_id)
                    continue
                if feed_type in feeds:
                    continue
                feeds[feed_type] = Stream(
                    feed_id=item.playback_id,
                    feed_type=feed_type,
                    game_id=self.game_id,
                    game_date=self.game_date,
                    business_date=self.business_date,
                    sport=self.source.sport,
                    http=self.source.http,
                    cdn=self.cdn,
                    host=self.host,
                )

        logger.debug("Game %d offers feeds: %s", self.game_id, ", ".join(map(str, sorted(feeds))))
        self._feeds = feeds
        return feeds

    async def stream_with_feed_or_default(self, explicit: FeedType | None, team_abbrev: str) -> Stream:
        """Select a feed for a fan of ``team_abbrev``; see ``select_feed``."""
        return select_feed(explicit, team_abbrev, self.home_team, self.away_team, await self.feeds())

    async def _preview_article(self) -> dict[str, Any] | None:
        try:
            preview = (await self.content()).editorial_preview
            return preview["items"][0]
        except Exception as e:
            logger.debug("No preview article for game %d: %s", self.game_id, e)
            return None

    async def preview_description(self) -> str:
        """The preview article's subheading, or a placeholder. Never raises."""
        article = await self._preview_article()
        subhead = article.get("subhead") if isinstance(article, dict) else None
        if isinstance(subhead, str) and subhead:
            return subhead
        return NO_PREVIEW_DESCRIPTION

    async def preview_image_variants(self) -> dict[str, ImageCut]:
        """The preview art in every published size, or nothing. Never raises."""
        article = await self._preview_article()
        try:
            cuts = article["media"]["image"]["cuts"]
            return {
                name: ImageCut(
                    name=name,
                    aspect_ratio=cut.get("aspectRatio") or "",
                    width=int(cut.get("width") or 0),
                    height=int(cut.get("height") or 0),
                    src=cut.get("src") or "",
                )
                for name, cut in cuts.items()
            }
        except Exception as e:
            logger.debug("No preview art for game %d: %s", self.game_id, e)
            return {}

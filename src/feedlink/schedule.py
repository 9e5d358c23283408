"""A day's schedule of games and bulk feed resolution."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from .config import Settings
from .errors import FeedlinkError, ScheduleUnavailable, UnknownTeam
from .game import Game
from .stats import StatsClient, stats_client_for
from .stream import Stream
from .transport import HttpClient
from .types import URL, FeedType, Quality, Team

logger = logging.getLogger(__name__)


@dataclass
class FeedResolution:
    """Outcome of resolving one feed during bulk resolution."""

    stream: Stream
    link: URL | None = None
    error: FeedlinkError | None = None

    @property
    def ok(self) -> bool:
        return self.link is not None


@dataclass
class BulkResolution:
    """
    Outcome of resolving every feed of every game.

    Attributes:
        feeds: Per game id, the resolution of each of its feeds.
        failed_games: Games whose feed list could not be fetched.
    """

    feeds: dict[int, dict[FeedType, FeedResolution]] = field(default_factory=dict)
    failed_games: dict[int, FeedlinkError] = field(default_factory=dict)

    def links(self) -> dict[int, dict[FeedType, URL]]:
        """Only the feeds that resolved, per game id."""
        return {
            game_id: {ft: r.link for ft, r in feeds.items() if r.link is not None}
            for game_id, feeds in self.feeds.items()
        }


class Schedule:
    """
    All games of one sport on one date.

    Owns the HTTP client every game and stream uses. A client created by
    ``load`` is closed by ``close()``; one passed in by the caller is not.

    Attributes:
        date: Business date of the schedule.
        teams: Full roster of the sport, keyed by team id.
        settings: Settings the schedule was loaded with.
        http: Shared HTTP client.
    """

    def __init__(
        self,
        day: date,
        teams: Iterable[Team],
        games: Iterable[Game],
        settings: Settings,
        http: HttpClient,
        owns_http: bool = False,
    ) -> None:
        self.date = day
        self.teams: dict[int, Team] = {team.id: team for team in teams}
        self.settings = settings
        self.http = http
        self._owns_http = owns_http
        self._games = sorted(games, key=lambda g: (g.game_date, g.away_team.name))

    @classmethod
    async def load(
        cls,
        settings: Settings,
        day: date | None = None,
        http: HttpClient | None = None,
        source: StatsClient | None = None,
    ) -> "Schedule":
        """
        Fetch the schedule and roster for a date and build its games.

        Args:
            settings: Sport, provider and connection settings.
            day: Date to load (default: today).
            http: Shared HTTP client; one is created from ``settings`` if None.
            source: Stats source; the sport's default client if None.

        Raises:
            ScheduleUnavailable: If the schedule or roster cannot be loaded, or
                the schedule references a team missing from the roster.
        """
        day = day or date.today()
        owns_http = http is None
        if http is None:
            http = HttpClient(
                max_connections=settings.max_connections,
                timeout=settings.request_timeout_seconds,
            )
        source = source or stats_client_for(settings.sport, http, settings.stats_base_url)

        try:
            schedule_day, teams = await asyncio.gather(source.get_schedule(day), source.get_teams())
        except FeedlinkError as e:
            if owns_http:
                http.close()
            if isinstance(e, ScheduleUnavailable):
                raise
            msg = f"Could not load {settings.sport.name} schedule for {day.isoformat()}: {e}"
            raise ScheduleUnavailable(msg) from e

        by_id = {team.id: team for team in teams}
        games = []
        for scheduled in schedule_day.games:
            home = by_id.get(scheduled.home_team_id)
            away = by_id.get(scheduled.away_team_id)
            if home is None or away is None:
                if owns_http:
                    http.close()
                msg = f"Game {scheduled.game_id} references a team missing from the roster"
                raise ScheduleUnavailable(msg, game_id=scheduled.game_id)
            games.append(
                Game(
                    game_id=scheduled.game_id,
                    game_date=scheduled.game_date,
                    business_date=schedule_day.date,
                    home_team=home,
                    away_team=away,
                    source=source,
                    cdn=settings.cdn,
                    host=settings.host,
                )
            )

        logger.info(
            "Loaded %d %s games for %s",
            len(games),
            settings.sport.name,
            schedule_day.date.isoformat(),
        )
        return cls(schedule_day.date, teams, games, settings, http, owns_http=owns_http)

    def games(self) -> list[Game]:
        """Games ordered by start time, then away team name."""
        return list(self._games)

    def find_game_by_team_abbreviation(self, abbrev: str) -> Game | None:
        """The first game either team of which has exactly this abbreviation."""
        for game in self._games:
            if game.has_team(abbrev):
                return game
        return None

    def validate_team_abbreviation(self, abbrev: str) -> Team:
        """
        Look a team up in the roster, regardless of today's games.

        Raises:
            UnknownTeam: If no team has this abbreviation.
        """
        for team in self.teams.values():
            if team.abbreviation == abbrev:
                return team
        msg = f"No {self.settings.sport.name} team with abbreviation {abbrev!r}"
        raise UnknownTeam(msg)

    @staticmethod
    async def _resolve_feed(stream: Stream, quality: Quality | None) -> FeedResolution:
        try:
            link = await stream.playable_link(quality)
        except FeedlinkError as e:
            logger.warning("Could not resolve feed: %s", e)
            return FeedResolution(stream=stream, error=e)
        return FeedResolution(stream=stream, link=link)

    async def resolve_all(
        self,
        quality: Quality | None = None,
        exclude_feeds: Iterable[FeedType] = (),
    ) -> BulkResolution:
        """
        Resolve every feed of every game concurrently.

        One task per game fetches its feed list, then one task per feed
        resolves its link (the quality link when ``quality`` is given, falling
        back to the master link). Failures are collected, not raised.

        Args:
            quality: Highest quality wanted; None resolves master links.
            exclude_feeds: Feed types to leave out.

        Returns:
            Links and errors keyed by game id and feed type.
        """
        excluded = set(exclude_feeds)
        result = BulkResolution()

        feed_lists = await asyncio.gather(
            *(game.feeds() for game in self._games),
            return_exceptions=True,
        )

        pending: list[tuple[Game, FeedType, Stream]] = []
        for game, feeds in zip(self._games, feed_lists, strict=True):
            if isinstance(feeds, FeedlinkError):
                logger.warning("Could not list feeds: %s", feeds)
                result.failed_games[game.game_id] = feeds
                continue
            if isinstance(feeds, BaseException):
                raise feeds
            result.feeds[game.game_id] = {}
            pending.extend(
                (game, feed_type, stream)
                for feed_type, stream in feeds.items()
                if feed_type not in excluded
            )

        resolutions = await asyncio.gather(
            *(self._resolve_feed(stream, quality) for _, _, stream in pending)
        )
        for (game, feed_type, _), resolution in zip(pending, resolutions, strict=True):
            result.feeds[game.game_id][feed_type] = resolution

        resolved = sum(r.ok for r in resolutions)
        logger.info("Resolved %d of %d feeds", resolved, len(resolutions))
        return result

    def close(self) -> None:
        """Release the HTTP client if this schedule created it."""
        if self._owns_http:
            self.http.close()

    async def __aenter__(self) -> "Schedule":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

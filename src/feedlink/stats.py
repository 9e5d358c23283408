"""Clients for the public league stats APIs (schedule, roster and game content)."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .errors import GameContentUnavailable, NetworkError, ScheduleUnavailable
from .transport import HttpClient
from .types import URL, Sport, Team

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledGame:
    """A game as listed by the schedule, before teams are resolved."""

    game_id: int
    game_date: datetime
    home_team_id: int
    away_team_id: int


@dataclass(frozen=True)
class ScheduleDay:
    """The games listed for one business date."""

    date: date
    games: list[ScheduledGame] = field(default_factory=list)


@dataclass(frozen=True)
class EpgItem:
    feed_type: str | None
    playback_id: str | None
    call_letters: str | None = None


@dataclass(frozen=True)
class EpgEntry:
    title: str
    items: list[EpgItem] = field(default_factory=list)


@dataclass(frozen=True)
class GameContent:
    """
    Editorial and media metadata for one game.

    Attributes:
        editorial_preview: Raw ``editorial.preview`` object, or None when the
            provider sent nothing usable. Only read best-effort.
        epg: Media EPG entries, one per media kind (TV, audio, ...).
    """

    editorial_preview: dict[str, Any] | None
    epg: list[EpgEntry] = field(default_factory=list)


def _parse_game_date(raw: str) -> datetime:
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


def parse_schedule(payload: Any, requested: date) -> ScheduleDay:
    """
    Parse a ``/schedule`` response.

    The first listed date is the business date; an empty ``dates`` list means
    nothing is scheduled and the requested date is kept.

    Raises:
        ScheduleUnavailable: If the document does not have the expected shape.
    """
    try:
        dates = payload.get("dates") or []
        if not dates:
            return ScheduleDay(date=requested)

        day = dates[0]
        games = [
            ScheduledGame(
                game_id=int(game["gamePk"]),
                game_date=_parse_game_date(game["gameDate"]),
                home_team_id=int(game["teams"]["home"]["team"]["id"]),
                away_team_id=int(game["teams"]["away"]["team"]["id"]),
            )
            for game in day.get("games") or []
        ]
        return ScheduleDay(date=date.fromisoformat(day["date"]), games=games)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        msg = f"Malformed schedule response: {e!r}"
        raise ScheduleUnavailable(msg) from e


def parse_teams(payload: Any) -> list[Team]:
    """
    Parse a ``/teams`` response.

    Raises:
        ScheduleUnavailable: If the document does not have the expected shape.
    """
    try:
        return [
            Team(
                id=int(team["id"]),
                name=team.get("name") or "",
                abbreviation=team.get("abbreviation") or "",
                team_name=team.get("teamName") or "",
            )
            for team in payload["teams"]
        ]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        msg = f"Malformed teams response: {e!r}"
        raise ScheduleUnavailable(msg) from e


def parse_game_content(payload: Any, game_id: int | None = None) -> GameContent:
    """
    Parse a ``/game/{id}/content`` response.

    A missing or oddly shaped editorial preview is tolerated; the media EPG
    must be well formed.

    Raises:
        GameContentUnavailable: If the media section cannot be read.
    """
    try:
        editorial = payload.get("editorial") or {}
        preview = editorial.get("preview") if isinstance(editorial, dict) else None
        if not isinstance(preview, dict):
            preview = None

        media = payload.get("media") or {}
        epg = [
            EpgEntry(
                title=entry.get("title") or "",
                items=[
                    EpgItem(
                        feed_type=item.get("mediaFeedType"),
                        playback_id=(
                            str(item["mediaPlaybackId"])
                            if item.get("mediaPlaybackId") is not None
                            else None
                        ),
                        call_letters=item.get("callLetters"),
                    )
                    for item in entry.get("items") or []
                ],
            )
            for entry in media.get("epg") or []
        ]
    except (AttributeError, KeyError, TypeError) as e:
        msg = f"Malformed game content response: {e!r}"
        raise GameContentUnavailable(msg, game_id=game_id) from e

    return GameContent(editorial_preview=preview, epg=epg)


class StatsClient(ABC):
    """
    Schedule and game content source for one sport.

    Subclasses only describe where each document lives; fetching and parsing
    is shared.

    Attributes:
        http: Shared HTTP client.
        base_url: Root of the stats API.
    """

    sport: Sport
    default_base_url: URL

    def __init__(self, http: HttpClient, base_url: URL | None = None) -> None:
        self.http = http
        self.base_url = (base_url or self.default_base_url).rstrip("/")

    @abstractmethod
    def schedule_url(self, day: date) -> URL: ...

    @abstractmethod
    def teams_url(self) -> URL: ...

    def game_content_url(self, game_id: int) -> URL:
        return f"{self.base_url}/game/{game_id}/content"

    async def get_schedule(self, day: date) -> ScheduleDay:
        """
        Fetch the games scheduled on a date.

        Raises:
            ScheduleUnavailable: On any fetch or parse failure.
        """
        url = self.schedule_url(day)
        logger.info("Fetching %s schedule for %s", self.sport.name, day.isoformat())
        try:
            payload = await self.http.get_json(url)
        except NetworkError as e:
            msg = f"Could not fetch {self.sport.name} schedule for {day.isoformat()}"
            raise ScheduleUnavailable(msg) from e
        return parse_schedule(payload, day)

    async def get_teams(self) -> list[Team]:
        """
        Fetch the full team roster.

        Raises:
            ScheduleUnavailable: On any fetch or parse failure.
        """
        try:
            payload = await self.http.get_json(self.teams_url())
        except NetworkError as e:
            msg = f"Could not fetch {self.sport.name} teams"
            raise ScheduleUnavailable(msg) from e
        return parse_teams(payload)

    async def get_game_content(self, game_id: int) -> GameContent:
        """
        Fetch editorial and media metadata for a game.

        Raises:
            GameContentUnavailable: On any fetch or parse failure.
        """
        logger.debug("Fetching game content for %d", game_id)
        try:
            payload = await self.http.get_json(self.game_content_url(game_id))
        except NetworkError as e:
            msg = "Could not fetch game content"
            raise GameContentUnavailable(msg, game_id=game_id) from e
        return parse_game_content(payload, game_id)


class NhlStatsClient(StatsClient):
    sport = Sport.NHL
    default_base_url = "https://statsapi.web.nhl.com/api/v1"

    def schedule_url(self, day: date) -> URL:
        return f"{self.base_url}/schedule?date={day:%Y-%m-%d}"

    def teams_url(self) -> URL:
        return f"{self.base_url}/teams"


class MlbStatsClient(StatsClient):
    sport = Sport.MLB
    default_base_url = "https://statsapi.mlb.com/api/v1"
    sport_id = 1

    def schedule_url(self, day: date) -> URL:
        return f"{self.base_url}/schedule?sportId={self.sport_id}&date={day:%Y-%m-%d}"

    def teams_url(self) -> URL:
        return f"{self.base_url}/teams?sportId={self.sport_id}"


STATS_CLIENTS: dict[Sport, type[StatsClient]] = {
    Sport.NHL: NhlStatsClient,
    Sport.MLB: MlbStatsClient,
}


def stats_client_for(sport: Sport, http: HttpClient, base_url: URL | None = None) -> StatsClient:
    """Build the stats client implementation for a sport."""
    return STATS_CLIENTS[sport](http, base_url)

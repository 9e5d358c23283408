"""Exceptions raised while locating and resolving feeds."""


class FeedlinkError(Exception):
    """Base class for every feedlink failure.

    Attributes:
        game_id: Game the failure belongs to, when known.
        feed_id: Provider feed id the failure belongs to, when known.
        feed_type: Feed type label the failure belongs to, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        game_id: int | None = None,
        feed_id: str | None = None,
        feed_type: object | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.game_id = game_id
        self.feed_id = feed_id
        self.feed_type = feed_type

    def __str__(self) -> str:
        context = []
        if self.game_id is not None:
            context.append(f"game {self.game_id}")
        if self.feed_type is not None:
            context.append(f"{self.feed_type} feed")
        if self.feed_id is not None:
            context.append(f"id {self.feed_id}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ConfigError(FeedlinkError, ValueError):
    """Raised when the settings file is invalid."""


class ScheduleUnavailable(FeedlinkError):
    """The schedule or team roster could not be fetched or parsed."""


class GameContentUnavailable(FeedlinkError):
    """A game's media content could not be fetched or parsed."""


class UnknownTeam(FeedlinkError):
    """No team in the loaded roster has the requested abbreviation."""


class NoMatchingFeed(FeedlinkError):
    """Neither the requested feed nor any fallback feed is available."""


class StreamNotLive(FeedlinkError):
    """The provider has not published the feed yet."""


class ManifestMalformed(FeedlinkError):
    """The master manifest is missing its HLS header or cannot be joined."""


class QualityUnavailable(FeedlinkError):
    """No variant at or below the requested quality exists."""


class NetworkError(FeedlinkError):
    """Transport-level failure talking to a remote service."""


# Failures worth waiting out when the caller opts into polling
RECOVERABLE_ERRORS: tuple[type[FeedlinkError], ...] = (StreamNotLive, NetworkError)

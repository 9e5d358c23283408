"""Choose which feed of a game to watch."""

import logging
from collections.abc import Mapping

from .errors import NoMatchingFeed
from .stream import Stream
from .types import FeedType, Team

logger = logging.getLogger(__name__)

# Tried in order when the target feed is missing
FALLBACK_FEEDS: tuple[FeedType, ...] = (FeedType.NATIONAL, FeedType.HOME, FeedType.AWAY)


def default_feed_type(team_abbrev: str, home_team: Team) -> FeedType:
    """The feed a fan of ``team_abbrev`` would pick: their own side's call."""
    return FeedType.HOME if team_abbrev == home_team.abbreviation else FeedType.AWAY


def select_feed(
    explicit: FeedType | None,
    team_abbrev: str,
    home_team: Team,
    away_team: Team,
    available: Mapping[FeedType, Stream],
) -> Stream:
    """
    Pick a stream from the feeds a game offers.

    Precedence:
        1. ``explicit`` when it is available.
        2. Otherwise the target is ``explicit`` if given, else the home feed
           when ``team_abbrev`` is the home team and the away feed if not.
        3. When the target is missing: national, then home, then away.

    Args:
        explicit: Feed type the caller asked for, if any.
        team_abbrev: Abbreviation of the team the caller follows.
        home_team: Home team of the game.
        away_team: Away team of the game.
        available: Feeds the game offers.

    Returns:
        The selected stream.

    Raises:
        NoMatchingFeed: If neither the target nor any fallback is available.
    """
    target = explicit or default_feed_type(team_abbrev, home_team)
    if target in available:
        return available[target]

    for feed_type in FALLBACK_FEEDS:
        if feed_type in available:
            logger.info("%s feed not available, using %s feed", target, feed_type)
            return available[feed_type]

    msg = (
        f"No {target} feed or fallback feed available for "
        f"{away_team.abbreviation} @ {home_team.abbreviation}"
    )
    raise NoMatchingFeed(msg, feed_type=target)

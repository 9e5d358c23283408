"""
Feedlink - Resolve live sports broadcast feeds into playable HLS links.

This package loads a day's games from the league stats API, lists the
broadcast feeds of each game, and resolves a feed through the provider into
a master manifest URL or a quality-specific variant URL.
"""

from .config import Settings, load_settings, setup_logging
from .errors import (
    ConfigError,
    FeedlinkError,
    GameContentUnavailable,
    ManifestMalformed,
    NetworkError,
    NoMatchingFeed,
    QualityUnavailable,
    ScheduleUnavailable,
    StreamNotLive,
    UnknownTeam,
)
from .game import Game
from .negotiator import negotiate
from .poller import AvailabilityPoller
from .schedule import BulkResolution, Schedule
from .selection import select_feed
from .stream import Stream
from .transport import HttpClient
from .types import Cdn, FeedType, Quality, Sport, Team

__version__ = "0.1.0"
__all__ = [
    "AvailabilityPoller",
    "BulkResolution",
    "Cdn",
    "ConfigError",
    "FeedType",
    "FeedlinkError",
    "Game",
    "GameContentUnavailable",
    "HttpClient",
    "ManifestMalformed",
    "NetworkError",
    "NoMatchingFeed",
    "Quality",
    "QualityUnavailable",
    "Schedule",
    "ScheduleUnavailable",
    "Settings",
    "Sport",
    "Stream",
    "StreamNotLive",
    "Team",
    "UnknownTeam",
    "load_settings",
    "negotiate",
    "select_feed",
    "setup_logging",
]

"""Shared fixtures and provider payloads for tests."""

from collections.abc import Callable
from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, Mock

import pytest

from feedlink.stream import Stream
from feedlink.transport import HttpClient
from feedlink.types import Cdn, FeedType, Sport

BUSINESS_DATE = date(2019, 10, 5)
GAME_DATE = datetime(2019, 10, 5, 23, 0, tzinfo=UTC)

MASTER_URL = (
    "https://hlslive-akc.med2.med.nhl.com/hls/live/2010186/"
    "NHL_GAME_VIDEO_BOSNJD_M2_HOME_20191005/master_wired60.m3u8"
)
MASTER_DIR = MASTER_URL.rsplit("/", 1)[0]
NOT_LIVE_BODY = "Game hasn't started"

MASTER_MANIFEST = "\n".join(
    [
        "#EXTM3U",
        "#EXT-X-VERSION:3",
        '#EXT-X-STREAM-INF:BANDWIDTH=6600000,RESOLUTION=1280x720,CODECS="avc1.64002a,mp4a.40.2",FRAME-RATE=60.000',
        "6600K/6600_complete.m3u8",
        '#EXT-X-STREAM-INF:BANDWIDTH=4500000,RESOLUTION=1280x720,CODECS="avc1.64001f,mp4a.40.2"',
        "4500K/4500_complete.m3u8",
        '#EXT-X-STREAM-INF:BANDWIDTH=3000000,RESOLUTION=960x540,CODECS="avc1.64001f,mp4a.40.2"',
        "3000K/3000_complete.m3u8",
        '#EXT-X-STREAM-INF:BANDWIDTH=2000000,RESOLUTION=768x432,CODECS="avc1.4d401e,mp4a.40.2"',
        "2000K/2000_complete.m3u8",
        '#EXT-X-STREAM-INF:BANDWIDTH=1200000,RESOLUTION=640x360,CODECS="avc1.4d401e,mp4a.40.2"',
        "1200K/1200_complete.m3u8",
        '#EXT-X-STREAM-INF:BANDWIDTH=800000,RESOLUTION=416x224,CODECS="avc1.4d400d,mp4a.40.2"',
        "800K/800_complete.m3u8",
    ]
)

TEAMS_PAYLOAD = {
    "teams": [
        {"id": 1, "name": "New Jersey Devils", "abbreviation": "NJD", "teamName": "Devils"},
        {"id": 6, "name": "Boston Bruins", "abbreviation": "BOS", "teamName": "Bruins"},
        {"id": 10, "name": "Toronto Maple Leafs", "abbreviation": "TOR", "teamName": "Maple Leafs"},
        {"id": 8, "name": "Montréal Canadiens", "abbreviation": "MTL", "teamName": "Canadiens"},
        {"id": 22, "name": "Edmonton Oilers", "abbreviation": "EDM", "teamName": "Oilers"},
    ]
}


def schedule_game(game_pk: int, game_date: str, home_id: int, away_id: int) -> dict:
    return {
        "gamePk": game_pk,
        "gameDate": game_date,
        "teams": {
            "away": {"team": {"id": away_id, "name": ""}},
            "home": {"team": {"id": home_id, "name": ""}},
        },
    }


SCHEDULE_PAYLOAD = {
    "dates": [
        {
            "date": "2019-10-05",
            "games": [
                # Toronto @ Montreal and Boston @ New Jersey start together
                schedule_game(2019020030, "2019-10-05T23:00:00Z", home_id=8, away_id=10),
                schedule_game(2019020027, "2019-10-05T23:00:00Z", home_id=1, away_id=6),
                schedule_game(2019020035, "2019-10-06T02:00:00Z", home_id=22, away_id=8),
            ],
        }
    ]
}


def epg_item(feed_type: str | None, playback_id: str | None) -> dict:
    return {"mediaFeedType": feed_type, "mediaPlaybackId": playback_id, "callLetters": ""}


def game_content_payload(items: list[dict], subhead: str | None = "Bruins visit Devils") -> dict:
    article = {
        "type": "article",
        "headline": "Preview",
        "media": {
            "type": "photo",
            "image": {
                "cuts": {
                    "320x180": {"aspectRatio": "16:9", "width": 320, "height": 180, "src": "https://img/320.jpg"},
                    "2048x1152": {"aspectRatio": "16:9", "width": 2048, "height": 1152, "src": "https://img/2048.jpg"},
                }
            },
        },
    }
    if subhead is not None:
        article["subhead"] = subhead
    return {
        "editorial": {"preview": {"title": "Preview", "items": [article]}},
        "media": {
            "epg": [
                {"title": "NHLTV", "items": items},
                {"title": "Audio", "items": [epg_item("HOME", "99999")]},
            ]
        },
    }


@pytest.fixture
def http() -> Mock:
    """HTTP client whose requests are answered by the test."""
    client = Mock(spec=HttpClient)
    client.get_text = AsyncMock()
    client.get_json = AsyncMock()
    return client


@pytest.fixture
def make_stream(http: Mock) -> Callable[..., Stream]:
    """Factory for streams of a Boston @ New Jersey game."""

    def _make(feed_type: FeedType = FeedType.HOME, feed_id: str = "12345") -> Stream:
        return Stream(
            feed_id=feed_id,
            feed_type=feed_type,
            game_id=2019020027,
            game_date=GAME_DATE,
            business_date=BUSINESS_DATE,
            sport=Sport.NHL,
            http=http,
            cdn=Cdn.AKAMAI,
        )

    return _make

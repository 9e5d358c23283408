"""Tests for default feed selection."""

from itertools import combinations

import pytest

from feedlink.errors import NoMatchingFeed
from feedlink.selection import default_feed_type, select_feed
from feedlink.types import FeedType, Team

HOME = Team(id=1, name="New Jersey Devils", abbreviation="NJD", team_name="Devils")
AWAY = Team(id=6, name="Boston Bruins", abbreviation="BOS", team_name="Bruins")


@pytest.fixture
def streams(make_stream):
    """One stream per feed type."""
    return {feed_type: make_stream(feed_type=feed_type, feed_id=feed_type.name) for feed_type in FeedType}


def test_default_feed_type() -> None:
    """Test the followed team's side is the default."""
    assert default_feed_type("NJD", HOME) is FeedType.HOME
    assert default_feed_type("BOS", HOME) is FeedType.AWAY


def test_explicit_feed_available(streams) -> None:
    """Test an available explicit feed wins over the default."""
    chosen = select_feed(FeedType.FRENCH, "NJD", HOME, AWAY, streams)
    assert chosen is streams[FeedType.FRENCH]


def test_default_home_feed(streams) -> None:
    """Test a home team fan gets the home feed."""
    assert select_feed(None, "NJD", HOME, AWAY, streams) is streams[FeedType.HOME]


def test_default_away_feed(streams) -> None:
    """Test an away team fan gets the away feed."""
    assert select_feed(None, "BOS", HOME, AWAY, streams) is streams[FeedType.AWAY]


def test_missing_away_falls_back_to_national(streams) -> None:
    """Test an away fan with only home and national feeds gets national."""
    available = {FeedType.HOME: streams[FeedType.HOME], FeedType.NATIONAL: streams[FeedType.NATIONAL]}

    assert select_feed(None, "BOS", HOME, AWAY, available) is streams[FeedType.NATIONAL]


def test_missing_explicit_falls_back(streams) -> None:
    """Test a missing explicit feed goes straight to the fallback order."""
    available = {FeedType.HOME: streams[FeedType.HOME], FeedType.AWAY: streams[FeedType.AWAY]}

    # Fallback order prefers home even for an away fan
    assert select_feed(FeedType.FRENCH, "BOS", HOME, AWAY, available) is streams[FeedType.HOME]


def test_fallback_to_away(streams) -> None:
    """Test away is the last resort."""
    available = {FeedType.AWAY: streams[FeedType.AWAY], FeedType.COMPOSITE: streams[FeedType.COMPOSITE]}

    assert select_feed(None, "NJD", HOME, AWAY, available) is streams[FeedType.AWAY]


def test_empty_feed_map() -> None:
    """Test an empty feed map is a NoMatchingFeed error."""
    with pytest.raises(NoMatchingFeed, match="BOS @ NJD"):
        select_feed(None, "NJD", HOME, AWAY, {})


def test_only_unselectable_feeds(streams) -> None:
    """Test feeds outside the fallback order are never picked implicitly."""
    available = {FeedType.FRENCH: streams[FeedType.FRENCH]}

    with pytest.raises(NoMatchingFeed):
        select_feed(None, "NJD", HOME, AWAY, available)


@pytest.mark.parametrize("explicit", [None, *FeedType])
@pytest.mark.parametrize("abbrev", ["NJD", "BOS", "XYZ"])
def test_selection_is_total(streams, explicit, abbrev) -> None:
    """Test every feed combination either selects an offered feed or raises NoMatchingFeed."""
    for size in range(len(FeedType) + 1):
        for combo in combinations(FeedType, size):
            available = {feed_type: streams[feed_type] for feed_type in combo}
            selectable = (explicit in available) or any(
                ft in available for ft in (FeedType.NATIONAL, FeedType.HOME, FeedType.AWAY)
            )
            if selectable:
                chosen = select_feed(explicit, abbrev, HOME, AWAY, available)
                assert chosen in available.values()
            else:
                with pytest.raises(NoMatchingFeed):
                    select_feed(explicit, abbrev, HOME, AWAY, available)

"""Type definitions for feedlink."""

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Generic, TypeAlias, TypeVar

from .errors import FeedlinkError

# Common type aliases
URL: TypeAlias = str
FeedId: TypeAlias = str


class Sport(Enum):
    """Leagues the provider serves; the value is its ``league`` parameter."""

    NHL = "nhl"
    MLB = "mlb"

    @property
    def tv_marker(self) -> str:
        """Title of the media EPG entry that lists the TV feeds."""
        return f"{self.name}TV"


class Cdn(Enum):
    """Content-delivery edge selected by the provider's ``cdn`` parameter."""

    AKAMAI = "akc"
    LEVEL3 = "l3c"


@total_ordering
class FeedType(Enum):
    """Broadcast angle of a game. Declaration order is display order."""

    HOME = "Home"
    AWAY = "Away"
    NATIONAL = "National"
    FRENCH = "French"
    COMPOSITE = "Composite"

    @classmethod
    def parse(cls, raw: str | None) -> "FeedType | None":
        """Parse a provider feed-type string, returning None when unknown."""
        if not raw:
            return None
        try:
            return cls[raw.strip().upper()]
        except KeyError:
            return None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FeedType):
            return NotImplemented
        members = list(FeedType)
        return members.index(self) < members.index(other)

    def __str__(self) -> str:
        return self.value


@total_ordering
class Quality(Enum):
    """Video quality tiers, declared from lowest to highest bitrate.

    Declaration order is the only ranking used anywhere; see ``QUALITIES``.
    """

    P216 = "216p"
    P224 = "224p"
    P288 = "288p"
    P360 = "360p"
    P504 = "504p"
    P540 = "540p"
    P720 = "720p"
    P720_60 = "720p60"

    @classmethod
    def parse(cls, label: str) -> "Quality":
        """Parse a label such as ``540p`` or ``720p60``.

        Raises:
            ValueError: If the label names no known tier.
        """
        return cls(label.strip().lower())

    @property
    def rank(self) -> int:
        return QUALITIES.index(self)

    @property
    def height(self) -> int:
        return int(self.value.split("p", 1)[0])

    @property
    def resolution_tag(self) -> str:
        """Marker the tier's variant carries in a master manifest, e.g. ``x540``."""
        return f"x{self.height}"

    @property
    def is_top(self) -> bool:
        return self is QUALITIES[-1]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Quality):
            return NotImplemented
        return self.rank < other.rank

    def __str__(self) -> str:
        return self.value


# Ascending; the single source of truth for ranking
QUALITIES: tuple[Quality, ...] = tuple(Quality)


@dataclass(frozen=True)
class Team:
    """A team from the sport's roster.

    Attributes:
        id: Numeric team id used by the schedule.
        name: Full display name, e.g. ``Boston Bruins``.
        abbreviation: Short code, unique within a sport, e.g. ``BOS``.
        team_name: Short name without location, e.g. ``Bruins``.
    """

    id: int
    name: str
    abbreviation: str
    team_name: str = ""


@dataclass(frozen=True)
class QualityLine:
    """One variant entry of an HLS master manifest.

    Attributes:
        quality: Tier the marker line matched, or None when unranked.
        uri: The line following the marker (the variant URI fragment).
    """

    quality: Quality | None
    uri: str

    @property
    def ranked(self) -> bool:
        return self.quality is not None


@dataclass(frozen=True)
class ImageCut:
    """One size variant of a game's preview art."""

    name: str
    aspect_ratio: str
    width: int
    height: int
    src: URL


class SlotState(Enum):
    UNATTEMPTED = "unattempted"
    RESOLVED = "resolved"
    FAILED = "failed"


T = TypeVar("T")


class Slot(Generic[T]):
    """Write-once memo of a single resolution attempt.

    A slot starts ``UNATTEMPTED`` and moves exactly once to ``RESOLVED``
    (holding a value) or ``FAILED`` (holding the error).
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.state = SlotState.UNATTEMPTED
        self._value: T | None = None
        self._error: FeedlinkError | None = None

    @property
    def attempted(self) -> bool:
        return self.state is not SlotState.UNATTEMPTED

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def error(self) -> FeedlinkError | None:
        return self._error

    def resolve(self, value: T) -> T:
        self._ensure_unattempted()
        self.state = SlotState.RESOLVED
        self._value = value
        return value

    def fail(self, error: FeedlinkError) -> FeedlinkError:
        self._ensure_unattempted()
        self.state = SlotState.FAILED
        self._error = error
        return error

    def unwrap(self) -> T:
        """Return the resolved value, or re-raise the recorded failure."""
        if self.state is SlotState.RESOLVED:
            return self._value  # type: ignore[return-value]
        if self.state is SlotState.FAILED:
            raise self._error.with_traceback(None)  # type: ignore[union-attr]
        msg = f"Slot '{self.name}' has not been attempted"
        raise RuntimeError(msg)

    def _ensure_unattempted(self) -> None:
        if self.attempted:
            msg = f"Slot '{self.name}' is already {self.state.value}"
            raise RuntimeError(msg)

    def __repr__(self) -> str:
        return f"Slot({self.name!r}, {self.state.value})"

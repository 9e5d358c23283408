"""Pick the HLS variant matching a requested quality from a master manifest."""

import logging

from .errors import ManifestMalformed, QualityUnavailable
from .types import QUALITIES, URL, Quality, QualityLine

logger = logging.getLogger(__name__)

STREAM_INF_TAG = "#EXT-X-STREAM-INF"
FRAME_RATE_ATTRIBUTE = "FRAME-RATE"


def classify_line(line: str) -> Quality | None:
    """
    Return the tier a manifest line is a variant marker for, if any.

    The top tier shares its resolution tag with the tier below it, so it
    additionally requires a frame-rate attribute, and a line that qualifies
    as a top-tier marker never counts for another tier.

    Args:
        line: A single manifest line.

    Returns:
        The matching tier, or None if the line marks no known tier.
    """
    top = QUALITIES[-1]
    if top.resolution_tag in line and FRAME_RATE_ATTRIBUTE in line:
        return top

    for quality in reversed(QUALITIES[:-1]):
        if quality.resolution_tag in line:
            return quality
    return None


def parse_quality_lines(manifest: str) -> list[QualityLine]:
    """
    Pair every variant marker in a manifest with the line that follows it.

    Stream-info lines that match no known tier are kept as unranked entries.
    A marker on the last line has no URI and is dropped.
    """
    lines = manifest.splitlines()
    entries: list[QualityLine] = []
    for idx, line in enumerate(lines[:-1]):
        quality = classify_line(line)
        if quality is None and not line.startswith(STREAM_INF_TAG):
            continue
        entries.append(QualityLine(quality=quality, uri=lines[idx + 1].strip()))
    return entries


def negotiate(manifest: str, requested: Quality) -> str:
    """
    Select the variant URI for the best tier not above ``requested``.

    An exact match wins; otherwise the nearest lower tier is used. A higher
    tier is never substituted.

    Args:
        manifest: Master manifest text.
        requested: Highest acceptable quality.

    Returns:
        The variant URI fragment as written in the manifest.

    Raises:
        QualityUnavailable: If the manifest offers nothing at or below ``requested``.
    """
    # Provider lists renditions in a fixed order; the last one per tier wins
    by_tier: dict[Quality, str] = {}
    for entry in parse_quality_lines(manifest):
        if entry.quality is not None:
            by_tier[entry.quality] = entry.uri

    for quality in sorted(by_tier, reverse=True):
        if quality <= requested:
            if quality is not requested:
                logger.info("Quality %s not offered, using %s", requested, quality)
            return by_tier[quality]

    offered = ", ".join(str(q) for q in sorted(by_tier)) or "none"
    msg = f"No stream at or below {requested} (offered: {offered})"
    raise QualityUnavailable(msg)


def variant_url(master_url: URL, fragment: str) -> URL:
    """
    Join a variant fragment onto the directory of the master manifest URL.

    Raises:
        ManifestMalformed: If the master URL has no path separator.
    """
    base, sep, _ = master_url.rpartition("/")
    if not sep:
        msg = f"Cannot derive variant location from master URL {master_url!r}"
        raise ManifestMalformed(msg)
    return f"{base}/{fragment}"

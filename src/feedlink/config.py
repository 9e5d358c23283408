"""Settings file loading and logging setup."""

import logging
import pathlib
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, TypeVar

import yaml

from .errors import ConfigError
from .stream import DEFAULT_HOST
from .transport import DEFAULT_MAX_CONNECTIONS, DEFAULT_TIMEOUT_SECONDS
from .types import URL, Cdn, Quality, Sport

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "feedlink.yaml"
DEFAULT_POLL_INTERVAL_SECONDS = 30 * 60.0
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(debug: bool = False, log_file: pathlib.Path | None = None) -> None:
    """
    Configure logging for the application.

    Args:
        debug: Enable debug level logging if True.
        log_file: Also write the log to this file when given.
    """
    level = logging.DEBUG if debug else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)


@dataclass
class Settings:
    """
    Everything needed to locate and resolve feeds.

    Attributes:
        sport: League to load schedules for.
        host: Provider host serving ``getM3U8.php``.
        cdn: Delivery edge requested from the provider.
        quality: Highest quality wanted; None means the master link.
        poll_interval_seconds: Wait between checks for a feed to go live.
        fail_fast: Surface a not-live feed as an error instead of waiting.
        max_connections: Pooled connections per host.
        request_timeout_seconds: Timeout of each HTTP request.
        stats_base_url: Override of the sport's stats API root.
    """

    sport: Sport = Sport.NHL
    host: URL = DEFAULT_HOST
    cdn: Cdn = Cdn.AKAMAI
    quality: Quality | None = None
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    fail_fast: bool = False
    max_connections: int = DEFAULT_MAX_CONNECTIONS
    request_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    stats_base_url: URL | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """
        Build settings from a mapping, converting enum values by name or value.

        Raises:
            ConfigError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"Unknown settings: {', '.join(unknown)}"
            raise ConfigError(msg)

        values = dict(data)
        try:
            if "sport" in values:
                values["sport"] = _parse_enum(Sport, values["sport"])
            if "cdn" in values:
                values["cdn"] = _parse_enum(Cdn, values["cdn"])
            if values.get("quality") is not None:
                values["quality"] = Quality.parse(str(values["quality"]))
            for key in ("poll_interval_seconds", "request_timeout_seconds"):
                if key in values:
                    values[key] = float(values[key])
            if "max_connections" in values:
                values["max_connections"] = int(values["max_connections"])
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Invalid setting value: {e}"
            raise ConfigError(msg) from e

        if not isinstance(values.get("fail_fast", False), bool):
            msg = f"fail_fast must be true or false, not {values['fail_fast']!r}"
            raise ConfigError(msg)
        host = values.get("host", DEFAULT_HOST)
        if not isinstance(host, str) or not host.strip():
            msg = f"host must be a non-empty URL, not {host!r}"
            raise ConfigError(msg)
        if values.get("stats_base_url") is not None and not isinstance(values["stats_base_url"], str):
            msg = f"stats_base_url must be a URL, not {values['stats_base_url']!r}"
            raise ConfigError(msg)
        if values.get("max_connections", DEFAULT_MAX_CONNECTIONS) < 1:
            msg = "max_connections must be at least 1"
            raise ConfigError(msg)
        return cls(**values)


E = TypeVar("E", bound=Enum)


def _parse_enum(enum_cls: type[E], raw: Any) -> E:
    text = str(raw).strip()
    for member in enum_cls:
        if text.lower() in (member.name.lower(), str(member.value).lower()):
            return member
    msg = f"{raw!r} is not a valid {enum_cls.__name__}"
    raise ValueError(msg)


def load_settings(yaml_path: pathlib.Path | None = None) -> Settings:
    """
    Load settings from a YAML file.

    Args:
        yaml_path: Path to the settings file. If None, ``feedlink.yaml`` in the
            working directory is used when present, defaults otherwise.

    Returns:
        The loaded settings.

    Raises:
        FileNotFoundError: If an explicitly given file doesn't exist.
        ConfigError: If the YAML content is invalid.
    """
    if yaml_path is None:
        yaml_path = pathlib.Path.cwd() / DEFAULT_CONFIG_NAME
        if not yaml_path.exists():
            logger.debug("No %s found, using default settings", DEFAULT_CONFIG_NAME)
            return Settings()

    if not yaml_path.exists():
        msg = f"Settings file not found at {yaml_path}"
        raise FileNotFoundError(msg)

    with yaml_path.open() as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"Could not parse {yaml_path}: {e}"
            raise ConfigError(msg) from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        msg = "Settings file must contain a mapping of setting names to values"
        raise ConfigError(msg)

    return Settings.from_dict(data)

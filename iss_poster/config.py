"""Configuration loader for iss-poster."""

from __future__ import annotations

import os
from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from . import constants

TRUTHY_ENV_VALUES = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class FacebookConfig:
    page_id: Optional[str] = None
    access_token: Optional[str] = None
    graph_url: str = constants.DEFAULT_GRAPH_URL
    api_version: str = constants.DEFAULT_GRAPH_API_VERSION
    timeout_seconds: float = constants.DEFAULT_PUBLISH_TIMEOUT_SECONDS
    message_limit: int = constants.DEFAULT_MESSAGE_LIMIT


@dataclass(slots=True)
class TelemetryConfig:
    url: str = constants.DEFAULT_TELEMETRY_URL
    timeout_seconds: float = constants.DEFAULT_TELEMETRY_TIMEOUT_SECONDS


@dataclass(slots=True)
class ImageryConfig:
    base_url: str = constants.DEFAULT_IMAGERY_BASE_URL
    layer: str = constants.DEFAULT_IMAGERY_LAYER
    width: int = constants.DEFAULT_IMAGERY_WIDTH
    height: int = constants.DEFAULT_IMAGERY_HEIGHT
    timeout_seconds: float = constants.DEFAULT_IMAGERY_TIMEOUT_SECONDS
    staging_dir: Path = constants.DEFAULT_STAGING_DIR
    filename: str = constants.DEFAULT_IMAGERY_FILENAME
    keep_artifact: bool = False

    @property
    def staging_path(self) -> Path:
        return self.staging_dir / self.filename


@dataclass(slots=True)
class MessageConfig:
    timezone: str = constants.DEFAULT_DISPLAY_TIMEZONE


@dataclass(slots=True)
class NetworkConfig:
    ignore_tls: bool = False  # Disables certificate validation for self-signed proxies


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_network: bool = False


@dataclass(slots=True)
class PosterConfig:
    facebook: FacebookConfig
    telemetry: TelemetryConfig
    imagery: ImageryConfig
    message: MessageConfig
    network: NetworkConfig
    logging: LoggingConfig
    raw: ConfigParser = field(default_factory=ConfigParser)
    path: Path = constants.DEFAULT_CONFIG_PATH


def _env_flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() in TRUTHY_ENV_VALUES


def load_config(
    path: Optional[Path] = None, *, environ: Optional[Mapping[str, str]] = None
) -> PosterConfig:
    """Load configuration from disk and the environment, applying defaults.

    Values in ``FB_PAGE_ID``, ``FB_ACCESS_TOKEN`` and ``IGNORE_TLS`` take
    precedence over the file. When ``environ`` is omitted a ``.env`` file in
    the working directory is loaded into the process environment first.
    """

    if environ is None:
        load_dotenv()
        environ = os.environ

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "facebook": {
                "graph_url": constants.DEFAULT_GRAPH_URL,
                "api_version": constants.DEFAULT_GRAPH_API_VERSION,
                "timeout_seconds": str(constants.DEFAULT_PUBLISH_TIMEOUT_SECONDS),
                "message_limit": str(constants.DEFAULT_MESSAGE_LIMIT),
            },
            "telemetry": {
                "url": constants.DEFAULT_TELEMETRY_URL,
                "timeout_seconds": str(constants.DEFAULT_TELEMETRY_TIMEOUT_SECONDS),
            },
            "imagery": {
                "base_url": constants.DEFAULT_IMAGERY_BASE_URL,
                "layer": constants.DEFAULT_IMAGERY_LAYER,
                "width": str(constants.DEFAULT_IMAGERY_WIDTH),
                "height": str(constants.DEFAULT_IMAGERY_HEIGHT),
                "timeout_seconds": str(constants.DEFAULT_IMAGERY_TIMEOUT_SECONDS),
                "staging_dir": str(constants.DEFAULT_STAGING_DIR),
                "filename": constants.DEFAULT_IMAGERY_FILENAME,
                "keep_artifact": "false",
            },
            "message": {
                "timezone": constants.DEFAULT_DISPLAY_TIMEZONE,
            },
            "network": {
                "ignore_tls": "false",
            },
            "logging": {
                "level": "INFO",
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    facebook = FacebookConfig(
        page_id=environ.get("FB_PAGE_ID")
        or parser.get("facebook", "page_id", fallback=None),
        access_token=environ.get("FB_ACCESS_TOKEN")
        or parser.get("facebook", "access_token", fallback=None),
        graph_url=parser.get("facebook", "graph_url"),
        api_version=parser.get("facebook", "api_version"),
        timeout_seconds=max(
            0.1,
            parser.getfloat(
                "facebook",
                "timeout_seconds",
                fallback=constants.DEFAULT_PUBLISH_TIMEOUT_SECONDS,
            ),
        ),
        message_limit=max(
            1,
            parser.getint(
                "facebook", "message_limit", fallback=constants.DEFAULT_MESSAGE_LIMIT
            ),
        ),
    )

    telemetry = TelemetryConfig(
        url=parser.get("telemetry", "url"),
        timeout_seconds=max(
            0.1,
            parser.getfloat(
                "telemetry",
                "timeout_seconds",
                fallback=constants.DEFAULT_TELEMETRY_TIMEOUT_SECONDS,
            ),
        ),
    )

    imagery = ImageryConfig(
        base_url=parser.get("imagery", "base_url"),
        layer=parser.get("imagery", "layer"),
        width=parser.getint("imagery", "width", fallback=constants.DEFAULT_IMAGERY_WIDTH),
        height=parser.getint(
            "imagery", "height", fallback=constants.DEFAULT_IMAGERY_HEIGHT
        ),
        timeout_seconds=max(
            0.1,
            parser.getfloat(
                "imagery",
                "timeout_seconds",
                fallback=constants.DEFAULT_IMAGERY_TIMEOUT_SECONDS,
            ),
        ),
        staging_dir=Path(parser.get("imagery", "staging_dir")).expanduser(),
        filename=parser.get("imagery", "filename"),
        keep_artifact=parser.getboolean("imagery", "keep_artifact", fallback=False),
    )

    message = MessageConfig(
        timezone=parser.get(
            "message", "timezone", fallback=constants.DEFAULT_DISPLAY_TIMEZONE
        ),
    )

    network = NetworkConfig(
        ignore_tls=parser.getboolean("network", "ignore_tls", fallback=False)
        or _env_flag(environ, "IGNORE_TLS")
        or environ.get("NODE_TLS_REJECT_UNAUTHORIZED") == "0",
    )

    log_path_value = parser.get("logging", "path", fallback=None)
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    return PosterConfig(
        facebook=facebook,
        telemetry=telemetry,
        imagery=imagery,
        message=message,
        network=network,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


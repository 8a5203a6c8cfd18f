"""Command-line interface for iss-poster."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .config import load_config
from .core import ConfigurationError, PipelineError
from .logging import configure_logging
from .pipeline import run_from_config

LOGGER = logging.getLogger(__name__)

SECRET_OPTIONS = {("facebook", "access_token")}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME,
        description="Post the ISS position with yesterday's Earth imagery to a Facebook page",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="Fetch telemetry and imagery, then publish the post")
    subparsers.add_parser(
        "preview", help="Print the message that would be posted without publishing"
    )
    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


def _mask(value: str) -> str:
    if len(value) <= 4:
        return "****"
    return f"{'*' * 8}{value[-4:]}"


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    configure_logging(
        config.logging.level,
        log_path=config.logging.path,
        log_network=config.logging.log_network,
        secrets=(config.facebook.access_token,),
    )

    if args.command in {"run", "preview"}:
        try:
            result = asyncio.run(
                run_from_config(config, publish=args.command == "run")
            )
        except (PipelineError, ConfigurationError) as exc:
            LOGGER.error("Error in pipeline: %s", exc)
            return 1
        if args.command == "preview":
            print(result.message)
        return 0

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                if (section, key) in SECRET_OPTIONS and value:
                    value = _mask(value)
                print(f"{key} = {value}")
            print()
        print(f"page_id (resolved) = {config.facebook.page_id or '<unset>'}")
        token = config.facebook.access_token
        print(f"access_token (resolved) = {_mask(token) if token else '<unset>'}")
        print(f"ignore_tls (resolved) = {config.network.ignore_tls}")
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Scouty CLI entry point.

Watch validator stashes on a Substrate chain: count their authored blocks,
track their parachain validator sessions, run hook scripts and report to a
private Matrix room.

Usage::

    companion-feed | scouty --stashes 16Uv...,14Ab... --matrix-user @me:matrix.org
    scouty --config-path scouty.yaml --feed events.jsonl --short
    scouty --config-path scouty.yaml --metrics-port 9090 --debug

Options:
    --config-path          YAML configuration file (default: scouty.yaml if present)
    --stashes              Comma separated stashes to watch
    --feed                 JSON lines chain event feed, `-` for stdin
    --error-interval       Minutes on hold after a feed error
    --short                Omit hook file lines from reports
    --expose-all           Pass every optional argument to hook scripts
    --metrics-port         Serve Prometheus metrics on this port
    --debug                Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from prometheus_client import start_http_server

from scouty import __version__
from scouty.config import Config, load_config
from scouty.errors import ConfigError
from scouty.matrix import Matrix
from scouty.metrics import REGISTRY
from scouty.monitor import JsonLinesFeed, check_hooks, configured_hooks, supervise

logger = logging.getLogger(__name__)


LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """`LOG_FORMAT` with the level name colored for terminals."""

    RESET = "\x1b[0m"
    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[38;5;244m",
        logging.INFO: "\x1b[38;5;40m",
        logging.WARNING: "\x1b[38;5;220m",
        logging.ERROR: "\x1b[38;5;196m",
        logging.CRITICAL: "\x1b[38;5;196;1m",
    }

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().formatMessage(record)
        # Pad before coloring, escape codes would count towards the width.
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname:<8}{self.RESET}"
        return super().formatMessage(colored)


def setup_logging(debug: bool = False, no_color: bool = False) -> None:
    """Log to stderr at info level, or debug."""
    level = logging.DEBUG if debug else logging.INFO
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT) if no_color else ColoredFormatter()
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # httpx logs every request at info level.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scouty",
        description="Validator monitor with hooks and Matrix reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"scouty {__version__}")
    parser.add_argument(
        "-c",
        "--config-path",
        type=Path,
        default=None,
        help="YAML configuration file (default: scouty.yaml if present)",
    )
    parser.add_argument(
        "--stashes",
        default=None,
        help="Comma separated validator stashes to watch",
    )
    parser.add_argument(
        "--feed",
        default=None,
        help="JSON lines chain event feed, '-' for stdin",
    )
    parser.add_argument(
        "--error-interval",
        type=int,
        default=None,
        help="Minutes to wait before restarting after a feed error",
    )
    parser.add_argument(
        "--short",
        dest="is_short",
        action="store_true",
        default=None,
        help="Omit hook file lines from reports",
    )
    parser.add_argument(
        "--expose-network",
        action="store_true",
        default=None,
        help="Pass network name, token symbol and decimals to hooks",
    )
    parser.add_argument(
        "--expose-authored-blocks",
        action="store_true",
        default=None,
        help="Pass authored block counts to hooks",
    )
    parser.add_argument(
        "--expose-para-validator",
        action="store_true",
        default=None,
        help="Pass parachain validator records to hooks",
    )
    parser.add_argument(
        "--expose-all",
        action="store_true",
        default=None,
        help="Pass every optional argument to hooks",
    )
    parser.add_argument(
        "--matrix-disabled",
        action="store_true",
        default=None,
        help="Do not send Matrix messages",
    )
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Serve Prometheus metrics on this port",
    )
    parser.add_argument(
        "-d",
        "--debug",
        dest="is_debug",
        action="store_true",
        default=None,
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Configuration values given on the command line."""
    fields = (
        "stashes",
        "feed",
        "error_interval",
        "is_short",
        "is_debug",
        "expose_network",
        "expose_authored_blocks",
        "expose_para_validator",
        "expose_all",
        "matrix_disabled",
        "metrics_port",
    )
    return {name: getattr(args, name) for name in fields if getattr(args, name) is not None}


async def run(config: Config) -> None:
    """Monitor the configured feed until it ends."""
    hooks = check_hooks(config)
    logger.info("%d of %d hook scripts found", len(hooks), len(configured_hooks(config)))
    feed = JsonLinesFeed.open(config.feed)
    matrix = Matrix(
        user=config.matrix_user,
        bot_user=config.matrix_bot_user,
        bot_password=config.matrix_bot_password,
        disabled=config.matrix_disabled,
        display_name_disabled=config.matrix_bot_display_name_disabled,
        base_url=config.matrix_url,
    )
    try:
        async with matrix:
            await supervise(config, matrix, feed)
    finally:
        feed.close()


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config_path, overrides=overrides_from_args(args))
    except ConfigError as e:
        setup_logging(no_color=args.no_color)
        logger.error("%s", e)
        sys.exit(1)

    setup_logging(config.is_debug, args.no_color)
    logger.info("scouty v%s watching %d stashes", __version__, len(config.stashes))

    if config.metrics_port is not None:
        start_http_server(config.metrics_port, registry=REGISTRY)
        logger.info("Metrics served on port %d", config.metrics_port)

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()

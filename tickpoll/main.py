"""Composition root for tickpoll.

This module is the ONLY location that imports both the core engine and
concrete adapter implementations. All wiring of dependencies happens here,
creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Poller construction
- Entry point selection (daemon, once)
"""

import asyncio
import logging
import sys
from typing import Any

from tickpoll.adapters.scheduler.daemon import DaemonScheduler
from tickpoll.adapters.sink.jsonl import JsonLinesSink
from tickpoll.adapters.sink.stdout import StdoutSink
from tickpoll.adapters.sink.webhook import WebhookSink
from tickpoll.adapters.source.http import HttpJsonSource
from tickpoll.config import Settings, load_settings, options_from_settings
from tickpoll.core.options import set_pusher
from tickpoll.core.poller import Poller, new
from tickpoll.core.ports import SinkPort, SourcePort


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def build_sinks(settings: Settings) -> list[SinkPort[Any]]:
    """Instantiate the configured sinks, in push order.

    Raises:
        ValueError: If the webhook sink is enabled without a URL.
    """
    sinks: list[SinkPort[Any]] = []
    for backend in settings.sink_backends:
        if backend == "stdout":
            sinks.append(StdoutSink(verbose=settings.debug))
        elif backend == "jsonl":
            sinks.append(JsonLinesSink(settings.sink_jsonl_path))
        elif backend == "webhook":
            if not settings.sink_webhook_url:
                raise ValueError("webhook sink enabled but SINK_WEBHOOK_URL not set")
            sinks.append(
                WebhookSink(
                    url=settings.sink_webhook_url,
                    api_key=settings.sink_webhook_api_key,
                )
            )
        else:
            raise ValueError(f"Unknown sink backend: {backend}")
    return sinks


def build_poller(
    settings: Settings,
    source: SourcePort[Any],
    sinks: list[SinkPort[Any]],
) -> Poller[Any]:
    """Build a Poller from settings, a source and the sinks."""
    options = options_from_settings(settings)
    options.extend(set_pusher(sink) for sink in sinks)
    return new(source, *options)


async def bootstrap() -> None:
    """Load configuration, wire adapters, and start the application.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters with configuration
    4. Build the poller
    5. Select and start run mode

    Raises:
        SystemExit: On fatal configuration errors.
    """
    # Step 1: Load configuration
    settings = load_settings()

    # Step 2: Configure logging
    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading tickpoll...")

    # Step 3: Instantiate adapters
    if not settings.source_url:
        logger.error("SOURCE_URL must be set")
        sys.exit(1)

    source = HttpJsonSource(
        url=settings.source_url,
        api_key=settings.source_api_key,
        timeout=settings.source_timeout_seconds,
    )
    logger.info(f"Source: {settings.source_url}")

    try:
        sinks = build_sinks(settings)
    except ValueError as e:
        logger.error(str(e))
        await source.close()
        sys.exit(1)
    logger.info(f"Sinks: {', '.join(settings.sink_backends) or 'none'}")

    # Step 4: Build the poller
    poller = build_poller(settings, source, sinks)
    scheduler = DaemonScheduler(
        poller,
        shutdown_grace_seconds=settings.shutdown_grace_seconds,
    )

    # Step 5: Select run mode and start
    logger.info(f"Starting in {settings.run_mode} mode...")

    try:
        if settings.run_mode == "daemon":
            await scheduler.start()
        elif settings.run_mode == "once":
            await scheduler.run_single_cycle()
        else:
            logger.error(f"Unknown run mode: {settings.run_mode}")
            sys.exit(1)
    finally:
        # Clean up resources
        await source.close()
        for sink in sinks:
            if hasattr(sink, "close"):
                await sink.close()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except asyncio.CancelledError:
        logger.info("Graceful shutdown completed")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

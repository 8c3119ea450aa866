#!/usr/bin/env python3
"""
CollectionArtworkSync - sync external collection artwork into Jellyfin

Entry point for the scheduled artwork sync task. Loads configuration,
configures logging, connects to Jellyfin, and runs the artwork reconciler
once or every ``sync_interval_hours``.

Usage:
    python CollectionArtworkSync.py [--once] [--config /path/to/config.yml]

Configuration comes from CAS_-prefixed environment variables and an
optional YAML file (see validation/config.py).
"""

import argparse
import os
import sys

from shared.log import create_logger, create_progress_logger
log_trace, log_debug, log_info, log_warn, log_error = create_logger()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sync external collection artwork into the Jellyfin collections folder"
    )
    parser.add_argument(
        '--once',
        action='store_true',
        help="Run a single sync and exit instead of running every sync_interval_hours",
    )
    parser.add_argument(
        '--config',
        help="YAML configuration file (overrides CAS_CONFIG_FILE)",
    )
    return parser.parse_args(argv)


def load_config(config_file=None):
    """Validate configuration from environment and YAML.

    Returns:
        Tuple of (ArtworkSyncConfig, None) or (None, error_message)
    """
    from validation.config import validate_config

    return validate_config({}, config_file=config_file)


def build_reconciler(config, client):
    """Create the reconciler with the Jellyfin client as catalog and refresh sink."""
    from reconciliation.engine import ArtworkReconciler

    os.makedirs(config.data_dir, exist_ok=True)
    return ArtworkReconciler(
        config=config,
        catalog=client,
        refresh_sink=client,
        data_dir=config.data_dir,
    )


def run_once(reconciler) -> int:
    """Run a single sync.

    Returns:
        Process exit code: 0 on success, 1 if the run could not start
        or a file failed.
    """
    from reconciliation.errors import ConfigurationError, RunInProgressError

    try:
        result = reconciler.run(progress=create_progress_logger())
    except ConfigurationError as e:
        log_error(f"Configuration error: {e}")
        return 1
    except RunInProgressError as e:
        log_warn(str(e))
        return 1

    return 0 if result.ok else 1


def run_scheduled(reconciler, interval_hours: float) -> int:
    """Run the sync every ``interval_hours`` until interrupted."""
    from reconciliation.scheduler import SyncScheduler

    log_progress = create_progress_logger()
    scheduler = SyncScheduler(
        lambda cancel_event: reconciler.run(progress=log_progress, cancel_event=cancel_event),
        interval_hours=interval_hours,
    )
    scheduler.start()
    try:
        scheduler.wait()
    except KeyboardInterrupt:
        log_info("Interrupted, stopping scheduler")
    finally:
        scheduler.stop(timeout=30)
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config, error = load_config(args.config)

    from shared.logging_config import configure_logging
    if error:
        configure_logging('info')
        log_error(f"Configuration error: {error}")
        return 1

    configure_logging(config.log_level, debug_logging=config.debug_logging)
    config.log_config()

    if not config.enabled:
        log_info("Artwork sync is disabled via configuration")
        return 0

    from jellyfin.client import JellyfinClient

    with JellyfinClient(
        config.jellyfin_url,
        api_key=config.jellyfin_api_key,
        timeout=config.jellyfin_timeout,
    ) as client:
        reconciler = build_reconciler(config, client)
        if args.once:
            return run_once(reconciler)
        return run_scheduled(reconciler, config.sync_interval_hours)


if __name__ == "__main__":
    sys.exit(main())

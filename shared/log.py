"""
Component logger factory.

Every module logs through a small set of level functions bound to a
component-specific stdlib logger, so call sites stay one-liners and the
logger hierarchy stays consistent:

    CollectionArtworkSync.<component>

Usage:
    from shared.log import create_logger
    log_trace, log_debug, log_info, log_warn, log_error = create_logger("Reconciler")
    log_info("Processing collection Alien [boxset]")
"""

import logging

# Below DEBUG; used for very chatty per-file tracing
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

ROOT_LOGGER_NAME = "CollectionArtworkSync"


def create_logger(component: str = ""):
    """Create log functions for a component.

    Args:
        component: Component name suffix. If provided, the logger becomes
                   "CollectionArtworkSync.{component}", otherwise
                   "CollectionArtworkSync".

    Returns:
        Tuple of (log_trace, log_debug, log_info, log_warn, log_error) functions.
    """
    name = f"{ROOT_LOGGER_NAME}.{component}" if component else ROOT_LOGGER_NAME
    logger = logging.getLogger(name)

    def log_trace(msg): logger.log(TRACE, msg)
    def log_debug(msg): logger.debug(msg)
    def log_info(msg): logger.info(msg)
    def log_warn(msg): logger.warning(msg)
    def log_error(msg): logger.error(msg)

    return log_trace, log_debug, log_info, log_warn, log_error


def create_progress_logger(component: str = "Progress"):
    """Create a progress reporter.

    Returns:
        log_progress function accepting a percentage (0-100).
    """
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")

    def log_progress(p): logger.info(f"Progress: {p:.0f}%")
    return log_progress

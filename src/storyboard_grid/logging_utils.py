"""
Shared logger for the storyboard grid engine.

Planning, prompt building and decomposition all log through ``logger``
so the CLI can raise verbosity in one place.
"""

import logging

_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(
        name: str = "storyboard_grid",
        level: int | str = logging.INFO,
        formatter: logging.Formatter | None = None,
        handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Return the named logger, attaching a handler on first use.

    ``level`` accepts either a numeric level or a name such as
    ``"DEBUG"``. Later calls for the same name update the level but
    never stack a second handler.

    Args:
        name: Logger name.
        level: Numeric level or level name.
        formatter: Formatter for the first handler; defaults to a
            timestamped ``name: message`` layout.
        handler: Handler to attach; defaults to a stderr stream.

    Returns:
        The configured logger.

    """
    configured = logging.getLogger(name)
    configured.setLevel(level.upper() if isinstance(level, str) else level)
    if configured.handlers:
        return configured

    target = handler or logging.StreamHandler()
    target.setFormatter(formatter or logging.Formatter(_DEFAULT_FORMAT))
    configured.addHandler(target)
    configured.propagate = False
    return configured


logger = setup_logger()

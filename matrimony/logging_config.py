"""Root logger setup for the matrimony API."""

import logging


def setup_logging(level: str = "INFO") -> None:
    """Attach a console handler to the root logger once.

    Repeated calls (tests, reloads) are no-ops when handlers are already
    attached.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)


__all__ = ["setup_logging"]

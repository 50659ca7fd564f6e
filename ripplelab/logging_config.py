"""
Logging setup for scripts and GUIs driving the simulations.

Library modules only create `logging.getLogger(__name__)` loggers; handlers
are attached here by whatever program is in charge. Calling `setup_logging`
again (GUI reset, notebook re-run) replaces the handlers it installed before
instead of stacking duplicates.
"""

import logging
import sys
from typing import Optional

NAMESPACE = 'ripplelab'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._ripplelab_owned = True
    return handler


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Route the `ripplelab` loggers to stdout and optionally to `log_file`."""
    logger = logging.getLogger(NAMESPACE)
    logger.setLevel(level)

    for old in [h for h in logger.handlers if getattr(h, '_ripplelab_owned', False)]:
        logger.removeHandler(old)
        old.close()

    logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        logger.addHandler(_make_handler(
            logging.FileHandler(log_file, mode='w', encoding='utf-8'), level))

    logger.debug('logging to stdout%s', f' and {log_file}' if log_file else '')
    return logger

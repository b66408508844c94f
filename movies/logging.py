"""
Logging for the movies service.

Log records are emitted as JSON objects, one per line, so that they can be
shipped to a log aggregator without further parsing. Use
:func:`getLogger` in place of :func:`logging.getLogger`:

.. code-block:: python

   from movies import logging

   logger = logging.getLogger(__name__)

"""

import logging
import sys
from typing import IO, Optional

from pythonjsonlogger import jsonlogger

from .context import get_application_config

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'
RENAME_FIELDS = {'levelname': 'level', 'asctime': 'timestamp'}


def _formatter() -> logging.Formatter:
    return jsonlogger.JsonFormatter(FORMAT, rename_fields=RENAME_FIELDS)


def getLogger(name: str, stream: IO = sys.stderr) -> logging.Logger:
    """
    Get a JSON-formatting logger with level and output taken from config.

    Parameters
    ----------
    name : str
        Usually ``__name__`` of the calling module.
    stream : file-like
        Where records go when ``LOGFILE`` is not set.

    Returns
    -------
    :class:`logging.Logger`

    """
    config = get_application_config()
    try:
        level = int(config.get('LOGLEVEL', logging.INFO))
    except (TypeError, ValueError):
        level = logging.INFO
    logfile: Optional[str] = config.get('LOGFILE')

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler: logging.Handler
        if logfile:
            handler = logging.FileHandler(logfile)
        else:
            handler = logging.StreamHandler(stream)
        handler.setFormatter(_formatter())
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(level)
    return logger

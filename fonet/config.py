"""
config.py
~~~~~~~~~

Environment-driven settings for the scripts and the model store.

- ``LOG_LEVEL``: logging level used by ``configure_logging`` (default INFO)
- ``FONET_MODEL_DIR``: directory holding the model database (default ``models``)
"""

import logging
import os
from typing import Optional, Union

DEFAULT_MODEL_DIR = os.getenv('FONET_MODEL_DIR', 'models')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Set up logging for command line programs.

    Library modules only create loggers; handlers are installed here.

    Args:
        level: Logging level name or number. Falls back to the
            ``LOG_LEVEL`` environment variable, then INFO.
    """
    if level is None:
        level = os.getenv('LOG_LEVEL', 'INFO')
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger('fonet').setLevel(level)

"""Process-wide logging for hosts that embed the adapter.

Library modules only call logging.getLogger(__name__); setup_telemetry()
calls setup_logging() so a host gets storage logs with one call.
"""

import logging
import sys

from blobstore.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# SDK HTTP logging prints every request at INFO.
_NOISY_LOGGERS = ("azure.core.pipeline.policies.http_logging_policy",)


def setup_logging(settings: Settings | None = None) -> int:
    """Configure the root logger to stdout and return the level used.

    DEBUG when settings.debug is True, otherwise INFO. Azure SDK request
    logging is held at WARNING unless debugging.
    """
    s = settings or get_settings()
    level = logging.DEBUG if s.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if s.debug else logging.WARNING)
    return level

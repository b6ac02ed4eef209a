from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from .config import Settings, settings as default_settings

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_structured_logging(settings: Optional[Settings] = None) -> bool:
    settings = settings or default_settings
    root = logging.getLogger()
    if getattr(root, "_admin_registry_logging_configured", False):
        return False

    handler = logging.StreamHandler()
    if settings.structured_logging:
        handler.setFormatter(JsonFormatter(_LOG_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root.handlers = [handler]
    root.setLevel(settings.log_level_number)
    setattr(root, "_admin_registry_logging_configured", True)
    return True

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from flask import Flask

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s : %(message)s"


def setup_logging(app: Flask, *, level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """Attach console (and optionally rotating file) handlers.

    The package logger is configured rather than the root logger, so every
    module using ``logging.getLogger(__name__)`` inherits the handlers.
    """

    formatter = logging.Formatter(LOG_FORMAT)
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    package_logger = logging.getLogger(__name__.rsplit(".", 2)[0])
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(numeric_level)
    package_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "app.log"),
            maxBytes=1024 * 1024 * 10,  # 10MB
            backupCount=5,
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.INFO)
        package_logger.addHandler(file_handler)

    app.logger.setLevel(numeric_level)
    for handler in package_logger.handlers:
        app.logger.addHandler(handler)

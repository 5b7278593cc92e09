"""Logging configuration for org-config.

Records go to stderr, either as JSON documents (default) or as plain text
lines for local runs. Configure via the ORG_CONFIG_LOG_FORMAT_JSON and
ORG_CONFIG_LOG_LEVEL environment variables.
"""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from org_config.config import settings

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter with stable field names.

    Extra fields given to a log call (``extra={"path": ...}``) are merged in
    by JsonFormatter itself.
    """

    def add_fields(
        self,
        log_record: dict[str, object],
        record: logging.LogRecord,
        message_dict: dict[str, object],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["message"] = record.getMessage()

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def setup_logging(
    log_level: str | None = None, log_format_json: bool | None = None
) -> logging.Logger:
    """Configure the root logger and return the org_config logger.

    Args:
        log_level: Overrides settings.log_level when given
        log_format_json: Overrides settings.log_format_json when given
    """
    use_json = settings.log_format_json if log_format_json is None else log_format_json
    formatter: logging.Formatter
    if use_json:
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(logger)s %(message)s", datefmt=DATE_FORMAT
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt=DATE_FORMAT
        )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel((log_level or settings.log_level).upper())

    return logging.getLogger("org_config")

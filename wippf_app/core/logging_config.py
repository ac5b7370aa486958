import logging
import sys
from datetime import datetime, timezone

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "wippf-profile-engine"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Tags every record with the service name, an ISO UTC timestamp and its source location."""

    def __init__(self, *args, service: str = SERVICE_NAME, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['service'] = self.service
        log_record['timestamp'] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['lineno'] = record.lineno


def _has_json_handler(logger: logging.Logger) -> bool:
    return any(
        isinstance(h, logging.StreamHandler) and isinstance(h.formatter, CustomJsonFormatter)
        for h in logger.handlers
    )


def setup_logging(log_level_str: str = "INFO"):
    """
    Configures structured JSON logging on the root logger.

    Safe to call more than once; only the level changes on later calls.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not _has_json_handler(root_logger):
        log_handler = logging.StreamHandler(sys.stdout)
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(service)s %(logger)s %(message)s')
        log_handler.setFormatter(formatter)
        root_logger.addHandler(log_handler)
        root_logger.info("Structured JSON logging configured with level: %s", logging.getLevelName(log_level))
    else:
        root_logger.debug("Structured JSON logging already configured. Level: %s", logging.getLevelName(log_level))

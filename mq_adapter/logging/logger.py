"""
Logging configuration and utilities.
"""

import inspect
import json
import logging
import socket
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from mq_adapter.config import Config

try:
    from elasticsearch import Elasticsearch

    ELASTICSEARCH_AVAILABLE = True
except ImportError:
    ELASTICSEARCH_AVAILABLE = False


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_json_message(message: str) -> Optional[Dict[str, Any]]:
    """Return the message as a dict if it is a JSON object, else None."""
    if not message.strip().startswith("{"):
        return None
    try:
        parsed = json.loads(message)
    except (json.JSONDecodeError, ValueError, TypeError):
        return None
    return parsed if isinstance(parsed, dict) else None


class CloudLoggingJSONFormatter(logging.Formatter):
    """
    Formatter that outputs JSON for Cloud Logging when the message carries structured data.
    Cloud Logging automatically parses JSON from stdout if the line starts with '{'.
    """

    def format(self, record):
        parsed = _parse_json_message(record.getMessage())
        if parsed is None:
            return super().format(record)

        log_entry = {
            "severity": record.levelname,
            "message": parsed.get("message", record.getMessage()),
            "timestamp": _utc_timestamp(),
            "service": record.name,
        }
        for key, value in parsed.items():
            if key != "message":
                log_entry[key] = value
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


class ElasticsearchHandler(logging.Handler):
    """Handler that indexes log records into a daily Elasticsearch index."""

    def __init__(self, es_client, index_pattern="mq-adapter-logs-{date}"):
        super().__init__()
        self.es_client = es_client
        self.index_pattern = index_pattern
        self.hostname = socket.gethostname()
        self._processing = False  # Guards against recursive emits

    def build_document(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Turn a record into the document stored in Elasticsearch."""
        doc = _parse_json_message(record.getMessage())
        if doc is None:
            formatted = self.format(record)
            doc = _parse_json_message(formatted) or {"message": formatted}

        if not doc.get("timestamp"):
            doc["timestamp"] = _utc_timestamp()
        doc.setdefault("level", record.levelname)
        doc.setdefault("severity", record.levelname)
        if not doc.get("service"):
            doc["service"] = record.name
        doc["hostname"] = self.hostname
        return doc

    def emit(self, record):
        """Emit a log record to Elasticsearch."""
        if self._processing:
            return

        self._processing = True
        try:
            date_str = datetime.now(timezone.utc).strftime("%Y.%m.%d")
            index_name = self.index_pattern.format(date=date_str)
            self.es_client.index(index=index_name, document=self.build_document(record))
        except Exception as e:
            # Print rather than log, logging here would recurse
            print(
                f"[ELASTICSEARCH_HANDLER] Error indexing log: {e}",
                file=sys.stderr,
            )
        finally:
            self._processing = False


def _should_attach_elasticsearch() -> bool:
    return (
        ELASTICSEARCH_AVAILABLE
        and bool(Config.ELASTICSEARCH_HOST)
        and not Config.DISABLE_ELASTICSEARCH
        and not Config.K_SERVICE  # Cloud Run ships stdout to Cloud Logging
    )


def setup_logger(
    service_name: Optional[str] = None, log_level: Optional[str] = None
) -> logging.Logger:
    """Setup and configure logger for a service."""

    name = service_name or Config.SERVICE_NAME
    level = getattr(logging, (log_level or Config.LOG_LEVEL).upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    formatter = CloudLoggingJSONFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # The host application may already have installed a console handler
    has_console_handler = any(
        isinstance(h, logging.StreamHandler) for h in root_logger.handlers
    )
    if not has_console_handler:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    has_elasticsearch_handler = any(
        isinstance(h, ElasticsearchHandler) for h in root_logger.handlers
    )
    if _should_attach_elasticsearch() and not has_elasticsearch_handler:
        try:
            es_client = Elasticsearch(
                [f"http://{Config.ELASTICSEARCH_HOST}:{Config.ELASTICSEARCH_PORT}"],
                verify_certs=False,
                ssl_show_warn=False,
                request_timeout=2,
                max_retries=0,
            )
            if es_client.ping(request_timeout=1):
                es_handler = ElasticsearchHandler(es_client)
                es_handler.setLevel(level)
                es_handler.setFormatter(formatter)
                root_logger.addHandler(es_handler)
            else:
                print("[ELASTICSEARCH] Ping failed, handler not added", file=sys.stderr)
        except Exception as e:
            print(f"[ELASTICSEARCH] Logging not available: {e}", file=sys.stderr)

    return logging.getLogger(name)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger, configuring the root logger on first use."""
    if not logging.getLogger().handlers:
        setup_logger()
    return logging.getLogger(name)


class StructuredLogger:
    """
    Wrapper around logger that adds structured fields for Google Cloud Logging.
    Lets you filter by fields like topic or subscription in Logs Explorer.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _format_structured_message(
        self,
        message: str,
        correlation_id: Optional[str] = None,
        **kwargs,
    ) -> str:
        """
        Format message with structured fields for Cloud Logging.

        Without fields the plain message is returned. With fields, the message
        and fields are dumped as one JSON object which CloudLoggingJSONFormatter
        turns into a Cloud Logging entry.
        """
        formatted_message = message
        if correlation_id:
            formatted_message = f"[{correlation_id}] {message}"

        if correlation_id or kwargs:
            structured_data: Dict[str, Any] = {"message": formatted_message}
            if correlation_id:
                structured_data["correlation_id"] = correlation_id
            structured_data.update(kwargs)
            return json.dumps(structured_data, default=str)
        return formatted_message

    def debug(self, message: str, correlation_id: Optional[str] = None, **kwargs):
        self.logger.debug(self._format_structured_message(message, correlation_id, **kwargs))

    def info(self, message: str, correlation_id: Optional[str] = None, **kwargs):
        self.logger.info(self._format_structured_message(message, correlation_id, **kwargs))

    def warning(self, message: str, correlation_id: Optional[str] = None, **kwargs):
        self.logger.warning(
            self._format_structured_message(message, correlation_id, **kwargs)
        )

    def error(
        self,
        message: str,
        correlation_id: Optional[str] = None,
        exc_info: bool = False,
        **kwargs,
    ):
        self.logger.error(
            self._format_structured_message(message, correlation_id, **kwargs),
            exc_info=exc_info,
        )

    def __getattr__(self, name: str):
        """Delegate other attributes to the underlying logger."""
        return getattr(self.logger, name)


def get_structured_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

    Usage:
        logger = get_structured_logger(__name__)
        logger.info("Published message", topic="orders", message_id="123")

    In Cloud Logging Explorer, you can then filter by:
        jsonPayload.topic="orders"
    """
    return StructuredLogger(get_logger(name))


def _caller_module(depth: int = 2) -> str:
    frame = inspect.currentframe()
    try:
        for _ in range(depth):
            frame = frame.f_back
        return frame.f_globals.get("__name__", "root")
    finally:
        del frame


def log_debug(
    message: str, correlation_id: str = "", logger_name: Optional[str] = None, **kwargs
):
    """Log a debug message with structured fields under the caller's module logger."""
    get_structured_logger(logger_name or _caller_module()).debug(
        message, correlation_id=correlation_id, **kwargs
    )


def log_info(
    message: str, correlation_id: str = "", logger_name: Optional[str] = None, **kwargs
):
    """
    Log an info message with structured fields.

    Args:
        message: The log message
        correlation_id: Correlation id for request tracing (can be empty string)
        logger_name: Optional logger name (defaults to caller's module name)
        **kwargs: Additional structured fields (e.g., topic, subscription)
    """
    get_structured_logger(logger_name or _caller_module()).info(
        message, correlation_id=correlation_id, **kwargs
    )


def log_warning(
    message: str, correlation_id: str = "", logger_name: Optional[str] = None, **kwargs
):
    """Log a warning message with structured fields under the caller's module logger."""
    get_structured_logger(logger_name or _caller_module()).warning(
        message, correlation_id=correlation_id, **kwargs
    )


def log_error(
    message: str,
    correlation_id: str = "",
    logger_name: Optional[str] = None,
    exc_info: bool = False,
    **kwargs,
):
    """
    Log an error message with structured fields.

    Pass exc_info=True from an except block to attach the traceback.
    """
    get_structured_logger(logger_name or _caller_module()).error(
        message, correlation_id=correlation_id, exc_info=exc_info, **kwargs
    )

"""
Logging configuration for HashPath.

Library modules only emit records; ``configure_logging`` is for
applications and the CLI. Chain events are emitted as structured records
so they can be aggregated alongside the caller's own logs.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

# Context variable for tracking one derivation across calls
derivation_id_var: ContextVar[str] = ContextVar('derivation_id', default='')


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        derivation_id = derivation_id_var.get()
        if derivation_id:
            log_data["derivation_id"] = derivation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class ChainEventLogger:
    """
    Emits HashPath chain events.

    Routine events (extension, consolidation, path consumption) are DEBUG;
    verification mismatches are WARNING.
    """

    def __init__(self, name: str = "hashpath.events"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra = {
            "event_type": event_type,
            "derivation_id": derivation_id_var.get(),
            **kwargs
        }
        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def hashpath_extended(self, base: str, applied_id: str, hashpath: str) -> None:
        self._log(
            logging.DEBUG,
            "HASHPATH_EXTENDED",
            base=base,
            applied_id=applied_id,
            hashpath=hashpath,
            message=f"Extended {base} with {applied_id}"
        )

    def hashpath_consolidated(self, pair: List[str], algorithm: str, new_base: str) -> None:
        self._log(
            logging.DEBUG,
            "HASHPATH_CONSOLIDATED",
            pair=pair,
            algorithm=algorithm,
            new_base=new_base,
            message=f"Consolidated pair with {algorithm}"
        )

    def verification_mismatch(
        self,
        window: int,
        expected: Optional[str],
        declared: Optional[str],
        reason: str
    ) -> None:
        self._log(
            logging.WARNING,
            "VERIFICATION_MISMATCH",
            window=window,
            expected=expected,
            declared=declared,
            reason=reason,
            message=f"Hashpath verification failed at window {window}: {reason}"
        )

    def request_popped(self, head: str, remaining: int) -> None:
        self._log(
            logging.DEBUG,
            "REQUEST_POPPED",
            head=head,
            remaining=remaining,
            message=f"Popped {head}, {remaining} segment(s) left"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for an application using HashPath.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_derivation_id(derivation_id: Optional[str] = None) -> str:
    """
    Set the derivation ID for the current context.

    Returns:
        The derivation ID that was set
    """
    if derivation_id is None:
        derivation_id = str(uuid.uuid4())
    derivation_id_var.set(derivation_id)
    return derivation_id


def get_derivation_id() -> str:
    """Get the current derivation ID."""
    return derivation_id_var.get()


# Global chain event logger instance
chain_events = ChainEventLogger()

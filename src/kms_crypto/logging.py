"""JSON log output for hosts that want the library's own log setup.

Nothing here runs on import. A host either calls :func:`configure_logging`
directly or sets ``logging.configure: true`` in its config file, in which
case :func:`~kms_crypto.service.new_service` applies it.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, List, Union

import structlog

from .config import LoggingConfig

_PACKAGE = "kms_crypto"
# Field names a caller might bind by mistake; their values never reach output.
_PAYLOAD_FIELDS = frozenset({"plaintext", "ciphertext", "data"})
_REDACTED = "[redacted]"


def configure_logging(settings: Union[LoggingConfig, str, None] = None) -> None:
    """Route structlog through stdlib logging as JSON lines on stdout.

    Each record carries ``ts``, ``level``, ``msg`` and ``component``, where
    ``component`` names the emitting module relative to the package
    (``service``, ``backends.gcp``).
    """
    if isinstance(settings, LoggingConfig):
        level_name = settings.normalized_level()
    else:
        level_name = (settings or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
        format="%(message)s",
        force=True,
    )
    structlog.configure(
        processors=_processors(),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def _processors() -> List[Any]:
    return [
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.stdlib.add_log_level,
        _add_component,
        _redact_payloads,
        structlog.processors.EventRenamer("msg"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def _add_component(logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    if "component" not in event_dict:
        logger_name = getattr(logger, "name", None) or _PACKAGE
        if logger_name.startswith(_PACKAGE + "."):
            logger_name = logger_name[len(_PACKAGE) + 1:]
        event_dict["component"] = logger_name
    return event_dict


def _redact_payloads(_logger: Any, _name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for field in _PAYLOAD_FIELDS.intersection(event_dict):
        event_dict[field] = _REDACTED
    return event_dict


__all__ = ["configure_logging"]

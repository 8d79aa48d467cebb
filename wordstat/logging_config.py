from __future__ import annotations

import logging
from typing import Any, Union

import structlog

LOGGER_NAME = "wordstat"


def _service_tagger(service: str) -> Any:
    def add_service(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service)
        return event_dict

    return add_service


def setup_logging(level: Union[int, str] = logging.INFO, service: str = "wordstat") -> None:
    """Render structlog events as JSON lines tagged with the service name."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            _service_tagger(service),
            structlog.processors.EventRenamer("message"),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(level=level, format="%(message)s")
    # basicConfig is a no-op once handlers exist, so the level is applied explicitly.
    logging.getLogger(LOGGER_NAME).setLevel(level)


logger = structlog.get_logger(LOGGER_NAME)

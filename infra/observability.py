from __future__ import annotations

import logfire

from .logger import get_logger

log = get_logger(__name__)

_configured = False


def configure_logfire(service_name: str = "meridian-engine") -> None:
    """
    Configure logfire tracing and instrument pydantic-ai narrator calls.

    Data is only shipped when a LOGFIRE_TOKEN is present; otherwise spans stay
    local. Safe to call more than once.
    """
    global _configured
    if _configured:
        return
    logfire.configure(service_name=service_name, send_to_logfire="if-token-present")
    logfire.instrument_pydantic_ai()
    _configured = True
    log.info("logfire configured for %s", service_name)

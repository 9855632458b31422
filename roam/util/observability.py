"""Logfire configuration and instrumentation.

Domain services call ``logfire`` directly::

    with logfire.span("account_linker.remote_login", site_id=site.id):
        logfire.info("Remote login succeeded", identity_id=str(identity.id))

Tokens, cookie values, passwords and the network secret are never passed as
attributes.
"""

from typing import Any

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from roam.config import Settings

SERVICE_NAME = "roam-auth"
SERVICE_VERSION = "0.1.0"


def _should_send(settings: Settings) -> bool:
    # An explicit flag wins; otherwise a token means cloud sending
    explicit = settings.observability.send_to_logfire
    if explicit is not None:
        return explicit
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for the process.

    Controlled by ``OBSERVABILITY__SEND_TO_LOGFIRE`` and
    ``OBSERVABILITY__LOGFIRE_TOKEN``.
    """
    send = _should_send(settings)
    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send,
        token=settings.observability.logfire_token or None,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )
    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send,
    )


def _request_attributes(request: Any, attributes: dict[str, Any]) -> dict[str, Any]:
    # Host matters here: the same path behaves differently per tenant site
    result = dict(attributes)
    url = getattr(request, "url", None)
    if url is not None:
        result["path"] = url.path
        result["host"] = url.hostname
    client = getattr(request, "client", None)
    if client is not None:
        result["client_host"] = client.host
    return result


def instrument_fastapi(app: FastAPI) -> None:
    """Trace requests without capturing headers, which carry session cookies."""
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_request_attributes,
        excluded_urls="/health",
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_redis() -> None:
    """Trace Redis commands; values are not captured."""
    logfire.instrument_redis(capture_statement=False)

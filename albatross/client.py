from __future__ import annotations

import httpx

from albatross.clients.http_client import create_http_client
from albatross.clients.transport import RequestExecutor, RetryingTransport
from albatross.config import RetryPolicy, Settings
from albatross.core.exceptions import ConfigurationError
from albatross.core.logging import DiagnosticSink
from albatross.services.release_client import ReleaseClient

_UNSET = object()


def create_release_client(
    host: str | None = None,
    *,
    settings: Settings | None = None,
    timeout: float | None = None,
    retry: RetryPolicy | None | object = _UNSET,
    executor: RequestExecutor | None = None,
    logger: DiagnosticSink | None = None,
    configure_logging: bool = False,
) -> ReleaseClient:
    """Build a ``ReleaseClient`` for ``host``.

    Settings supply the defaults; ``timeout`` and ``retry`` override them
    (``retry=None`` disables retries). Without an ``executor`` a dedicated
    ``httpx.AsyncClient`` is created and closed with the release client.
    ``configure_logging`` applies the logging settings process-wide.
    """
    settings = settings or Settings()
    if configure_logging:
        settings.configure_logging()
    base_url = _parse_host(host or settings.ALBATROSS_HOST)

    config = settings.transport_config()
    overrides: dict[str, object] = {}
    if timeout is not None:
        overrides["timeout"] = timeout
    if retry is not _UNSET:
        overrides["retry"] = retry
    if overrides:
        config = config.model_validate({**config.model_dump(), **overrides})

    owned: httpx.AsyncClient | None = None
    if executor is None:
        owned = create_http_client(config)
        executor = owned

    transport = RetryingTransport(executor=executor, config=config, logger=logger)
    return ReleaseClient(transport=transport, base_url=base_url, http_client=owned)


def _parse_host(host: str) -> httpx.URL:
    try:
        url = httpx.URL(host)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(message=f"invalid host: {host}", detail=str(exc)) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(
            message=f"invalid host: {host}",
            detail="host must be an absolute http(s) URL",
        )
    return url

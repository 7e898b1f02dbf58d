from __future__ import annotations

import asyncio
from types import TracebackType
from typing import Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from albatross.clients.http_client import close_http_client
from albatross.clients.transport import RequestBody, ResponseEnvelope
from albatross.core.exceptions import APIError, ReleaseNotFoundError, ResponseDecodeError
from albatross.core.logging import get_logger
from albatross.schemas.flags import (
    InstallFlags,
    ListFlags,
    StatusFlags,
    UninstallFlags,
    UpgradeFlags,
)
from albatross.schemas.requests import InstallRequest, UpgradeRequest, Values
from albatross.schemas.responses import (
    InstallResponse,
    ListResponse,
    Release,
    StatusResponse,
    UninstallResponse,
    UpgradeResponse,
)
from albatross.services import paths

logger = get_logger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


class Sender(Protocol):
    async def send(
        self,
        url: str,
        method: str,
        body: RequestBody | None = None,
        *,
        headers: dict[str, str] | None = None,
        cancel: asyncio.Event | None = None,
        deadline: float | None = None,
    ) -> ResponseEnvelope: ...


class ReleaseClient:
    """Install, upgrade, list, status and uninstall releases on the albatross API."""

    def __init__(
        self,
        transport: Sender,
        base_url: str | httpx.URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._transport = transport
        self._base_url = httpx.URL(base_url)
        # Closed on exit when this client created it
        self._http_client = http_client

    async def __aenter__(self) -> ReleaseClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http_client is not None:
            await close_http_client(self._http_client)
            self._http_client = None

    async def install(
        self,
        name: str,
        chart: str,
        values: Values | None = None,
        fl: InstallFlags | None = None,
    ) -> str:
        """Install ``chart`` as release ``name`` and return the reported status."""
        fl = fl or InstallFlags()
        paths.require_name(name)
        path = paths.releases_path(fl.kube_context, fl.namespace)
        payload = InstallRequest(name=name, chart=chart, values=values or {}, flags=fl)

        envelope = await self._request(path, "POST", body=payload.to_json())
        result = _decode(InstallResponse, envelope, "Install")
        if result.error:
            raise APIError(
                message=f"Install API returned an error: {result.error}",
                status_code=envelope.status_code,
            )

        logger.info("release_installed", name=name, chart=chart, status=result.status)
        return result.status

    async def upgrade(
        self,
        name: str,
        chart: str,
        values: Values | None = None,
        fl: UpgradeFlags | None = None,
    ) -> str:
        """Upgrade release ``name``; ``fl.install`` installs it when absent."""
        fl = fl or UpgradeFlags()
        path = paths.release_path(fl.kube_context, fl.namespace, name)
        payload = UpgradeRequest(name=name, chart=chart, values=values or {}, flags=fl)

        envelope = await self._request(path, "PUT", body=payload.to_json())
        result = _decode(UpgradeResponse, envelope, "Upgrade")
        if result.error:
            raise APIError(
                message=f"Upgrade API returned an error: {result.error}",
                status_code=envelope.status_code,
            )

        logger.info("release_upgraded", name=name, chart=chart, status=result.status)
        return result.status

    async def list_releases(self, fl: ListFlags | None = None) -> list[Release]:
        fl = fl or ListFlags()
        path = paths.list_path(fl.kube_context, fl.namespace, fl.all_namespaces)

        envelope = await self._request(path, "GET", params=fl.query_params())
        if envelope.status_code == httpx.codes.NO_CONTENT:
            return []

        result = _decode(ListResponse, envelope, "List")
        if result.error:
            raise APIError(
                message=f"List API returned an error: {result.error}",
                status_code=envelope.status_code,
            )
        return result.releases

    async def status(self, name: str, fl: StatusFlags | None = None) -> Release:
        fl = fl or StatusFlags()
        path = paths.release_path(fl.kube_context, fl.namespace, name)

        envelope = await self._request(path, "GET", params=fl.query_params())
        if envelope.status_code == httpx.codes.NOT_FOUND:
            raise ReleaseNotFoundError(message=f"no release found: {name}")

        result = _decode(StatusResponse, envelope, "Status")
        if result.error:
            raise APIError(
                message=f"Status API returned an error: {result.error}",
                status_code=envelope.status_code,
            )
        return result.release

    async def uninstall(self, name: str, fl: UninstallFlags | None = None) -> Release:
        fl = fl or UninstallFlags()
        path = paths.release_path(fl.kube_context, fl.namespace, name)

        envelope = await self._request(path, "DELETE", params=fl.query_params())
        if envelope.status_code == httpx.codes.NOT_FOUND:
            raise ReleaseNotFoundError(message=f"no release found: {name}")

        result = _decode(UninstallResponse, envelope, "Uninstall")
        if result.error:
            raise APIError(
                message=f"Uninstall API returned an error: {result.error}",
                status_code=envelope.status_code,
            )

        logger.info("release_uninstalled", name=name, keep_history=fl.keep_history)
        return result.release

    async def _request(
        self,
        path: str,
        method: str,
        body: bytes | None = None,
        params: dict[str, str] | None = None,
    ) -> ResponseEnvelope:
        url = paths.build_url(self._base_url, path, params)
        headers = _JSON_HEADERS if body is not None else None
        return await self._transport.send(url, method, body, headers=headers)


def _decode(
    model: type[ResponseModel], envelope: ResponseEnvelope, operation: str
) -> ResponseModel:
    try:
        return model.model_validate_json(envelope.body)
    except ValidationError as exc:
        raise ResponseDecodeError(
            message=f"{operation} API returned an undecodable response",
            status_code=envelope.status_code,
            detail=str(exc),
        ) from exc

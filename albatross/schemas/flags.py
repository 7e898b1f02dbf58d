"""Per-operation flags for the albatross release API.

``kube_context`` and ``namespace`` select the URL path and are never sent in
a body or query string. Body flags serialize to the API's snake_case JSON;
query flags only appear when set.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, SerializerFunctionWrapHandler, model_serializer

# JSON keys dropped from bodies when empty
_OMIT_EMPTY = ("kube_token", "kube_apiserver")


class CommonFlags(BaseModel):
    kube_context: str = Field(default="", exclude=True, description="Target cluster")
    namespace: str = Field(default="", exclude=True)
    kube_token: str = ""
    kube_apiserver: str = ""

    @model_serializer(mode="wrap")
    def serialize_without_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for key in _OMIT_EMPTY:
            if not data.get(key):
                data.pop(key, None)
        return data


class InstallFlags(CommonFlags):
    dry_run: bool = False
    version: str = ""


class UpgradeFlags(CommonFlags):
    dry_run: bool = False
    version: str = ""
    install: bool = False


class ListFlags(CommonFlags):
    all_namespaces: bool = False
    deployed: bool = False
    failed: bool = False
    pending: bool = False
    uninstalled: bool = False
    uninstalling: bool = False

    def query_params(self) -> dict[str, str]:
        states = {
            "deployed": self.deployed,
            "failed": self.failed,
            "pending": self.pending,
            "uninstalled": self.uninstalled,
            "uninstalling": self.uninstalling,
        }
        return {key: "true" for key, enabled in states.items() if enabled}


class StatusFlags(CommonFlags):
    revision: int = Field(default=0, ge=0)

    def query_params(self) -> dict[str, str]:
        if self.revision:
            return {"revision": str(self.revision)}
        return {}


class UninstallFlags(CommonFlags):
    keep_history: bool = False
    dry_run: bool = False
    disable_hooks: bool = False
    timeout: int = Field(default=0, ge=0, description="Seconds to wait for resource deletion")

    def query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.keep_history:
            params["keep_history"] = "true"
        if self.dry_run:
            params["dry_run"] = "true"
        if self.disable_hooks:
            params["disable_hooks"] = "true"
        if self.timeout:
            params["timeout"] = str(self.timeout)
        return params

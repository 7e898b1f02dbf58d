from __future__ import annotations

import httpx

from albatross.core.exceptions import InvalidRequestError

DEFAULT_NAMESPACE = "default"


def _require_context(kube_context: str) -> None:
    if not kube_context:
        raise InvalidRequestError(message="kube context is a required parameter")


def require_name(name: str) -> None:
    if not name:
        raise InvalidRequestError(message="name cannot be empty")


def releases_path(kube_context: str, namespace: str) -> str:
    """Collection path used by install and namespaced list."""
    _require_context(kube_context)
    return f"/clusters/{kube_context}/namespaces/{namespace or DEFAULT_NAMESPACE}/releases"


def release_path(kube_context: str, namespace: str, name: str) -> str:
    """Path of a single release (upgrade, status, uninstall)."""
    _require_context(kube_context)
    require_name(name)
    return f"{releases_path(kube_context, namespace)}/{name}"


def list_path(kube_context: str, namespace: str, all_namespaces: bool) -> str:
    _require_context(kube_context)
    if all_namespaces:
        return f"/clusters/{kube_context}/releases"
    return releases_path(kube_context, namespace)


def build_url(base_url: httpx.URL, path: str, params: dict[str, str] | None = None) -> str:
    """Join ``path`` onto the base URL path and attach the query string."""
    joined = base_url.path.rstrip("/") + "/" + path.lstrip("/")
    return str(base_url.copy_with(path=joined, params=params or {}))

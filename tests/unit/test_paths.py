from __future__ import annotations

import httpx
import pytest

from albatross.core.exceptions import InvalidRequestError
from albatross.services import paths


class TestPaths:
    def test_releases_path(self):
        assert (
            paths.releases_path("staging", "payments")
            == "/clusters/staging/namespaces/payments/releases"
        )

    def test_namespace_defaults(self):
        assert paths.releases_path("staging", "") == "/clusters/staging/namespaces/default/releases"

    def test_release_path(self):
        assert (
            paths.release_path("staging", "payments", "redis")
            == "/clusters/staging/namespaces/payments/releases/redis"
        )

    def test_list_path_all_namespaces(self):
        assert (
            paths.list_path("staging", "payments", all_namespaces=True)
            == "/clusters/staging/releases"
        )

    def test_list_path_namespaced(self):
        assert (
            paths.list_path("staging", "payments", all_namespaces=False)
            == "/clusters/staging/namespaces/payments/releases"
        )

    def test_kube_context_required(self):
        with pytest.raises(InvalidRequestError, match="kube context is a required parameter"):
            paths.list_path("", "payments", all_namespaces=False)

    def test_name_required(self):
        with pytest.raises(InvalidRequestError, match="name cannot be empty"):
            paths.release_path("staging", "payments", "")


class TestBuildUrl:
    def test_plain_host(self):
        url = paths.build_url(httpx.URL("http://localhost:8080"), "/clusters/a/releases")
        assert url == "http://localhost:8080/clusters/a/releases"

    def test_base_path_is_kept(self):
        url = paths.build_url(httpx.URL("http://gateway/albatross/"), "clusters/a/releases")
        assert url == "http://gateway/albatross/clusters/a/releases"

    def test_query_string(self):
        url = paths.build_url(
            httpx.URL("http://localhost:8080"), "/clusters/a/releases", {"failed": "true"}
        )
        assert url == "http://localhost:8080/clusters/a/releases?failed=true"

    def test_base_query_is_dropped(self):
        url = paths.build_url(httpx.URL("http://localhost:8080/?debug=1"), "/clusters/a/releases")
        assert url == "http://localhost:8080/clusters/a/releases"

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from albatross.schemas.flags import (
    CommonFlags,
    InstallFlags,
    ListFlags,
    StatusFlags,
    UninstallFlags,
    UpgradeFlags,
)
from albatross.schemas.responses import ListResponse, Release, StatusResponse


class TestCommonFlags:
    def test_path_selectors_are_not_serialized(self):
        fl = CommonFlags(kube_context="staging", namespace="payments")
        assert fl.model_dump() == {}

    def test_credentials_serialized_when_set(self):
        fl = CommonFlags(kube_token="t0ken", kube_apiserver="https://k8s:6443")
        assert fl.model_dump() == {"kube_token": "t0ken", "kube_apiserver": "https://k8s:6443"}


class TestInstallFlags:
    def test_body_fields(self):
        fl = InstallFlags(kube_context="staging", dry_run=True, version="1.2.0")
        assert fl.model_dump() == {"dry_run": True, "version": "1.2.0"}


class TestUpgradeFlags:
    def test_body_fields(self):
        fl = UpgradeFlags(install=True, kube_token="abc")
        assert fl.model_dump() == {
            "kube_token": "abc",
            "dry_run": False,
            "version": "",
            "install": True,
        }


class TestListFlags:
    def test_only_enabled_states_are_queried(self):
        fl = ListFlags(failed=True, pending=True, all_namespaces=True)
        assert fl.query_params() == {"failed": "true", "pending": "true"}

    def test_no_states(self):
        assert ListFlags().query_params() == {}


class TestStatusFlags:
    def test_revision(self):
        assert StatusFlags(revision=3).query_params() == {"revision": "3"}

    def test_latest_revision_omitted(self):
        assert StatusFlags().query_params() == {}

    def test_negative_revision_rejected(self):
        with pytest.raises(ValidationError):
            StatusFlags(revision=-1)


class TestUninstallFlags:
    def test_all_options(self):
        fl = UninstallFlags(keep_history=True, dry_run=True, disable_hooks=True, timeout=300)
        assert fl.query_params() == {
            "keep_history": "true",
            "dry_run": "true",
            "disable_hooks": "true",
            "timeout": "300",
        }

    def test_defaults_are_omitted(self):
        assert UninstallFlags().query_params() == {}


class TestRelease:
    def test_parses_api_payload(self):
        release = Release.model_validate(
            {
                "name": "test",
                "namespace": "test",
                "version": 1,
                "updated_at": "2024-06-15T10:00:00Z",
                "status": "deployed",
                "chart": "testchart",
                "app_version": "v1",
            }
        )
        assert release.version == 1
        assert release.updated_at == datetime(2024, 6, 15, 10, 0, tzinfo=timezone.utc)

    def test_partial_payload(self):
        release = Release.model_validate({"name": "only-name"})
        assert release.status == ""
        assert release.updated_at is None


class TestResponses:
    def test_list_response_defaults(self):
        assert ListResponse.model_validate_json("{}").releases == []

    def test_status_response_error(self):
        result = StatusResponse.model_validate_json('{"error": "server error"}')
        assert result.error == "server error"
        assert result.release.name == ""

    def test_unknown_fields_ignored(self):
        result = StatusResponse.model_validate_json('{"release": {"name": "x"}, "data": "y"}')
        assert result.release.name == "x"

from __future__ import annotations

import json

from albatross.schemas.flags import InstallFlags, UpgradeFlags
from albatross.schemas.requests import InstallRequest, UpgradeRequest


class TestRequestPayloads:
    def test_install_payload_shape(self):
        fl = InstallFlags(kube_context="staging", namespace="payments", version="0.3.1")
        payload = InstallRequest(
            name="testrelease", chart="stable/redis", values={"replicas": 2}, flags=fl
        )

        data = json.loads(payload.to_json())

        assert data == {
            "Name": "testrelease",
            "Chart": "stable/redis",
            "Values": {"replicas": 2},
            "Flags": {"dry_run": False, "version": "0.3.1"},
        }

    def test_upgrade_payload_shape(self):
        fl = UpgradeFlags(kube_context="staging", install=True, kube_apiserver="https://k8s")
        payload = UpgradeRequest(name="testrelease", chart="stable/redis", flags=fl)

        data = json.loads(payload.to_json())

        assert data["Name"] == "testrelease"
        assert data["Values"] == {}
        assert data["Flags"] == {
            "kube_apiserver": "https://k8s",
            "dry_run": False,
            "version": "",
            "install": True,
        }

    def test_nested_values_are_preserved(self):
        values = {"image": {"tag": "v2", "pullPolicy": None}, "hosts": ["a", "b"]}
        payload = InstallRequest(name="r", chart="c", values=values)

        assert json.loads(payload.to_json())["Values"] == values

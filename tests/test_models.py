from __future__ import annotations

import logging

import pytest
import yaml

from servicemesh import (
    InvalidTrafficSplitError,
    RevisionTarget,
    TrafficConfig,
    dump_all,
    make_route_service,
    make_virtual_service,
    to_yaml,
)


def test_traffic_config_from_dict():
    config = TrafficConfig.from_dict({
        "": [
            {"revisionName": "v1", "percent": 90, "active": True},
            {"revisionName": "v2", "percent": 10, "active": False},
        ],
        "canary": [{"revisionName": "v2", "percent": 100}],
    })
    assert config.targets[""] == [
        RevisionTarget("v1", 90, active=True, name=""),
        RevisionTarget("v2", 10, active=False, name=""),
    ]
    assert config.targets["canary"] == [RevisionTarget("v2", 100, active=True, name="canary")]


def test_validate_accepts_complete_split(caplog):
    config = TrafficConfig({"": [RevisionTarget("v1", 60), RevisionTarget("v2", 40)]})
    config.validate()
    assert "expected 100" not in caplog.text


def test_validate_rejects_empty_target_list():
    with pytest.raises(InvalidTrafficSplitError, match="<default>: no revision targets") as exc:
        TrafficConfig({"": []}).validate()
    assert exc.value.target_name == ""


@pytest.mark.parametrize("percent", [-1, 101])
def test_validate_rejects_out_of_range_percent(percent):
    with pytest.raises(InvalidTrafficSplitError, match="canary"):
        TrafficConfig({"canary": [RevisionTarget("v1", percent)]}).validate()


def test_validate_warns_on_partial_split(caplog):
    caplog.set_level(logging.WARNING, logger="servicemesh.models")
    TrafficConfig({"tag": [RevisionTarget("v1", 70)]}).validate()
    assert "sums to 70 percent" in caplog.text


def test_route_service_ports(route):
    service = make_route_service(route)
    assert service["metadata"]["name"] == "web-service"
    assert service["metadata"]["labels"] == {"route": "web"}
    assert service["spec"]["ports"] == [{"name": "http", "port": 80}]


def test_yaml_rendering_keeps_istio_key_order(route):
    vs = make_virtual_service(route, TrafficConfig({
        "": [RevisionTarget("v1", 50), RevisionTarget("v2", 50, active=False)],
    }))
    text = to_yaml(vs)

    assert text.index("apiVersion") < text.index("metadata") < text.index("spec")
    assert yaml.safe_load(text) == vs.to_dict()
    assert "x-envoy-upstream-rq-timeout-ms: '60000'" in text


def test_dump_all_renders_each_manifest(route):
    vs = make_virtual_service(route, TrafficConfig({"": [RevisionTarget("v1", 100)]}))
    docs = list(yaml.safe_load_all(dump_all([make_route_service(route), vs])))
    assert [d["kind"] for d in docs] == ["Service", "VirtualService"]


@pytest.mark.parametrize(
    "entry, message",
    [
        ({"revisionName": "v1", "percent": 49.6}, "percent must be an integer"),
        ({"revisionName": "v1", "percent": "50"}, "percent must be an integer"),
        ({"revisionName": "v1", "percent": True}, "percent must be an integer"),
        ({"revisionName": "v1"}, "percent must be an integer"),
        ({"revisionName": "v1", "percent": 50, "active": "false"}, "active must be a boolean"),
        ({"revisionName": "v1", "percent": 50, "active": 0}, "active must be a boolean"),
        ({"percent": 50}, "no revisionName"),
        ({"revisionName": "", "percent": 50}, "no revisionName"),
        ("v1", "must be a mapping"),
    ],
)
def test_traffic_config_from_dict_rejects_malformed_targets(entry, message):
    with pytest.raises(InvalidTrafficSplitError, match=message) as exc:
        TrafficConfig.from_dict({"canary": [entry]})
    assert exc.value.target_name == "canary"


def test_traffic_config_from_dict_does_not_coerce_cold_revisions():
    with pytest.raises(InvalidTrafficSplitError):
        TrafficConfig.from_dict({"": [
            {"revisionName": "v1", "percent": 49.6, "active": "false"},
            {"percent": 50.4},
        ]})

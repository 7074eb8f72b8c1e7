"""Istio routing manifests for revisioned routes."""

from servicemesh.config import (
    DEFAULT_ENVOY_TIMEOUT_MS,
    ENVOY_TIMEOUT_HEADER,
    PORT_NAME,
    PORT_NUMBER,
    MeshSettings,
)
from servicemesh.errors import (
    ConfigError,
    InvalidTrafficSplitError,
    ServiceMeshError,
)
from servicemesh.manifest import dump_all, to_yaml
from servicemesh.models import (
    RevisionTarget,
    Route,
    RoutingRule,
    TrafficConfig,
    VirtualService,
    VirtualServiceSpec,
    WeightedDestination,
)
from servicemesh.naming import ServiceNaming
from servicemesh.route_service import make_route_service
from servicemesh.virtual_service import (
    aggregate_inactive,
    compile_weights,
    get_route_domains,
    make_route_rule,
    make_virtual_service,
    make_virtual_service_spec,
)

__all__ = [
    "DEFAULT_ENVOY_TIMEOUT_MS",
    "ENVOY_TIMEOUT_HEADER",
    "PORT_NAME",
    "PORT_NUMBER",
    "MeshSettings",
    "ConfigError",
    "InvalidTrafficSplitError",
    "ServiceMeshError",
    "dump_all",
    "to_yaml",
    "RevisionTarget",
    "Route",
    "RoutingRule",
    "TrafficConfig",
    "VirtualService",
    "VirtualServiceSpec",
    "WeightedDestination",
    "ServiceNaming",
    "make_route_service",
    "aggregate_inactive",
    "compile_weights",
    "get_route_domains",
    "make_route_rule",
    "make_virtual_service",
    "make_virtual_service_spec",
]

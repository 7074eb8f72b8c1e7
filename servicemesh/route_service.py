"""Placeholder Kubernetes Service giving a route an in-cluster name."""

from typing import Any

from servicemesh.config import PORT_NAME, PORT_NUMBER
from servicemesh.models import OwnerReference, Route
from servicemesh.naming import ServiceNaming


def make_route_service(route: Route, naming: ServiceNaming | None = None) -> dict[str, Any]:
    """
    Generate the selector-less Service for a route.

    In-mesh callers address the route by this Service's FQDN; the
    VirtualService matches that host, so the Service never needs endpoints.
    """
    naming = naming or ServiceNaming()
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {
            "name": naming.service_name_for(route.name),
            "namespace": route.namespace,
            "labels": {"route": route.name},
            "ownerReferences": [OwnerReference(name=route.name, uid=route.uid).to_dict()],
        },
        "spec": {
            "ports": [{
                "name": PORT_NAME,
                "port": PORT_NUMBER,
            }],
        },
    }

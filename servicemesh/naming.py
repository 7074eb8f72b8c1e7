"""Cluster-internal naming for routes, revisions and mesh services."""

from dataclasses import dataclass, field

from servicemesh.config import MeshSettings


@dataclass(frozen=True)
class ServiceNaming:
    """
    Formats Kubernetes service names and FQDNs.

    Every method is a pure string function of its arguments and the
    settings, so one instance can be shared between callers.
    """

    settings: MeshSettings = field(default_factory=MeshSettings)

    def service_fullname(self, name: str, namespace: str) -> str:
        """FQDN of a Kubernetes service."""
        return f"{name}.{namespace}.{self.settings.cluster_domain}"

    def service_name_for(self, name: str) -> str:
        """Name of the Kubernetes service fronting a revision or route."""
        return f"{name}{self.settings.service_suffix}"

    def revision_service_fullname(self, revision_name: str, namespace: str) -> str:
        return self.service_fullname(self.service_name_for(revision_name), namespace)

    def route_service_fullname(self, route) -> str:
        """FQDN of the route's placeholder service, used by in-mesh callers."""
        return self.service_fullname(self.service_name_for(route.name), route.namespace)

    def gateway_fullname(self) -> str:
        return self.service_fullname(self.settings.gateway_name, self.settings.system_namespace)

    def activator_fullname(self) -> str:
        return self.service_fullname(self.settings.activator_service, self.settings.system_namespace)

    def virtual_service_name(self, route) -> str:
        return route.name

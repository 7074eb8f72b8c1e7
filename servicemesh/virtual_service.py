"""
Istio VirtualService generation for routes.

A route's traffic split is compiled into one HTTP rule per traffic target
name. Active revisions are addressed directly by weight. Inactive revisions
have no running backend, so their combined share is sent to the activator,
which wakes a revision and forwards the request.

Example:
    >>> route = Route(name="web", namespace="default", domain="web.example.com")
    >>> config = TrafficConfig({"": [RevisionTarget("web-00001", 100)]})
    >>> vs = make_virtual_service(route, config)
    >>> [r.domains for r in vs.spec.http]
    [('web.example.com', 'web-service.default.svc.cluster.local')]
"""

import logging

from servicemesh.config import (
    DEFAULT_ENVOY_TIMEOUT_MS,
    ENVOY_TIMEOUT_HEADER,
    PORT_NUMBER,
)
from servicemesh.models import (
    OwnerReference,
    RevisionTarget,
    Route,
    RoutingRule,
    TrafficConfig,
    TrafficSplit,
    VirtualService,
    VirtualServiceSpec,
    WeightedDestination,
)
from servicemesh.naming import ServiceNaming

logger = logging.getLogger(__name__)

_DEFAULT_NAMING = ServiceNaming()


def make_virtual_service(
    route: Route,
    config: TrafficConfig,
    naming: ServiceNaming | None = None,
) -> VirtualService:
    """Create the VirtualService owned by ``route`` for its traffic config."""
    naming = naming or _DEFAULT_NAMING
    return VirtualService(
        name=naming.virtual_service_name(route),
        namespace=route.namespace,
        labels=(("route", route.name),),
        owner_references=(OwnerReference(name=route.name, uid=route.uid),),
        spec=make_virtual_service_spec(route, config.targets, naming),
    )


def make_virtual_service_spec(
    route: Route,
    targets: TrafficSplit,
    naming: ServiceNaming | None = None,
) -> VirtualServiceSpec:
    """Build gateways, hosts and one rule per target name in sorted order."""
    naming = naming or _DEFAULT_NAMING
    # An unresolved domain yields empty host segments rather than an error.
    domain = route.domain or ""
    route_fqdn = naming.route_service_fullname(route)

    rules = tuple(
        make_route_rule(
            get_route_domains(name, route, domain, naming),
            route.namespace,
            targets[name],
            naming,
        )
        for name in sorted(targets)
    )
    logger.debug(
        "Compiled %d rules for route %s/%s", len(rules), route.namespace, route.name
    )

    return VirtualServiceSpec(
        # The shared gateway serves traffic from outside the cluster, the
        # mesh gateway serves in-cluster callers.
        gateways=(naming.gateway_fullname(), naming.settings.mesh_gateway),
        hosts=(f"*.{domain}", domain, route_fqdn),
        http=rules,
    )


def get_route_domains(
    target_name: str,
    route: Route,
    domain: str,
    naming: ServiceNaming | None = None,
) -> list[str]:
    """Hostnames whose traffic belongs to ``target_name``."""
    naming = naming or _DEFAULT_NAMING
    if target_name == "":
        # Default traffic is reachable on the base domain and on the
        # route's in-cluster service name.
        return [domain, naming.route_service_fullname(route)]
    return [f"{target_name}.{domain}"]


def make_route_rule(
    domains: list[str],
    namespace: str,
    targets: list[RevisionTarget],
    naming: ServiceNaming | None = None,
) -> RoutingRule:
    """Match any of ``domains`` and split across ``targets``."""
    naming = naming or _DEFAULT_NAMING
    active, inactive = group_inactive_targets(targets)
    destinations = compile_weights(active, namespace, naming)

    fallback, headers = aggregate_inactive(inactive, namespace, naming)
    if fallback is not None:
        destinations.append(fallback)

    return RoutingRule(
        domains=tuple(domains),
        destinations=tuple(destinations),
        append_headers=tuple(headers.items()) if headers else (),
    )


def group_inactive_targets(
    targets: list[RevisionTarget],
) -> tuple[list[RevisionTarget], list[RevisionTarget]]:
    """Split targets into (active, inactive), keeping their relative order."""
    active: list[RevisionTarget] = []
    inactive: list[RevisionTarget] = []
    for t in targets:
        if t.active:
            active.append(t)
        else:
            inactive.append(t)
    return active, inactive


def compile_weights(
    active: list[RevisionTarget],
    namespace: str,
    naming: ServiceNaming | None = None,
) -> list[WeightedDestination]:
    """Weighted destinations for active revisions, dropping 0% entries."""
    naming = naming or _DEFAULT_NAMING
    return [
        WeightedDestination(
            host=naming.revision_service_fullname(t.revision_name, namespace),
            port=PORT_NUMBER,
            weight=t.percent,
        )
        for t in active
        if t.percent != 0
    ]


# =============================================================================
# ACTIVATOR FALLBACK
# =============================================================================

def aggregate_inactive(
    inactive: list[RevisionTarget],
    namespace: str,
    naming: ServiceNaming | None = None,
) -> tuple[WeightedDestination | None, dict[str, str] | None]:
    """
    Collapse inactive revisions into a single activator destination.

    Headers cannot vary per destination, so all inactive traffic goes to the
    activator tagged with the revision holding the largest share. With more
    than one inactive revision the split is skewed toward that revision
    until the others are activated.

    TODO: append a revision header per inactive destination once Istio
    supports destination-level headers (istio/issues#332).

    Returns:
        ``(destination, headers)``, or ``(None, None)`` when nothing is inactive
    """
    if not inactive:
        return None, None

    naming = naming or _DEFAULT_NAMING
    total_percent = 0
    dominant: RevisionTarget | None = None
    for t in inactive:
        total_percent += t.percent
        # >= keeps the last target among equal maxima.
        if t.percent >= (dominant.percent if dominant else 0):
            dominant = t

    revision_name = dominant.revision_name if dominant else ""
    logger.debug(
        "Routing %d inactive revisions (%d%%) in %s through activator for %s",
        len(inactive), total_percent, namespace, revision_name,
    )

    destination = WeightedDestination(
        host=naming.activator_fullname(),
        port=PORT_NUMBER,
        weight=total_percent,
    )
    headers = {
        naming.settings.revision_header_name: revision_name,
        naming.settings.revision_header_namespace: namespace,
        ENVOY_TIMEOUT_HEADER: DEFAULT_ENVOY_TIMEOUT_MS,
    }
    return destination, headers

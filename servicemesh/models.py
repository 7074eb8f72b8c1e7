"""Routing inputs and the Istio VirtualService objects generated from them."""

from dataclasses import dataclass, field
from typing import Any
import logging

from servicemesh.errors import InvalidTrafficSplitError

logger = logging.getLogger(__name__)

ISTIO_API_VERSION = "networking.istio.io/v1alpha3"
SERVING_API_VERSION = "serving.knative.dev/v1alpha1"


# =============================================================================
# INPUTS
# =============================================================================

@dataclass(frozen=True)
class Route:
    """A named route and the base domain it has been assigned."""
    name: str
    namespace: str
    domain: str | None = None
    uid: str = ""


@dataclass(frozen=True)
class RevisionTarget:
    """Share of a route's traffic sent to one revision."""
    revision_name: str
    percent: int
    active: bool = True
    name: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any], name: str = "") -> "RevisionTarget":
        """
        Parse one ``{revisionName, percent, active}`` entry.

        Raises:
            InvalidTrafficSplitError: the entry is not a mapping, the revision
                name is missing, or percent/active have the wrong type
        """
        if not isinstance(d, dict):
            raise InvalidTrafficSplitError(name, f"revision target must be a mapping, got {d!r}")

        revision_name = d.get("revisionName", d.get("revision_name"))
        if not isinstance(revision_name, str) or not revision_name:
            raise InvalidTrafficSplitError(name, "revision target has no revisionName")

        # bool is an int subclass; True must not pass as 1 percent.
        percent = d.get("percent")
        if isinstance(percent, bool) or not isinstance(percent, int):
            raise InvalidTrafficSplitError(
                name, f"revision {revision_name} percent must be an integer, got {percent!r}"
            )

        active = d.get("active", True)
        if not isinstance(active, bool):
            raise InvalidTrafficSplitError(
                name, f"revision {revision_name} active must be a boolean, got {active!r}"
            )

        return cls(revision_name=revision_name, percent=percent, active=active, name=name)


TrafficSplit = dict[str, list[RevisionTarget]]


@dataclass
class TrafficConfig:
    """
    Revision targets grouped by traffic target name.

    The empty name holds the route's default traffic; every other name is
    served on its own subdomain.
    """
    targets: TrafficSplit = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, list[dict[str, Any]]]) -> "TrafficConfig":
        """Parse the plain mapping form ``{name: [{revisionName, percent, active}]}``."""
        return cls(targets={
            name: [RevisionTarget.from_dict(t, name=name) for t in targets or []]
            for name, targets in (data or {}).items()
        })

    def validate(self) -> None:
        """
        Check the split before compiling it.

        Compilation never calls this; it accepts any split and produces a
        best-effort result.

        Raises:
            InvalidTrafficSplitError: a target list is empty or a percent
                is outside 0-100
        """
        for name in sorted(self.targets):
            targets = self.targets[name]
            if not targets:
                raise InvalidTrafficSplitError(name, "no revision targets")
            for t in targets:
                if not 0 <= t.percent <= 100:
                    raise InvalidTrafficSplitError(
                        name, f"revision {t.revision_name} has percent {t.percent}"
                    )
            total = sum(t.percent for t in targets)
            if total != 100:
                logger.warning(
                    "Traffic target %r sums to %d percent, expected 100", name, total
                )


# =============================================================================
# ISTIO OUTPUT
# =============================================================================

@dataclass(frozen=True)
class WeightedDestination:
    """Backend host and port receiving a weighted share of a rule's traffic."""
    host: str
    port: int
    weight: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "destination": {
                "host": self.host,
                "port": {"number": self.port},
            },
            "weight": self.weight,
        }


@dataclass(frozen=True)
class RoutingRule:
    """HTTP route matching any of ``domains`` and splitting across ``destinations``."""
    domains: tuple[str, ...]
    destinations: tuple[WeightedDestination, ...]
    # (name, value) pairs, kept as a tuple so the rule stays immutable.
    append_headers: tuple[tuple[str, str], ...] = ()

    @property
    def headers(self) -> dict[str, str] | None:
        """Headers appended to forwarded requests, or None when there are none."""
        return dict(self.append_headers) if self.append_headers else None

    def to_dict(self) -> dict[str, Any]:
        # Istio ORs the entries of a match list.
        rule: dict[str, Any] = {
            "match": [{"authority": {"exact": d}} for d in self.domains],
            "route": [d.to_dict() for d in self.destinations],
        }
        if self.append_headers:
            rule["appendHeaders"] = dict(self.append_headers)
        return rule


@dataclass(frozen=True)
class VirtualServiceSpec:
    """Gateways and hosts a rule set applies to, with rules in target-name order."""
    gateways: tuple[str, ...]
    hosts: tuple[str, ...]
    http: tuple[RoutingRule, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "gateways": list(self.gateways),
            "hosts": list(self.hosts),
            "http": [r.to_dict() for r in self.http],
        }


@dataclass(frozen=True)
class OwnerReference:
    """Reference marking the route as controller of a generated object."""
    name: str
    uid: str
    api_version: str = SERVING_API_VERSION
    kind: str = "Route"

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "uid": self.uid,
            "controller": True,
            "blockOwnerDeletion": True,
        }


@dataclass(frozen=True)
class VirtualService:
    """Istio VirtualService manifest."""
    name: str
    namespace: str
    spec: VirtualServiceSpec
    labels: tuple[tuple[str, str], ...] = ()
    owner_references: tuple[OwnerReference, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": ISTIO_API_VERSION,
            "kind": "VirtualService",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels),
                "ownerReferences": [o.to_dict() for o in self.owner_references],
            },
            "spec": self.spec.to_dict(),
        }

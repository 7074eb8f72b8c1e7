"""Service mesh settings and fixed routing constants."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any
import logging

import yaml

from servicemesh.errors import ConfigError

logger = logging.getLogger(__name__)


# Revision backends and the activator both listen on plain HTTP.
PORT_NUMBER = 80
PORT_NAME = "http"

ENVOY_TIMEOUT_HEADER = "x-envoy-upstream-rq-timeout-ms"
DEFAULT_ENVOY_TIMEOUT_MS = "60000"

MESH_GATEWAY = "mesh"


@dataclass(frozen=True)
class MeshSettings:
    """Cluster naming settings used when generating routing manifests."""

    system_namespace: str = "knative-serving"
    gateway_name: str = "knative-shared-gateway"
    mesh_gateway: str = MESH_GATEWAY
    activator_service: str = "activator-service"
    cluster_domain: str = "svc.cluster.local"
    service_suffix: str = "-service"
    revision_header_name: str = "knative-serving-revision"
    revision_header_namespace: str = "knative-serving-namespace"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "MeshSettings":
        """Build settings from a mapping, rejecting unknown keys."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Mesh settings must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown mesh settings: {', '.join(unknown)}")

        for key, value in data.items():
            if not isinstance(value, str) or not value:
                raise ConfigError(f"Mesh setting {key} must be a non-empty string")

        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "MeshSettings":
        """Load settings overrides from a YAML file."""
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read mesh settings from {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed mesh settings in {path}: {e}") from e

        settings = cls.from_dict(data)
        logger.debug("Loaded mesh settings from %s", path)
        return settings

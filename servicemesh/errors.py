"""Service mesh routing errors."""


class ServiceMeshError(Exception):
    """Base error for routing manifest generation."""
    pass


class ConfigError(ServiceMeshError):
    """Raised when mesh settings cannot be loaded."""
    pass


class InvalidTrafficSplitError(ServiceMeshError):
    """Raised when a traffic split violates caller preconditions."""

    def __init__(self, target_name: str, reason: str):
        self.target_name = target_name
        self.reason = reason
        label = target_name or "<default>"
        super().__init__(f"Invalid traffic target {label}: {reason}")

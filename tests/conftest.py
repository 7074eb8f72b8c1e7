from __future__ import annotations

import pytest

from servicemesh import Route, ServiceNaming


@pytest.fixture
def route() -> Route:
    return Route(name="web", namespace="default", domain="svc.example.com", uid="1234-abcd")


@pytest.fixture
def naming() -> ServiceNaming:
    return ServiceNaming()

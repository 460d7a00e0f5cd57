import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest

from common.rules_engine.config import default_rule_set
from common.rules_engine.models import Resource
from common.rules_engine.rule import RuleSet


@pytest.fixture
def default_rules() -> RuleSet:
    return default_rule_set()


@pytest.fixture
def make_container():
    def _make(
        *,
        name: str = "nginx",
        image: str = "nginx:1.21",
        requests=None,
        limits=None,
        security_context=None,
        resources=None,
    ) -> dict:
        container: dict = {"name": name, "image": image}
        if resources is not None:
            container["resources"] = resources
        elif requests is not None or limits is not None:
            container["resources"] = {}
            if requests is not None:
                container["resources"]["requests"] = requests
            if limits is not None:
                container["resources"]["limits"] = limits
        if security_context is not None:
            container["securityContext"] = security_context
        return container

    return _make


@pytest.fixture
def compliant_container(make_container):
    return make_container(
        requests={"cpu": "100m", "memory": "128Mi"},
        limits={"cpu": "500m", "memory": "512Mi"},
        security_context={"runAsNonRoot": True},
    )


@pytest.fixture
def make_deployment():
    def _make(containers, *, name: str = "web", namespace: str = "default") -> Resource:
        return Resource.from_document(
            {
                "apiVersion": "apps/v1",
                "kind": "Deployment",
                "metadata": {"name": name, "namespace": namespace},
                "spec": {"template": {"spec": {"containers": containers}}},
            }
        )

    return _make


@pytest.fixture
def make_pod():
    def _make(containers, *, name: str = "pod") -> Resource:
        return Resource.from_document(
            {
                "apiVersion": "v1",
                "kind": "Pod",
                "metadata": {"name": name},
                "spec": {"containers": containers},
            }
        )

    return _make
